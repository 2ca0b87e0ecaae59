"""Fixed header decoding for ISHNE files."""

import struct
from typing import Any, Dict, Union

from .._logging import logger
from ..core.models import Header
from ..core.exceptions import FormatError
from ..protocols.layout import (
    CHECKSUM_FORMAT,
    FIXED_HEADER_SIZE,
    HEADER_FIELDS,
    HEADER_FORMAT,
    HEADER_START,
    MAGIC,
    MAGIC_SIZE,
)

Buffer = Union[bytes, bytearray, memoryview]


def decode_text(raw: bytes) -> str:
    """Decode a fixed-width text field, dropping trailing NUL padding only."""
    return bytes(raw).rstrip(b"\x00").decode("latin-1")


class HeaderCodec:
    """Decoder for the fixed-layout ISHNE header."""

    def __init__(self):
        self._struct = struct.Struct(HEADER_FORMAT)
        self._checksum = struct.Struct(CHECKSUM_FORMAT)

    def parse(self, buffer: Buffer) -> Header:
        """
        Decode the fixed header.

        Args:
            buffer: Whole file content, or at least its fixed header region

        Returns:
            Parsed Header

        Raises:
            FormatError: If the buffer is too short or the magic marker is wrong
        """
        if len(buffer) < FIXED_HEADER_SIZE:
            raise FormatError(
                f"Buffer too short for ISHNE header: {len(buffer)} < {FIXED_HEADER_SIZE} bytes"
            )

        magic = bytes(buffer[:MAGIC_SIZE])
        if magic != MAGIC:
            raise FormatError(f"Invalid magic marker {magic!r}, expected {MAGIC!r}")

        try:
            (checksum,) = self._checksum.unpack_from(buffer, MAGIC_SIZE)
            values = self._struct.unpack_from(buffer, HEADER_START)
        except struct.error as e:
            raise FormatError(f"Header unpacking failed: {e}") from e

        header = Header(checksum=checksum, **self._group_fields(values))
        logger.debug(
            f"Parsed ISHNE header: {header.n_leads} leads at {header.sampling_rate} Hz, "
            f"{header.declared_samples} declared samples, ECG block at {header.ecg_block_offset}"
        )
        return header

    @staticmethod
    def _group_fields(values: tuple) -> Dict[str, Any]:
        """Map the flat unpacked tuple onto header field names."""
        fields: Dict[str, Any] = {}
        position = 0
        for name, code, _ in HEADER_FIELDS:
            if code.endswith("s"):
                fields[name] = decode_text(values[position])
                position += 1
            elif code[:-1]:
                count = int(code[:-1])
                fields[name] = tuple(values[position:position + count])
                position += count
            else:
                fields[name] = values[position]
                position += 1
        return fields


_codec = HeaderCodec()


def parse_header(buffer: Buffer) -> Header:
    """Decode the fixed header of an ISHNE buffer."""
    return _codec.parse(buffer)
