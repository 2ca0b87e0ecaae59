"""High level reader for ISHNE Holter files."""

from pathlib import Path
from typing import Iterator, Optional, Union

from ._logging import logger
from .core.config import ExportFormat, ExportOptions
from .core.models import Header, SampleSet, DecodeSummary
from .core.exceptions import IoError, StateError
from .decoding.header_codec import Buffer, parse_header
from .decoding.sample_decoder import SampleDecoder
from .export.exporter import Exporter
from .export.sinks import Sink


class IshneReader:
    """Decodes one ISHNE recording held in memory.

    ``parse_header`` must run first; every other operation raises
    ``StateError`` until it has. Samples are decoded again on each call.
    """

    def __init__(self, buffer: Buffer):
        """
        Initialize reader.

        Args:
            buffer: Complete file content
        """
        self.buffer = buffer
        self._header: Optional[Header] = None

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'IshneReader':
        """
        Read a whole file into memory.

        Raises:
            IoError: If the file cannot be read
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise IoError(f"Failed to read {path}: {e}") from e
        logger.debug(f"Read {len(data)} bytes from {path}")
        return cls(data)

    def parse_header(self) -> Header:
        """Decode and remember the fixed header."""
        self._header = parse_header(self.buffer)
        return self._header

    @property
    def header(self) -> Header:
        if self._header is None:
            raise StateError("Header has not been parsed yet; call parse_header() first")
        return self._header

    @property
    def has_header(self) -> bool:
        return self._header is not None

    def decode_samples(self) -> SampleSet:
        """Demultiplex the ECG block using the parsed header."""
        return SampleDecoder(self._header).decode(self.buffer)

    def get_summary(self) -> DecodeSummary:
        """Declared vs. actual sizes of the recording."""
        return SampleDecoder(self._header).summary(self.buffer)

    def exporter(self) -> Exporter:
        return Exporter(self.header, self.decode_samples())

    def iter_chunks(self, fmt: ExportFormat, options: Optional[ExportOptions] = None) -> Iterator[str]:
        """Lazy chunk generator for ``fmt``."""
        return self.exporter().iter_chunks(fmt, options)

    async def export(self, sink: Sink, fmt: ExportFormat, options: Optional[ExportOptions] = None) -> int:
        return await self.exporter().export(sink, fmt, options)

    async def export_to_json(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        """Stream the JSON export to ``sink``."""
        return await self.export(sink, ExportFormat.JSON, options)

    async def export_to_csv(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        """Stream the CSV export to ``sink``."""
        return await self.export(sink, ExportFormat.CSV, options)

    async def export_to_text(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        """Stream the tab-delimited export to ``sink``."""
        return await self.export(sink, ExportFormat.TEXT, options)
