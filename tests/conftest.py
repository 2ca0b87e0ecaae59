"""Shared test fixtures for ISHNE Holter tests."""

import asyncio
import struct
from typing import Callable, List, Optional, Sequence

import matplotlib
import pytest

matplotlib.use("Agg")

HEADER_START = 10


def _text(value: bytes, width: int) -> bytes:
    return value.ljust(width, b"\x00")[:width]


def build_ishne(
    samples: Sequence[Sequence[int]] = ((100, -50), (250, 1000)),
    n_leads: int = 2,
    sampling_rate: int = 250,
    resolution: Sequence[int] = (200, 200),
    ecg_block_offset: int = 600,
    declared_samples: Optional[int] = None,
    trailing: bytes = b"",
    magic: bytes = b"ISHNE1.0",
    first_name: bytes = b"John",
    last_name: bytes = b"Doe",
    subject_id: bytes = b"SUBJ-001",
    recorder: bytes = b"Holter-3000",
) -> bytes:
    """Build an ISHNE buffer; ``samples`` is sample-major, one row per time step."""
    if declared_samples is None:
        declared_samples = len(samples)
    buf = bytearray(max(ecg_block_offset, HEADER_START + 424))
    buf[0:8] = magic
    struct.pack_into("<H", buf, 8, 0xBEEF)

    def put(fmt, offset, *values):
        struct.pack_into("<" + fmt, buf, HEADER_START + offset, *values)

    put("I", 0, 64)
    put("I", 4, declared_samples)
    put("I", 8, 522)
    put("I", 12, ecg_block_offset)
    put("H", 16, 1)
    put("40s", 18, _text(first_name, 40))
    put("40s", 58, _text(last_name, 40))
    put("20s", 98, _text(subject_id, 20))
    put("H", 118, 1)
    put("H", 120, 2)
    put("3H", 122, 14, 7, 1961)
    put("3H", 128, 3, 10, 2024)
    put("3H", 134, 4, 10, 2024)
    put("3H", 140, 8, 30, 15)
    put("H", 146, n_leads)
    put("12h", 148, *([5, 11] + [-9] * 10))
    put("12h", 172, *([1, 2] + [-9] * 10))
    put("12h", 196, *(list(resolution) + [0] * (12 - len(resolution))))
    put("H", 220, 0)
    put("40s", 222, _text(recorder, 40))
    put("H", 262, sampling_rate)
    put("80s", 264, _text(b"proprietary block", 80))
    put("80s", 344, _text(b"(c) test", 80))

    flat: List[int] = [value for row in samples for value in row]
    data = struct.pack(f"<{len(flat)}h", *flat)
    return bytes(buf[:ecg_block_offset]) + data + trailing


@pytest.fixture
def ishne_factory() -> Callable[..., bytes]:
    """Factory building synthetic ISHNE buffers."""
    return build_ishne


@pytest.fixture
def scenario_buffer() -> bytes:
    """2 leads, 250 Hz, ECG block at 600, 608 bytes in total."""
    return build_ishne()


class RecordingSink:
    """Sink that records every call and can fail on demand."""

    def __init__(self, fail_on_write: Optional[int] = None, fail_on_open: bool = False,
                 fail_on_close: bool = False, block_on_write: Optional[int] = None):
        self.chunks: List[str] = []
        self.opened = False
        self.closed = False
        self.close_calls = 0
        self.fail_on_write = fail_on_write
        self.fail_on_open = fail_on_open
        self.fail_on_close = fail_on_close
        self.block_on_write = block_on_write
        self.blocked = asyncio.Event()

    async def open(self) -> None:
        if self.fail_on_open:
            raise OSError("cannot open")
        self.opened = True

    async def write(self, chunk: str) -> None:
        index = len(self.chunks)
        if index == self.fail_on_write:
            raise OSError("disk full")
        if index == self.block_on_write:
            self.blocked.set()
            await asyncio.Event().wait()
        self.chunks.append(chunk)

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True
        if self.fail_on_close:
            raise OSError("cannot close")

    @property
    def text(self) -> str:
        return "".join(self.chunks)


@pytest.fixture
def sink_factory() -> Callable[..., RecordingSink]:
    return RecordingSink
