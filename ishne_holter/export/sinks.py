"""Destinations for streamed exports."""

import asyncio
from pathlib import Path
from typing import Optional, Protocol, TextIO, Union, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """Accepts text chunks. Any call may raise ``OSError``."""

    async def open(self) -> None: ...

    async def write(self, chunk: str) -> None: ...

    async def close(self) -> None: ...


class FileSink:
    """Writes chunks to a file; blocking calls run in the default executor."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self._file: Optional[TextIO] = None

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def open(self) -> None:
        self._file = await self._run(lambda: open(self.path, "w", encoding=self.encoding, newline=""))

    async def write(self, chunk: str) -> None:
        if self._file is None:
            raise OSError(f"Sink for {self.path} is not open")
        await self._run(self._file.write, chunk)

    async def close(self) -> None:
        if self._file is None:
            return
        file, self._file = self._file, None
        await self._run(file.close)

    @property
    def is_open(self) -> bool:
        return self._file is not None


class TextStreamSink:
    """Writes chunks to an already open text stream such as ``sys.stdout``."""

    def __init__(self, stream: TextIO, close_stream: bool = False):
        self.stream = stream
        self.close_stream = close_stream
        self.closed = False

    async def open(self) -> None:
        self.closed = False

    async def write(self, chunk: str) -> None:
        self.stream.write(chunk)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.stream.flush()
        if self.close_stream:
            self.stream.close()
