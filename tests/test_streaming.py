"""Tests for streaming exports to sinks and the reader facade."""

import asyncio
import io
import json

import pytest

from ishne_holter import (
    ExportOptions,
    FileSink,
    FormatError,
    IoError,
    IshneReader,
    StateError,
    TextStreamSink,
    decode_samples,
    export_to_csv,
    iter_csv,
    parse_header,
)
from ishne_holter.export.exporter import stream_to_sink


class TrackingChunks:
    """Chunk iterator that records how far it was consumed and whether it was closed."""

    def __init__(self, chunks):
        self._chunks = iter(chunks)
        self.produced = 0
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        chunk = next(self._chunks)
        self.produced += 1
        return chunk

    def close(self):
        self.closed = True


@pytest.fixture
def reader(scenario_buffer: bytes) -> IshneReader:
    reader = IshneReader(scenario_buffer)
    reader.parse_header()
    return reader


@pytest.mark.asyncio
async def test_stream_writes_every_chunk_in_order(sink_factory):
    sink = sink_factory()
    written = await stream_to_sink(iter(["a", "bc", "def"]), sink)

    assert sink.chunks == ["a", "bc", "def"]
    assert written == 6
    assert sink.opened and sink.closed
    assert sink.close_calls == 1


@pytest.mark.asyncio
async def test_write_failure_stops_producer_and_closes_sink(sink_factory):
    sink = sink_factory(fail_on_write=1)
    chunks = TrackingChunks(["a", "b", "c", "d"])

    with pytest.raises(IoError, match="disk full") as excinfo:
        await stream_to_sink(chunks, sink)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert sink.chunks == ["a"]
    assert chunks.produced == 2
    assert chunks.closed
    assert sink.closed


@pytest.mark.asyncio
async def test_open_failure_raises_io_error(sink_factory):
    sink = sink_factory(fail_on_open=True)
    chunks = TrackingChunks(["a"])

    with pytest.raises(IoError, match="open"):
        await stream_to_sink(chunks, sink)

    assert chunks.produced == 0
    assert chunks.closed
    assert sink.close_calls == 0


@pytest.mark.asyncio
async def test_close_failure_raises_io_error(sink_factory):
    sink = sink_factory(fail_on_close=True)

    with pytest.raises(IoError, match="close"):
        await stream_to_sink(iter(["a"]), sink)

    assert sink.chunks == ["a"]


@pytest.mark.asyncio
async def test_write_error_survives_close_failure(sink_factory):
    sink = sink_factory(fail_on_write=1, fail_on_close=True)

    with pytest.raises(IoError, match="write") as excinfo:
        await stream_to_sink(iter(["a", "b"]), sink)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert str(excinfo.value.__cause__) == "disk full"
    assert sink.close_calls == 1


@pytest.mark.asyncio
async def test_cancellation_releases_sink(sink_factory):
    sink = sink_factory(block_on_write=1)
    chunks = TrackingChunks(["a", "b", "c"])

    task = asyncio.create_task(stream_to_sink(chunks, sink))
    await sink.blocked.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert sink.closed
    assert chunks.closed
    assert sink.chunks == ["a"]


@pytest.mark.asyncio
async def test_format_error_during_streaming_closes_sink(scenario_buffer: bytes, sink_factory):
    header = parse_header(scenario_buffer)
    samples = decode_samples(scenario_buffer, header)
    broken = header.model_copy(update={"sampling_rate": 0})
    sink = sink_factory()

    with pytest.raises(FormatError):
        await stream_to_sink(iter_csv(broken, samples), sink)

    assert sink.closed
    assert sink.chunks == []


@pytest.mark.asyncio
async def test_export_to_csv_module_function(scenario_buffer: bytes, sink_factory):
    header = parse_header(scenario_buffer)
    samples = decode_samples(scenario_buffer, header)
    sink = sink_factory()

    await export_to_csv(sink, header, samples)

    assert sink.text.splitlines()[0] == "Time(s),Lead1(mV),Lead2(mV)"
    assert len(sink.text.splitlines()) == 3


@pytest.mark.asyncio
async def test_reader_exports(reader: IshneReader, sink_factory):
    json_sink, csv_sink, text_sink = sink_factory(), sink_factory(), sink_factory()

    await reader.export_to_json(json_sink)
    await reader.export_to_csv(csv_sink, ExportOptions(include_header=False))
    await reader.export_to_text(text_sink)

    document = json.loads(json_sink.text)
    assert document["metadata"]["recordInfo"]["numberOfLeads"] == 2
    assert len(document["data"]["leads"]) == 2
    assert csv_sink.text.splitlines() == ["0.0,0.02,-0.01", "0.0,0.05,0.2"]
    assert text_sink.text.splitlines()[0] == "Time(s)\tLead1(mV)\tLead2(mV)"
    assert all(sink.closed for sink in (json_sink, csv_sink, text_sink))


@pytest.mark.asyncio
async def test_file_sink(reader: IshneReader, tmp_path):
    path = tmp_path / "out.csv"
    sink = FileSink(path)

    written = await reader.export_to_csv(sink)

    assert not sink.is_open
    content = path.read_text(encoding="utf-8")
    assert written == len(content)
    assert content.splitlines() == [
        "Time(s),Lead1(mV),Lead2(mV)",
        "0.0,0.02,-0.01",
        "0.0,0.05,0.2",
    ]


@pytest.mark.asyncio
async def test_file_sink_open_failure(reader: IshneReader, tmp_path):
    sink = FileSink(tmp_path / "missing-dir" / "out.csv")

    with pytest.raises(IoError):
        await reader.export_to_csv(sink)


@pytest.mark.asyncio
async def test_file_sink_write_before_open(tmp_path):
    sink = FileSink(tmp_path / "out.csv")

    with pytest.raises(OSError, match="not open"):
        await sink.write("a")

    assert not (tmp_path / "out.csv").exists()


@pytest.mark.asyncio
async def test_text_stream_sink_keeps_stream_open(reader: IshneReader):
    stream = io.StringIO()
    sink = TextStreamSink(stream)

    await reader.export_to_text(sink)

    assert sink.closed
    assert not stream.closed
    assert stream.getvalue().count("\n") == 3


@pytest.mark.asyncio
async def test_concurrent_exports_are_independent(reader: IshneReader, ishne_factory, sink_factory):
    other = IshneReader(ishne_factory(samples=[(1, 1)] * 50))
    other.parse_header()
    first, second = sink_factory(), sink_factory()

    await asyncio.gather(
        reader.export_to_csv(first, ExportOptions(chunk_size=1)),
        other.export_to_csv(second, ExportOptions(chunk_size=1)),
    )

    assert len(first.text.splitlines()) == 3
    assert len(second.text.splitlines()) == 51


def test_reader_requires_parsed_header(scenario_buffer: bytes):
    reader = IshneReader(scenario_buffer)

    assert not reader.has_header
    with pytest.raises(StateError):
        reader.decode_samples()
    with pytest.raises(StateError):
        reader.get_summary()
    with pytest.raises(StateError):
        reader.header
    with pytest.raises(StateError):
        reader.iter_chunks("csv")


@pytest.mark.asyncio
async def test_reader_export_before_parse_raises_state_error(scenario_buffer: bytes, sink_factory):
    sink = sink_factory()
    with pytest.raises(StateError):
        await IshneReader(scenario_buffer).export_to_json(sink)
    assert not sink.opened


def test_reader_decodes_fresh_each_call(reader: IshneReader):
    assert reader.decode_samples() is not reader.decode_samples()
    assert reader.get_summary().actual_samples == 2


def test_reader_from_file(tmp_path, scenario_buffer: bytes):
    path = tmp_path / "recording.ecg"
    path.write_bytes(scenario_buffer)

    reader = IshneReader.from_file(path)

    assert reader.parse_header().n_leads == 2


def test_reader_from_missing_file(tmp_path):
    with pytest.raises(IoError):
        IshneReader.from_file(tmp_path / "nope.ecg")
