"""Streaming JSON / CSV / text export of decoded ISHNE recordings."""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, List, Optional
import numpy as np

from .._logging import logger
from ..core.config import ExportFormat, ExportOptions
from ..core.models import Header, SampleSet
from ..core.exceptions import FormatError, IoError
from .sinks import Sink

NANOVOLTS_PER_MILLIVOLT = 1_000_000


def _check_inputs(header: Header, samples: SampleSet) -> None:
    if header.sampling_rate <= 0:
        raise FormatError(f"Invalid sampling rate {header.sampling_rate}, must be positive")
    if samples.n_leads != header.n_leads:
        raise FormatError(
            f"Sample set has {samples.n_leads} leads, header declares {header.n_leads}"
        )


def _resolution_column(header: Header) -> np.ndarray:
    return np.asarray(header.active_resolution, dtype=np.int64)[:, None]


def _scale(raw: np.ndarray, resolution: np.ndarray, decimal_places: int) -> List[List[float]]:
    products = raw.astype(np.int64) * resolution
    return [
        [round(p / NANOVOLTS_PER_MILLIVOLT, decimal_places) for p in row]
        for row in products.tolist()
    ]


def scale_block(header: Header, samples: SampleSet, start: int, stop: int,
                decimal_places: int) -> List[List[float]]:
    """
    Convert raw amplitudes of samples ``[start, stop)`` to millivolts.

    Each value is ``round(raw * resolution / 1_000_000, decimal_places)``
    with the resolution of its lead in nanovolts.

    Returns:
        One list of rounded values per lead
    """
    resolution = _resolution_column(header)
    return _scale(samples.data[:, start:stop], resolution, decimal_places)


def time_values(start: int, stop: int, sampling_rate: int, decimal_places: int) -> List[float]:
    """Elapsed time in seconds of samples ``[start, stop)``."""
    return [round(i / sampling_rate, decimal_places) for i in range(start, stop)]


def _batches(total: int, size: int) -> Iterator[range]:
    for start in range(0, total, size):
        yield range(start, min(start + size, total))


def build_metadata(header: Header, samples: SampleSet) -> Dict[str, Any]:
    """Metadata object of the JSON export."""
    return {
        "patientInfo": {
            "id": header.subject_id,
            "firstName": header.first_name,
            "lastName": header.last_name,
            "sex": header.sex,
            "race": header.race,
            "birthDate": list(header.birth_date),
        },
        "recordInfo": {
            "date": list(header.record_date),
            "startTime": list(header.start_time),
            "samplingRate": header.sampling_rate,
            "numberOfLeads": header.n_leads,
            "leadResolutions": header.active_resolution,
            "duration": samples.samples_per_lead / header.sampling_rate,
        },
        "technical": {
            "fileVersion": header.file_version,
            "pacemaker": header.pacemaker,
            "recorder": header.recorder,
        },
    }


def _json_array(values: List[float], first: bool) -> str:
    body = json.dumps(values)[1:-1]
    if first or not body:
        return body
    return ", " + body


def iter_json(header: Header, samples: SampleSet,
              options: Optional[ExportOptions] = None) -> Iterator[str]:
    """
    Produce the JSON export as a sequence of text chunks.

    Joined together the chunks form one JSON object
    ``{"metadata": {...}, "data": {"time": [...], "leads": [[...], ...]}}``.
    """
    options = (options or ExportOptions()).for_format(ExportFormat.JSON)
    _check_inputs(header, samples)
    total = samples.samples_per_lead
    dp = options.decimal_places

    yield '{"metadata": ' + json.dumps(build_metadata(header, samples)) + ', "data": {'

    if options.time_column:
        yield '"time": ['
        for i, batch in enumerate(_batches(total, options.chunk_size)):
            values = time_values(batch.start, batch.stop, header.sampling_rate, dp)
            yield _json_array(values, first=i == 0)
        yield '], '

    resolution = _resolution_column(header)
    yield '"leads": ['
    for lead in range(header.n_leads):
        yield "[" if lead == 0 else ", ["
        for i, batch in enumerate(_batches(total, options.chunk_size)):
            raw = samples.data[lead:lead + 1, batch.start:batch.stop]
            values = _scale(raw, resolution[lead:lead + 1], dp)[0]
            yield _json_array(values, first=i == 0)
        yield "]"
    yield "]}}"


def iter_csv(header: Header, samples: SampleSet,
             options: Optional[ExportOptions] = None) -> Iterator[str]:
    """
    Produce the CSV export as a sequence of text chunks.

    The first chunk is the column header row (if enabled); every further chunk
    holds up to ``options.chunk_size`` complete rows.
    """
    options = (options or ExportOptions()).for_format(ExportFormat.CSV)
    return _iter_delimited(header, samples, options)


def iter_text(header: Header, samples: SampleSet,
              options: Optional[ExportOptions] = None) -> Iterator[str]:
    """Tab-delimited variant of :func:`iter_csv`."""
    options = (options or ExportOptions()).for_format(ExportFormat.TEXT)
    return _iter_delimited(header, samples, options)


def _join_rows(rows: Iterable[Iterable[Any]], separator: str) -> str:
    return "".join(separator.join(str(value) for value in row) + "\n" for row in rows)


def _iter_delimited(header: Header, samples: SampleSet, options: ExportOptions) -> Iterator[str]:
    _check_inputs(header, samples)
    total = samples.samples_per_lead
    dp = options.decimal_places
    separator = options.separator

    if options.include_header:
        columns = ["Time(s)"] if options.time_column else []
        columns += [f"Lead{lead + 1}(mV)" for lead in range(header.n_leads)]
        yield _join_rows([columns], separator)

    for batch in _batches(total, options.chunk_size):
        leads = scale_block(header, samples, batch.start, batch.stop, dp)
        rows: Iterable[tuple] = zip(*leads)
        if options.time_column:
            times = time_values(batch.start, batch.stop, header.sampling_rate, dp)
            rows = ((t,) + row for t, row in zip(times, rows))
        yield _join_rows(rows, separator)


@asynccontextmanager
async def open_sink(sink: Sink) -> AsyncIterator[Sink]:
    """Open ``sink`` and close it on every exit path."""
    try:
        await sink.open()
    except OSError as e:
        raise IoError(f"Failed to open sink: {e}") from e
    try:
        yield sink
    except BaseException:
        # keep the error already propagating
        try:
            await sink.close()
        except OSError as e:
            logger.error(f"Failed to close sink after an earlier error: {e}")
        raise
    try:
        await sink.close()
    except OSError as e:
        raise IoError(f"Failed to close sink: {e}") from e


async def stream_to_sink(chunks: Iterator[str], sink: Sink) -> int:
    """
    Write every chunk to ``sink``.

    The chunk producer is closed as soon as a write fails, and the sink is
    closed whether streaming completes, fails or is cancelled.

    Returns:
        Number of characters written

    Raises:
        IoError: If the sink fails to open, write or close
    """
    written = 0
    try:
        async with open_sink(sink):
            for chunk in chunks:
                try:
                    await sink.write(chunk)
                except OSError as e:
                    logger.error(f"Sink write failed after {written} characters: {e}")
                    raise IoError(f"Failed to write to sink: {e}") from e
                written += len(chunk)
    finally:
        close = getattr(chunks, "close", None)
        if close is not None:
            close()
    return written


class Exporter:
    """Exports one decoded recording to sinks."""

    def __init__(self, header: Header, samples: SampleSet):
        """
        Initialize exporter.

        Args:
            header: Parsed header
            samples: Samples decoded with that header
        """
        self.header = header
        self.samples = samples

    def iter_chunks(self, fmt: ExportFormat, options: Optional[ExportOptions] = None) -> Iterator[str]:
        """Chunk generator for ``fmt``."""
        producers = {
            ExportFormat.JSON: iter_json,
            ExportFormat.CSV: iter_csv,
            ExportFormat.TEXT: iter_text,
        }
        return producers[ExportFormat(fmt)](self.header, self.samples, options)

    async def export(self, sink: Sink, fmt: ExportFormat,
                     options: Optional[ExportOptions] = None) -> int:
        """Stream the export in ``fmt`` to ``sink``."""
        fmt = ExportFormat(fmt)
        _check_inputs(self.header, self.samples)
        written = await stream_to_sink(self.iter_chunks(fmt, options), sink)
        logger.info(
            f"Exported {self.samples.samples_per_lead} samples x {self.header.n_leads} leads "
            f"as {fmt.value} ({written} characters)"
        )
        return written

    async def export_to_json(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        return await self.export(sink, ExportFormat.JSON, options)

    async def export_to_csv(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        return await self.export(sink, ExportFormat.CSV, options)

    async def export_to_text(self, sink: Sink, options: Optional[ExportOptions] = None) -> int:
        return await self.export(sink, ExportFormat.TEXT, options)


async def export_to_json(sink: Sink, header: Header, samples: SampleSet,
                         options: Optional[ExportOptions] = None) -> int:
    """Stream the JSON export of a decoded recording to ``sink``."""
    return await Exporter(header, samples).export_to_json(sink, options)


async def export_to_csv(sink: Sink, header: Header, samples: SampleSet,
                        options: Optional[ExportOptions] = None) -> int:
    """Stream the CSV export of a decoded recording to ``sink``."""
    return await Exporter(header, samples).export_to_csv(sink, options)


async def export_to_text(sink: Sink, header: Header, samples: SampleSet,
                         options: Optional[ExportOptions] = None) -> int:
    """Stream the tab-delimited export of a decoded recording to ``sink``."""
    return await Exporter(header, samples).export_to_text(sink, options)
