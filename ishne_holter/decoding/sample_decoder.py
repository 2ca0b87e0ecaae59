"""ECG block demultiplexing for ISHNE files."""

from typing import Optional, Union
import numpy as np

from .._logging import logger
from ..core.models import Header, SampleSet, SampleCountMismatch, DecodeSummary
from ..core.exceptions import FormatError, StateError
from ..protocols.layout import MAX_LEADS, SAMPLE_FORMAT, SAMPLE_SIZE

Buffer = Union[bytes, bytearray, memoryview]


class SampleDecoder:
    """Demultiplexer for the interleaved ECG block.

    Samples are stored sample-major, lead-minor: the values of every lead for
    one time step are adjacent before the next time step starts.
    """

    def __init__(self, header: Optional[Header]):
        """
        Initialize sample decoder.

        Args:
            header: Parsed header of the recording

        Raises:
            StateError: If no header is given
        """
        if header is None:
            raise StateError("A parsed header is required before decoding samples")
        self.header = header

    def _check_layout(self, buffer_length: int) -> None:
        """Reject headers that make the ECG block undefined."""
        n_leads = self.header.n_leads
        if not 1 <= n_leads <= MAX_LEADS:
            raise FormatError(f"Invalid lead count {n_leads}, must be between 1 and {MAX_LEADS}")
        if self.header.ecg_block_offset > buffer_length:
            raise FormatError(
                f"ECG block offset {self.header.ecg_block_offset} is beyond the "
                f"end of the buffer ({buffer_length} bytes)"
            )

    def _check_sampling_rate(self) -> None:
        if self.header.sampling_rate <= 0:
            raise FormatError(f"Invalid sampling rate {self.header.sampling_rate}, must be positive")

    def available_bytes(self, buffer_length: int) -> int:
        """Bytes from the ECG block offset to the end of the buffer."""
        self._check_layout(buffer_length)
        return buffer_length - self.header.ecg_block_offset

    def actual_samples(self, buffer_length: int) -> int:
        """Complete samples per lead that the buffer really holds."""
        frame_size = SAMPLE_SIZE * self.header.n_leads
        return self.available_bytes(buffer_length) // frame_size

    def decode(self, buffer: Buffer) -> SampleSet:
        """
        Demultiplex the ECG block into per-lead sample sequences.

        The lead length is derived from the buffer size, not from the declared
        sample count. A disagreement is reported as a diagnostic on the result.

        Args:
            buffer: Whole file content

        Returns:
            SampleSet of shape (n_leads, actual_samples)

        Raises:
            FormatError: If the lead count or ECG block offset is invalid
        """
        n_leads = self.header.n_leads
        actual = self.actual_samples(len(buffer))

        if actual:
            frames = np.frombuffer(
                buffer,
                dtype=SAMPLE_FORMAT,
                count=actual * n_leads,
                offset=self.header.ecg_block_offset,
            )
            data = frames.reshape(actual, n_leads).T.astype(np.int16)
        else:
            data = np.empty((n_leads, 0), dtype=np.int16)
        data.flags.writeable = False

        diagnostics = ()
        if actual != self.header.declared_samples:
            mismatch = SampleCountMismatch(
                declared_samples=self.header.declared_samples,
                actual_samples=actual,
            )
            logger.warning(mismatch.describe())
            diagnostics = (mismatch,)

        return SampleSet(data=data, diagnostics=diagnostics)

    def summary(self, buffer: Buffer) -> DecodeSummary:
        """
        Compare the declared sizes with what the buffer holds.

        Args:
            buffer: Whole file content

        Returns:
            DecodeSummary with sample counts, durations and byte sizes
        """
        self._check_sampling_rate()
        header = self.header
        available = self.available_bytes(len(buffer))
        actual = self.actual_samples(len(buffer))
        frame_size = SAMPLE_SIZE * header.n_leads

        return DecodeSummary(
            n_leads=header.n_leads,
            sampling_rate=header.sampling_rate,
            declared_samples=header.declared_samples,
            actual_samples=actual,
            declared_duration=header.declared_samples / header.sampling_rate,
            actual_duration=actual / header.sampling_rate,
            declared_bytes=header.declared_samples * frame_size,
            actual_bytes=actual * frame_size,
            available_bytes=available,
            resolution=header.active_resolution,
        )


def decode_samples(buffer: Buffer, header: Optional[Header]) -> SampleSet:
    """Demultiplex the ECG block of ``buffer`` described by ``header``."""
    return SampleDecoder(header).decode(buffer)


def get_summary(buffer: Buffer, header: Optional[Header]) -> DecodeSummary:
    """Declared vs. actual sizes of the recording in ``buffer``."""
    return SampleDecoder(header).summary(buffer)
