"""Data models for the ISHNE Holter reader."""

from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from dataclasses import dataclass, field
import numpy as np

from ..protocols.layout import LEAD_SPECS, LEAD_QUALITIES, PACEMAKER_CODES, SEX_CODES, MAX_LEADS

Triple = Tuple[int, int, int]
LeadTuple = Tuple[int, ...]


class Header(BaseModel):
    """Fixed header of one ISHNE recording."""
    model_config = ConfigDict(frozen=True)

    checksum: int = Field(default=0, ge=0, description="Stored CRC-16, not validated")
    var_block_size: int = Field(..., ge=0, description="Variable block size in bytes")
    declared_samples: int = Field(..., ge=0, description="Declared sample count per lead")
    var_block_offset: int = Field(..., ge=0, description="Byte offset of the variable block")
    ecg_block_offset: int = Field(..., ge=0, description="Byte offset of the ECG block")
    file_version: int = Field(default=0)

    first_name: str = ""
    last_name: str = ""
    subject_id: str = ""
    sex: int = 0
    race: int = 0

    birth_date: Triple = (0, 0, 0)
    record_date: Triple = (0, 0, 0)
    file_date: Triple = (0, 0, 0)
    start_time: Triple = (0, 0, 0)

    n_leads: int = Field(..., ge=0, description="Number of stored leads")
    lead_spec: LeadTuple = Field(default=(0,) * MAX_LEADS, description="Lead type codes")
    lead_quality: LeadTuple = Field(default=(0,) * MAX_LEADS, description="Lead quality codes")
    resolution: LeadTuple = Field(default=(0,) * MAX_LEADS, description="Lead resolution in nV")

    pacemaker: int = 0
    recorder: str = ""
    sampling_rate: int = Field(..., ge=0, description="Sampling rate in Hz")
    proprietary: str = ""
    copyright: str = ""

    @property
    def active_resolution(self) -> List[int]:
        """Resolutions of the stored leads."""
        return list(self.resolution[:self.n_leads])

    @property
    def lead_names(self) -> List[str]:
        """Lead labels from the lead-spec codes."""
        return [LEAD_SPECS.get(code, f"code {code}") for code in self.lead_spec[:self.n_leads]]

    @property
    def quality_labels(self) -> List[str]:
        """Lead quality labels from the lead-quality codes."""
        return [LEAD_QUALITIES.get(code, f"code {code}") for code in self.lead_quality[:self.n_leads]]

    @property
    def pacemaker_label(self) -> str:
        return PACEMAKER_CODES.get(self.pacemaker, f"code {self.pacemaker}")

    @property
    def sex_label(self) -> str:
        return SEX_CODES.get(self.sex, f"code {self.sex}")


class SampleCountMismatch(BaseModel):
    """Declared sample count disagrees with what the ECG block holds."""
    model_config = ConfigDict(frozen=True)

    declared_samples: int
    actual_samples: int

    @property
    def difference(self) -> int:
        return self.actual_samples - self.declared_samples

    def describe(self) -> str:
        return (
            f"Header declares {self.declared_samples} samples per lead, "
            f"ECG block holds {self.actual_samples}; using {self.actual_samples}"
        )


class DecodeSummary(BaseModel):
    """Declared vs. actual sizes of one recording."""
    model_config = ConfigDict(frozen=True)

    n_leads: int
    sampling_rate: int
    declared_samples: int
    actual_samples: int
    declared_duration: float = Field(..., description="Declared duration in seconds")
    actual_duration: float = Field(..., description="Actual duration in seconds")
    declared_bytes: int = Field(..., description="ECG block size implied by the header")
    actual_bytes: int = Field(..., description="ECG block size that is decoded")
    available_bytes: int = Field(..., description="Bytes from the ECG block offset to the end of the buffer")
    resolution: List[int] = Field(..., description="Resolution of each stored lead in nV")

    @property
    def sample_count_matches(self) -> bool:
        return self.declared_samples == self.actual_samples


@dataclass(frozen=True, eq=False)
class SampleSet:
    """Raw amplitudes of every lead, shape ``(n_leads, samples_per_lead)``."""
    data: np.ndarray
    diagnostics: Tuple[SampleCountMismatch, ...] = field(default=())

    def __len__(self) -> int:
        return self.data.shape[0]

    def __getitem__(self, lead: int) -> np.ndarray:
        return self.data[lead]

    def __iter__(self):
        return iter(self.data)

    @property
    def n_leads(self) -> int:
        return self.data.shape[0]

    @property
    def samples_per_lead(self) -> int:
        return self.data.shape[1]

    @property
    def mismatch(self) -> Optional[SampleCountMismatch]:
        return self.diagnostics[0] if self.diagnostics else None

    def to_list(self) -> List[List[int]]:
        """Convert to nested Python lists."""
        return self.data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Return a writable copy of the samples."""
        return np.array(self.data, dtype=np.int16)
