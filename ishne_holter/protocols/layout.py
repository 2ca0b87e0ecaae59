"""ISHNE 1.0 fixed header layout and numeric code tables.

Reference: http://thew-project.org/papers/Badilini.ISHNE.Holter.Standard.pdf
"""

import struct
from typing import Dict, List, Tuple

MAGIC = b"ISHNE1.0"
MAGIC_SIZE = len(MAGIC)
CHECKSUM_FORMAT = "<H"

# Offsets of the fixed fields are measured from HEADER_START
HEADER_START = MAGIC_SIZE + struct.calcsize(CHECKSUM_FORMAT)

MAX_LEADS = 12
SAMPLE_FORMAT = "<i2"
SAMPLE_SIZE = 2

# (name, struct code, offset) in file order
HEADER_FIELDS: List[Tuple[str, str, int]] = [
    ("var_block_size", "I", 0),
    ("declared_samples", "I", 4),
    ("var_block_offset", "I", 8),
    ("ecg_block_offset", "I", 12),
    ("file_version", "H", 16),
    ("first_name", "40s", 18),
    ("last_name", "40s", 58),
    ("subject_id", "20s", 98),
    ("sex", "H", 118),
    ("race", "H", 120),
    ("birth_date", "3H", 122),
    ("record_date", "3H", 128),
    ("file_date", "3H", 134),
    ("start_time", "3H", 140),
    ("n_leads", "H", 146),
    ("lead_spec", "12h", 148),
    ("lead_quality", "12h", 172),
    ("resolution", "12h", 196),
    ("pacemaker", "H", 220),
    ("recorder", "40s", 222),
    ("sampling_rate", "H", 262),
    ("proprietary", "80s", 264),
    ("copyright", "80s", 344),
]

HEADER_FORMAT = "<" + "".join(code for _, code, _ in HEADER_FIELDS)
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
FIXED_HEADER_SIZE = HEADER_START + HEADER_SIZE


def field_offset(name: str) -> int:
    """Absolute file offset of a fixed header field."""
    for field_name, _, offset in HEADER_FIELDS:
        if field_name == name:
            return HEADER_START + offset
    raise KeyError(name)


# numeric codes from Table 1 of the ISHNE Holter standard
LEAD_SPECS: Dict[int, str] = {
    -9: "absent", 0: "unknown", 1: "generic",
    2: "X", 3: "Y", 4: "Z",
    5: "I", 6: "II", 7: "III",
    8: "aVR", 9: "aVL", 10: "aVF",
    11: "V1", 12: "V2", 13: "V3",
    14: "V4", 15: "V5", 16: "V6",
    17: "ES", 18: "AS", 19: "AI",
}

# numeric codes from Table 2 of the ISHNE Holter standard
LEAD_QUALITIES: Dict[int, str] = {
    -9: "absent",
    0: "unknown",
    1: "good",
    2: "intermittent noise",
    3: "frequent noise",
    4: "intermittent disconnect",
    5: "frequent disconnect",
}

PACEMAKER_CODES: Dict[int, str] = {
    0: "none",
    1: "unknown type",
    2: "single chamber unipolar",
    3: "dual chamber unipolar",
    4: "single chamber bipolar",
    5: "dual chamber bipolar",
}

SEX_CODES: Dict[int, str] = {0: "unknown", 1: "male", 2: "female"}
