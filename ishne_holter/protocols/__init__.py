"""ISHNE file layout definitions."""

from .layout import FIXED_HEADER_SIZE, HEADER_START, MAGIC, LEAD_SPECS, LEAD_QUALITIES, PACEMAKER_CODES

__all__ = ["FIXED_HEADER_SIZE", "HEADER_START", "MAGIC", "LEAD_SPECS", "LEAD_QUALITIES", "PACEMAKER_CODES"]
