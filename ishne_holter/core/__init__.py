"""Core module for the ISHNE Holter reader."""

from .config import Config, ExportFormat, ExportOptions
from .models import Header, SampleSet, SampleCountMismatch, DecodeSummary
from .exceptions import IshneError, FormatError, StateError, IoError

__all__ = [
    "Config", "ExportFormat", "ExportOptions",
    "Header", "SampleSet", "SampleCountMismatch", "DecodeSummary",
    "IshneError", "FormatError", "StateError", "IoError",
]
