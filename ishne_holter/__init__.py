"""ISHNE Holter - decoder and exporter for ISHNE Holter ECG files."""

__version__ = "0.1.0"

# Core imports for easy access
from ._logging import logger, set_log_file, set_log_level
from .core.config import Config, ExportFormat, ExportOptions
from .core.models import Header, SampleSet, SampleCountMismatch, DecodeSummary
from .core.exceptions import IshneError, FormatError, StateError, IoError
from .decoding.header_codec import HeaderCodec, parse_header
from .decoding.sample_decoder import SampleDecoder, decode_samples, get_summary
from .export.exporter import (
    Exporter,
    export_to_csv,
    export_to_json,
    export_to_text,
    iter_csv,
    iter_json,
    iter_text,
)
from .export.sinks import Sink, FileSink, TextStreamSink
from .reader import IshneReader

__all__ = [
    # Version info
    "__version__",

    # Logging
    "logger",
    "set_log_level",
    "set_log_file",

    # Configuration
    "Config",
    "ExportFormat",
    "ExportOptions",

    # Data models
    "Header",
    "SampleSet",
    "SampleCountMismatch",
    "DecodeSummary",

    # Exceptions
    "IshneError",
    "FormatError",
    "StateError",
    "IoError",

    # Decoding
    "HeaderCodec",
    "parse_header",
    "SampleDecoder",
    "decode_samples",
    "get_summary",

    # Export
    "Exporter",
    "export_to_json",
    "export_to_csv",
    "export_to_text",
    "iter_json",
    "iter_csv",
    "iter_text",
    "Sink",
    "FileSink",
    "TextStreamSink",

    # High level reader
    "IshneReader",
]
