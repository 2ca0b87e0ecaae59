"""Export module for decoded ISHNE recordings."""

from .exporter import (
    Exporter,
    export_to_csv,
    export_to_json,
    export_to_text,
    iter_csv,
    iter_json,
    iter_text,
    stream_to_sink,
)
from .sinks import Sink, FileSink, TextStreamSink

__all__ = [
    "Exporter",
    "export_to_csv",
    "export_to_json",
    "export_to_text",
    "iter_csv",
    "iter_json",
    "iter_text",
    "stream_to_sink",
    "Sink",
    "FileSink",
    "TextStreamSink",
]
