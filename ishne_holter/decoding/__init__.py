"""Decoding module for ISHNE files."""

from .header_codec import HeaderCodec, parse_header
from .sample_decoder import SampleDecoder, decode_samples, get_summary

__all__ = ["HeaderCodec", "parse_header", "SampleDecoder", "decode_samples", "get_summary"]
