"""Custom exceptions for the ISHNE Holter reader."""


class IshneError(Exception):
    """Base exception for the ISHNE Holter reader."""
    pass


class FormatError(IshneError):
    """Raised when the input bytes are not a decodable ISHNE recording."""
    pass


class StateError(IshneError):
    """Raised when an operation needs a parsed header and none exists yet."""
    pass


class IoError(IshneError):
    """Raised when reading the source or writing to a sink fails."""
    pass
