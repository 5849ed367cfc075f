"""Errors raised by the encoder package.

A wrong password is not an error: ``verify`` returns ``False`` for it.
Failures inside the hashing primitives themselves propagate unchanged.
"""


class EncoderError(Exception):
    """Base class for errors raised by this package."""


class RandomSourceError(EncoderError):
    """The operating system entropy source could not supply enough bytes."""


class FormatParseError(EncoderError):
    """An encoded hash is malformed and cannot be parsed."""


class InvalidConfigError(EncoderError):
    """An encoder option is unknown, misplaced or out of range."""
