"""
Exception types raised by the sharing engine and its image layers.

Everything derives from ValueError so callers that only know about
ValueError keep working.
"""


class SharingError(ValueError):
    """Base class for all pixel-sharing failures."""


class InvalidInputSizeError(SharingError):
    """Payload missing or too small for the header or raster it claims."""


class DimensionError(SharingError):
    """Odd width/height, unsupported bit depth or mismatched dimensions."""


class ShareSetError(SharingError):
    """The supplied shares cannot be combined (count, coordinates, lengths)."""


class FieldArithmeticError(SharingError):
    """An operation has no result in GF(257), e.g. the inverse of zero."""


class ConfigurationError(SharingError):
    """Invalid threshold or share count."""
