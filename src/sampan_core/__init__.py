"""sampan core - Shared SEF trailer layout and errors."""
from .errors import (
    ERRORS,
    EntryOutOfBounds,
    NotPanorama,
    TrailerError,
    TrailerWarning,
    TypeMismatch,
    UnsupportedVersion,
)
from .protocol import EOI, SUPPORTED_VERSIONS, footer_region_length

__all__ = [
    "ERRORS",
    "EntryOutOfBounds",
    "NotPanorama",
    "TrailerError",
    "TrailerWarning",
    "TypeMismatch",
    "UnsupportedVersion",
    "EOI",
    "SUPPORTED_VERSIONS",
    "footer_region_length",
]
