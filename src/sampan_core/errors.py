"""Tagged trailer errors.

Every failure the trailer parser can report is one of the classes below.
Callers branch on the class or on `code`, never on the message text.
"""
from __future__ import annotations

from .protocol import SUPPORTED_VERSIONS

ERRORS = {
  "E_NOT_PANORAMA": "Image is not a Samsung panorama",
  "E_UNSUPPORTED_VERSION": "Unknown panorama version",
  "E_TYPE_MISMATCH": "Image is corrupted, entry types do not match",
  "E_ENTRY_OUT_OF_BOUNDS": "Image is corrupted, entry points outside the file",
}


class TrailerWarning(UserWarning):
    """A trailer check was overridden by `force`."""


class TrailerError(ValueError):
    code = ""

    def __init__(self, detail: str = ""):
        self.detail = detail
        message = ERRORS[self.code]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(f"{message}. [skip]")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": str(self)}


class NotPanorama(TrailerError):
    code = "E_NOT_PANORAMA"


class UnsupportedVersion(TrailerError):
    code = "E_UNSUPPORTED_VERSION"

    def __init__(self, version: int):
        self.version = version
        supported = ", ".join(str(v) for v in sorted(SUPPORTED_VERSIONS))
        super().__init__(f"{version}, sampan only supports version {supported}")


class TypeMismatch(TrailerError):
    code = "E_TYPE_MISMATCH"

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(f"{found} != {expected}")


class EntryOutOfBounds(TrailerError):
    code = "E_ENTRY_OUT_OF_BOUNDS"

    def __init__(self, index: int, distance: int):
        self.index = index
        self.distance = distance
        super().__init__(f"entry {index} is {distance} bytes before EOF")
