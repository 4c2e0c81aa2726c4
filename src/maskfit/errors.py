"""Exceptions raised by maskfit."""


class MaskfitError(Exception):
    """Base class for maskfit errors."""


class MissingLandmarkError(MaskfitError, KeyError):
    """Raised when a landmark required for pose or measurement is absent.

    The whole frame fails; no partial pose is produced.

    Attributes:
        landmark: Name of the missing landmark.
        reason: Why it is considered missing.
    """

    def __init__(self, landmark: str, reason: str = "not present"):
        self.landmark = landmark
        self.reason = reason
        super().__init__(landmark)

    def __str__(self) -> str:
        return f"Missing landmark '{self.landmark}': {self.reason}"


__all__ = ["MaskfitError", "MissingLandmarkError"]
