# spaceframe/errors.py
"""Exception hierarchy for model loading, validation, assembly and solve."""

from typing import List


class SpaceframeError(Exception):
    """Base class for every error raised by spaceframe."""
    pass


class DimensionError(SpaceframeError, ValueError):
    """Matrix/vector shapes don't match. Indicates a programming defect."""
    pass


class SingularMatrixError(SpaceframeError, RuntimeError):
    """Pivot magnitude fell below tolerance during elimination."""
    pass


class MechanismError(SingularMatrixError):
    """Raised when the structure is unstable (under-supported or a mechanism)."""
    pass


class ZeroLengthError(SpaceframeError, ValueError):
    """Member end nodes coincide."""
    pass


class ModelValidationError(SpaceframeError):
    """
    Raised when a model fails validation.

    The path-tagged issues are kept on ``issues`` so callers can report all
    of them, not just the first.
    """

    def __init__(self, issues: List):
        self.issues = list(issues)
        lines = [f"{i.path or '<model>'}: {i.message}" for i in self.issues]
        super().__init__("Model validation failed:\n  " + "\n  ".join(lines))


class ModelLoadError(SpaceframeError):
    """Raised when model text can't be parsed into the file schema."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("Could not load model:\n  " + "\n  ".join(self.messages))
