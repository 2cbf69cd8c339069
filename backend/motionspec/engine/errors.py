"""Engine exceptions.

Classification and tolerance misses are not errors: they fall through to the
next-lower outcome (linear easing, raw bezier, unmerged axes, no group).
"""

from __future__ import annotations


class MotionSpecError(Exception):
    """Base class for motion spec engine errors."""


class ExtractionFailure(MotionSpecError):
    """A property or layer could not be read from the source tree.

    Raised inside a single unit of work and caught by the stage that owns
    it; never propagates out of the pipeline.
    """

    def __init__(self, unit: str, reason: str) -> None:
        super().__init__(f"{unit}: {reason}")
        self.unit = unit
        self.reason = reason


class NothingToProcessError(MotionSpecError):
    """No selected layer carries any animation data."""
