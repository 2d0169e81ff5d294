"""
Exceptions raised by the sketchmesh geometry engine.

Both concrete errors are also ``ValueError`` subclasses, so callers
that already guard geometry calls with ``except ValueError`` keep
working.
"""

from typing import Optional


class SketchError(Exception):
    """Base class for sketchmesh errors."""


class DegenerateProjection(SketchError, ValueError):
    """A ray failed to hit its target plane or sphere.

    Also raised when the geometry needed to build a projection target
    collapses, e.g. a stroke whose ground start and end points coincide.
    ``index`` is the offending sample or vertex, when there is one.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"{message} (sample {index})"
        super().__init__(message)
        self.index = index


class InvalidConfiguration(SketchError, ValueError):
    """A construction parameter is out of range."""
