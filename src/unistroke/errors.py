"""Error types raised by the recognizer.

An empty template library is not an error: the engine reports it through
``RecognitionStatus.NO_TEMPLATES`` instead.
"""

from __future__ import annotations


class UnistrokeError(Exception):
    """Base class for all recognizer errors."""


class DegenerateInputError(UnistrokeError, ValueError):
    """A path that cannot be normalized.

    Raised for fewer than 2 points, zero arc length, a bounding box with no
    extent on either axis, or non-finite coordinates.
    """


class InvalidConfigurationError(UnistrokeError, ValueError):
    """Configuration rejected at construction time."""


class TemplateSourceError(UnistrokeError):
    """A template file or mapping could not be read."""
