"""Unistroke - template matching for single-stroke gestures."""

__version__ = "0.1.0"

from unistroke.config import RecognizerConfig
from unistroke.errors import (
    DegenerateInputError,
    InvalidConfigurationError,
    TemplateSourceError,
    UnistrokeError,
)
from unistroke.matcher import DistanceMatcher, path_distance
from unistroke.normalize import PathNormalizer
from unistroke.profiler import StageProfiler
from unistroke.recognizer import RecognitionEngine, RecognitionResult, RecognitionStatus
from unistroke.templates import GestureTemplate, TemplateLibrary
from unistroke.tracker import Blob, Touch, TouchTracker
