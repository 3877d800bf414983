"""Instructor-side overlays on a parsed deck."""

from .scheduler import ResourceScheduler
from .segmenter import LessonSegmenter
from .session import AuthoringSession, new_presentation_id

__all__ = [
    "ResourceScheduler",
    "LessonSegmenter",
    "AuthoringSession",
    "new_presentation_id",
]
