"""Presentation ingestion, authoring overlays and learner playback."""

from .authoring import AuthoringSession, LessonSegmenter, ResourceScheduler
from .config import load_config
from .ingest import PresentationParser, parse_pptx, parse_pptx_async
from .playback import InMemoryProgressStore, PlaybackEngine, PlaybackState
from .render import plan_slide, select_strategy

__version__ = "0.1.0"

__all__ = [
    "AuthoringSession",
    "LessonSegmenter",
    "ResourceScheduler",
    "load_config",
    "PresentationParser",
    "parse_pptx",
    "parse_pptx_async",
    "InMemoryProgressStore",
    "PlaybackEngine",
    "PlaybackState",
    "plan_slide",
    "select_strategy",
]
