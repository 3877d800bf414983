"""Learner playback: navigation, autoplay, resources and progress."""

from .engine import PlaybackEngine, PlaybackSnapshot, PlaybackState
from .progress_store import InMemoryProgressStore, ProgressStore, merge_progress
from .timers import AutoplayToken, RepeatingTimer, repeating_timer_factory

__all__ = [
    "PlaybackEngine",
    "PlaybackSnapshot",
    "PlaybackState",
    "ProgressStore",
    "InMemoryProgressStore",
    "merge_progress",
    "AutoplayToken",
    "RepeatingTimer",
    "repeating_timer_factory",
]
