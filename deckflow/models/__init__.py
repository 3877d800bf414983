"""Pydantic models for deckflow contracts."""

from .base import DeckBaseModel, FrozenDeckModel
from .config import Config
from .lessons import LessonBreak
from .progress import PresentationProgress, ProgressUpdate
from .record import PresentationRecord
from .render_plan import Box, RenderLayer, RenderPlan
from .resources import (
    AudioContent,
    Flashcard,
    FlashcardContent,
    QuizContent,
    QuizQuestion,
    SlideResource,
    VideoContent,
    reward_points,
)
from .slides import ParsedPresentation, ParsedSlide, SlideShape, TextParagraph, TextRun

__all__ = [
    "Config",
    "DeckBaseModel",
    "FrozenDeckModel",
    "ParsedPresentation",
    "ParsedSlide",
    "SlideShape",
    "TextParagraph",
    "TextRun",
    "SlideResource",
    "VideoContent",
    "AudioContent",
    "QuizContent",
    "QuizQuestion",
    "FlashcardContent",
    "Flashcard",
    "reward_points",
    "LessonBreak",
    "PresentationProgress",
    "ProgressUpdate",
    "PresentationRecord",
    "Box",
    "RenderLayer",
    "RenderPlan",
]
