"""Durable authoring record."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, conint, constr

from .base import DeckBaseModel
from .lessons import LessonBreak
from .resources import SlideResource
from .slides import ParsedPresentation, ParsedSlide

NonEmptyStr = constr(min_length=1)


class PresentationRecord(DeckBaseModel):
    id: NonEmptyStr
    file_name: NonEmptyStr
    total_slides: conint(ge=0)
    uploaded_at: datetime
    resources: List[SlideResource] = Field(default_factory=list)
    lesson_breaks: List[LessonBreak] = Field(default_factory=list)
    slides: List[ParsedSlide] = Field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None

    def presentation(self) -> ParsedPresentation:
        """Rebuild the parsed model, re-checking the slide invariants."""
        return ParsedPresentation(
            total_slides=self.total_slides,
            slides=self.slides,
            title=self.title,
            author=self.author,
        )
