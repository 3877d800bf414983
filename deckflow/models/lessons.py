"""Lesson break contracts."""

from __future__ import annotations

from pydantic import conint, constr

from .base import DeckBaseModel

NonEmptyStr = constr(min_length=1)


class LessonBreak(DeckBaseModel):
    id: NonEmptyStr
    after_slide: conint(ge=0)
    lesson_number: conint(ge=2)
