"""Learner progress contracts."""

from __future__ import annotations

from typing import Optional, Set

from pydantic import ConfigDict, Field, conint

from .base import DeckBaseModel


class PresentationProgress(DeckBaseModel):
    """Stored progress for one (learner, presentation) pair."""

    # Stored columns keep their snake_case names.
    model_config = ConfigDict(extra="forbid", alias_generator=None)

    current_slide: conint(ge=1) = 1
    slides_viewed: Set[int] = Field(default_factory=set)
    resources_completed: Set[str] = Field(default_factory=set)
    completed: bool = False
    time_spent_seconds: conint(ge=0) = 0


class ProgressUpdate(DeckBaseModel):
    """Partial progress write; the store merges it into the stored record."""

    current_slide: Optional[conint(ge=1)] = None
    slide_viewed: Optional[conint(ge=1)] = None
    time_spent: Optional[conint(ge=0)] = None
    resource_completed: Optional[str] = None
    completed: Optional[bool] = None
