"""Interactive slide resource contracts."""

from __future__ import annotations

import math
from typing import Any, List, Literal, Optional, Sequence, Union

from pydantic import Field, conint, constr, model_validator

from .base import DeckBaseModel

NonEmptyStr = constr(strip_whitespace=True, min_length=1)
ResourceType = Literal["video", "audio", "quiz", "flashcard"]

# Points granted the first time a learner completes a resource.
REWARD_POINTS = {
    "video": 10,
    "audio": 10,
    "quiz": 25,
    "flashcard": 15,
}


class VideoContent(DeckBaseModel):
    kind: Literal["video"] = "video"
    video_url: NonEmptyStr


class AudioContent(DeckBaseModel):
    kind: Literal["audio"] = "audio"
    audio_url: NonEmptyStr


class QuizQuestion(DeckBaseModel):
    id: NonEmptyStr
    question: NonEmptyStr
    options: List[NonEmptyStr] = Field(..., min_length=2)
    correct_answer: conint(ge=0)
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _answer_in_options(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer} out of range for {len(self.options)} options"
            )
        return self


class QuizContent(DeckBaseModel):
    kind: Literal["quiz"] = "quiz"
    questions: List[QuizQuestion] = Field(..., min_length=1)
    passing_score: conint(ge=0, le=100) = 75

    def score(self, answers: Sequence[Optional[int]]) -> int:
        """Percentage of correct answers, rounded half up."""
        correct = sum(
            1
            for question, answer in zip(self.questions, answers)
            if answer == question.correct_answer
        )
        return int(math.floor(correct / len(self.questions) * 100 + 0.5))

    def passed(self, answers: Sequence[Optional[int]]) -> bool:
        return self.score(answers) >= self.passing_score


class Flashcard(DeckBaseModel):
    id: NonEmptyStr
    front: NonEmptyStr
    back: NonEmptyStr
    hint: Optional[str] = None


class FlashcardContent(DeckBaseModel):
    kind: Literal["flashcard"] = "flashcard"
    cards: List[Flashcard] = Field(..., min_length=1)


ResourceContent = Union[VideoContent, AudioContent, QuizContent, FlashcardContent]


class SlideResource(DeckBaseModel):
    """A resource shown between slide ``show_after_slide`` and the next one."""

    id: NonEmptyStr
    type: ResourceType
    title: NonEmptyStr
    show_after_slide: conint(ge=0)
    show_before_slide: Optional[conint(ge=1)] = None
    content: ResourceContent = Field(..., discriminator="kind")

    @model_validator(mode="before")
    @classmethod
    def _tag_content(cls, data: Any) -> Any:
        if isinstance(data, dict):
            content = data.get("content")
            if isinstance(content, dict) and "kind" not in content and data.get("type"):
                data = {**data, "content": {**content, "kind": data["type"]}}
        return data

    @model_validator(mode="after")
    def _check_window(self) -> "SlideResource":
        if self.content.kind != self.type:
            raise ValueError(f"content kind {self.content.kind!r} does not match type {self.type!r}")
        expected = self.show_after_slide + 1
        if self.show_before_slide is None:
            self.show_before_slide = expected
        elif self.show_before_slide != expected:
            raise ValueError(
                f"showBeforeSlide must be showAfterSlide + 1 ({expected}), got {self.show_before_slide}"
            )
        return self

    def is_active_at(self, slide_index: int) -> bool:
        return self.show_after_slide <= slide_index < self.show_before_slide


def reward_points(resource: SlideResource, passed: bool = True) -> int:
    """Points for a first completion; a failed quiz earns nothing."""
    if resource.type == "quiz" and not passed:
        return 0
    return REWARD_POINTS[resource.type]
