"""Lesson breaks over the slide sequence."""

from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Tuple

from ..errors import LessonBreakError
from ..models.lessons import LessonBreak


def _new_break_id() -> str:
    return f"break-{uuid.uuid4().hex[:12]}"


class LessonSegmenter:
    """Ordered lesson breaks with contiguous numbering.

    Lesson 1 covers the slides before the first break. Every insert and
    remove re-sorts all breaks and renumbers them ``2..n+1``.
    """

    def __init__(
        self, total_slides: Optional[int] = None, breaks: Iterable[LessonBreak] = ()
    ) -> None:
        self.total_slides = total_slides
        self._breaks: List[LessonBreak] = []
        for existing in breaks:
            self.insert(existing.after_slide, break_id=existing.id)

    @property
    def breaks(self) -> List[LessonBreak]:
        return list(self._breaks)

    def __len__(self) -> int:
        return len(self._breaks)

    def insert(self, after_slide: int, break_id: Optional[str] = None) -> LessonBreak:
        self._check_position(after_slide)
        provisional = sum(1 for b in self._breaks if b.after_slide < after_slide) + 2
        lesson_break = LessonBreak(
            id=break_id or _new_break_id(),
            after_slide=after_slide,
            lesson_number=provisional,
        )
        self._breaks.append(lesson_break)
        self._recompute()
        return self._find(lesson_break.id)

    def remove(self, break_id: str) -> LessonBreak:
        removed = self._find(break_id)
        self._breaks = [b for b in self._breaks if b.id != break_id]
        self._recompute()
        return removed

    def lesson_for_slide(self, slide_index: int) -> int:
        return 1 + sum(1 for b in self._breaks if b.after_slide < slide_index)

    def lessons(self) -> List[Tuple[int, int, int]]:
        """(lesson_number, first_slide, last_slide) for each lesson."""
        if self.total_slides is None:
            raise LessonBreakError("Lesson ranges need the deck's total_slides")
        bounds = [0] + [b.after_slide for b in self._breaks] + [self.total_slides]
        return [
            (number, bounds[number - 1] + 1, bounds[number])
            for number in range(1, len(bounds))
        ]

    def _check_position(self, after_slide: int) -> None:
        if after_slide < 1:
            raise LessonBreakError(f"Lesson break must follow a slide, got afterSlide={after_slide}")
        if self.total_slides is not None and after_slide >= self.total_slides:
            raise LessonBreakError(
                f"Lesson break after slide {after_slide} leaves an empty lesson "
                f"(deck has {self.total_slides} slides)"
            )
        if any(b.after_slide == after_slide for b in self._breaks):
            raise LessonBreakError(f"A lesson break already follows slide {after_slide}")

    def _find(self, break_id: str) -> LessonBreak:
        for lesson_break in self._breaks:
            if lesson_break.id == break_id:
                return lesson_break
        raise KeyError(f"Unknown lesson break id: {break_id}")

    def _recompute(self) -> None:
        ordered = sorted(self._breaks, key=lambda b: b.after_slide)
        self._breaks = [
            b.model_copy(update={"lesson_number": position + 2})
            for position, b in enumerate(ordered)
        ]
