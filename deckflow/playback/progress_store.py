"""Learner progress persistence interface."""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol, Tuple

from ..errors import ProgressStoreError
from ..models.progress import PresentationProgress, ProgressUpdate


class ProgressStore(Protocol):
    def get(self, presentation_id: str, learner_id: str) -> Optional[PresentationProgress]:
        ...

    def update(self, presentation_id: str, learner_id: str, update: ProgressUpdate) -> None:
        ...


def merge_progress(
    current: Optional[PresentationProgress], update: ProgressUpdate
) -> PresentationProgress:
    """Fold a partial update into a stored record.

    Viewed slides and completed resources are unions, time accumulates,
    ``current_slide`` and ``completed`` are overwritten when present.
    """
    base = current or PresentationProgress()
    viewed = set(base.slides_viewed)
    if update.slide_viewed is not None:
        viewed.add(update.slide_viewed)
    resources = set(base.resources_completed)
    if update.resource_completed is not None:
        resources.add(update.resource_completed)
    return PresentationProgress(
        current_slide=update.current_slide if update.current_slide is not None else base.current_slide,
        slides_viewed=viewed,
        resources_completed=resources,
        completed=update.completed if update.completed is not None else base.completed,
        time_spent_seconds=base.time_spent_seconds + (update.time_spent or 0),
    )


class InMemoryProgressStore:
    """Reference store; last write wins across concurrent sessions."""

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], PresentationProgress] = {}
        self._lock = threading.Lock()
        self.fail_next_writes = 0

    def get(self, presentation_id: str, learner_id: str) -> Optional[PresentationProgress]:
        with self._lock:
            return self._records.get((presentation_id, learner_id))

    def update(self, presentation_id: str, learner_id: str, update: ProgressUpdate) -> None:
        with self._lock:
            if self.fail_next_writes > 0:
                self.fail_next_writes -= 1
                raise ProgressStoreError(
                    "Progress write failed",
                    {"presentation_id": presentation_id, "learner_id": learner_id},
                )
            key = (presentation_id, learner_id)
            self._records[key] = merge_progress(self._records.get(key), update)
