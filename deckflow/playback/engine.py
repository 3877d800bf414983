"""Learner-side playback of an authored presentation.

State flow::

    loading -> ready -> idle <-> autoPlaying
                         ^  \\      |
                         |   v     v
                         resourceActive
    close() -> completed (every slide viewed) or ready

All public methods take the engine lock. The autoplay timer calls back into
``next()`` from its own thread, which is the only asynchronous re-entry.
Progress writes go to a single background writer in submission order, so a
slow or failing store never blocks navigation; ``close()`` waits for it.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, FrozenSet, Optional, Tuple

from ..authoring.scheduler import ResourceScheduler
from ..authoring.segmenter import LessonSegmenter
from ..errors import PlaybackStateError, ProgressStoreError
from ..models.config import Config
from ..models.progress import ProgressUpdate
from ..models.record import PresentationRecord
from ..models.render_plan import RenderPlan
from ..models.resources import SlideResource, reward_points
from ..render.selector import RenderSelector
from .progress_store import ProgressStore
from .timers import AutoplayToken, TimerFactory, repeating_timer_factory

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    IDLE = "idle"
    AUTO_PLAYING = "autoPlaying"
    RESOURCE_ACTIVE = "resourceActive"
    COMPLETED = "completed"


NAVIGABLE = (PlaybackState.IDLE, PlaybackState.AUTO_PLAYING)


@dataclass(frozen=True)
class PlaybackSnapshot:
    state: PlaybackState
    current_slide: int
    total_slides: int
    slides_viewed: FrozenSet[int]
    resources_completed: FrozenSet[str]
    active_resource: Optional[SlideResource]
    lesson_number: int
    indicator_resources: Tuple[SlideResource, ...]
    progress_percent: int


class PlaybackEngine:
    def __init__(
        self,
        record: PresentationRecord,
        learner_id: str,
        store: ProgressStore,
        config: Optional[Config] = None,
        on_complete: Optional[Callable[[], None]] = None,
        on_resource_completed: Optional[Callable[[SlideResource, int], None]] = None,
        timer_factory: Optional[TimerFactory] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.record = record
        self.learner_id = learner_id
        self.store = store
        self.config = config or Config()
        self.on_complete = on_complete
        self.on_resource_completed = on_resource_completed
        self._timer_factory = timer_factory or repeating_timer_factory
        self._clock = clock

        self.total_slides = record.total_slides
        self.scheduler = ResourceScheduler(record.total_slides, record.resources)
        self.segmenter = LessonSegmenter(record.total_slides, record.lesson_breaks)
        self.selector = RenderSelector(
            fallback_title=self.config.fallback_title,
            gallery_max_images=self.config.gallery_max_images,
        )
        self._presentation = record.presentation()

        self._lock = threading.RLock()
        self._state = PlaybackState.LOADING
        self._opened = False
        self._current = 1
        self._viewed: set = set()
        self._completed_resources: set = set()
        self._active: Optional[SlideResource] = None
        self._autoplay: Optional[AutoplayToken] = None
        self._slide_started = 0.0
        self._pending: Deque[ProgressUpdate] = deque()
        self._pending_lock = threading.Lock()
        self._writer: Optional[ThreadPoolExecutor] = None

    # -- lifecycle ----------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_slide(self) -> int:
        return self._current

    def load(self) -> None:
        """Resume from stored progress."""
        with self._lock:
            try:
                progress = self.store.get(self.record.id, self.learner_id)
            except ProgressStoreError as exc:
                logger.warning("Could not read progress for %s: %s", self.record.id, exc)
                progress = None
            if progress is not None:
                self._current = self._clamp(progress.current_slide)
                self._viewed = set(progress.slides_viewed)
                self._completed_resources = set(progress.resources_completed)
            self._state = PlaybackState.READY

    def open(self) -> None:
        with self._lock:
            if self._state == PlaybackState.LOADING:
                self.load()
            if self._opened:
                return
            if self.total_slides == 0:
                raise PlaybackStateError(f"Presentation {self.record.id} has no slides")
            self._opened = True
            self._viewed.add(self._current)
            self._slide_started = self._clock()
            self._flush(
                ProgressUpdate(current_slide=self._current, slide_viewed=self._current, time_spent=0)
            )
            self._state = PlaybackState.IDLE

    def close(self) -> None:
        with self._lock:
            if not self._opened:
                return
            self._cancel_autoplay()
            self._active = None
            self._flush(
                ProgressUpdate(
                    current_slide=self._current,
                    time_spent=self._elapsed_on_slide(),
                    completed=self._all_viewed(),
                )
            )
            self._stop_writer()
            self._opened = False
            self._state = PlaybackState.COMPLETED if self._all_viewed() else PlaybackState.READY

    def __enter__(self) -> "PlaybackEngine":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- navigation ---------------------------------------------------------

    def next(self) -> None:
        with self._lock:
            self._require_open()
            if self._state not in NAVIGABLE:
                return
            departed = self._current
            if departed < self.total_slides:
                self._change_slide(departed + 1)
                if self._current == self.total_slides:
                    self._cancel_autoplay()
            else:
                self._viewed.add(departed)
                self._cancel_autoplay()
                if self.on_complete is not None:
                    self.on_complete()
            triggered = self.scheduler.first_at(departed)
            if triggered is not None and self._active is None:
                self._activate(triggered)

    def previous(self) -> None:
        with self._lock:
            self._require_open()
            if self._state not in NAVIGABLE or self._current <= 1:
                return
            self._change_slide(self._current - 1)

    def go_to(self, slide_index: int) -> None:
        """Thumbnail jump; never triggers resources."""
        with self._lock:
            self._require_open()
            if self._state not in NAVIGABLE:
                return
            target = self._clamp(slide_index)
            if target != self._current:
                self._change_slide(target)

    # -- resources ----------------------------------------------------------

    def open_resource(self, resource_id: str) -> SlideResource:
        with self._lock:
            self._require_open()
            resource = self._resource(resource_id)
            self._activate(resource)
            return resource

    def dismiss_resource(self) -> None:
        with self._lock:
            if self._state == PlaybackState.RESOURCE_ACTIVE:
                self._active = None
                self._state = PlaybackState.IDLE

    def complete_resource(self, resource_id: str, passed: bool = True) -> int:
        """Record a completion; returns the points granted (0 on repeats)."""
        with self._lock:
            self._require_open()
            resource = self._resource(resource_id)
            points = 0
            if resource_id not in self._completed_resources:
                self._completed_resources.add(resource_id)
                self._flush(ProgressUpdate(resource_completed=resource_id))
                points = reward_points(resource, passed)
                if self.on_resource_completed is not None:
                    self.on_resource_completed(resource, points)
            if self._active is not None and self._active.id == resource_id:
                self.dismiss_resource()
            return points

    # -- autoplay -----------------------------------------------------------

    def start_autoplay(self) -> AutoplayToken:
        with self._lock:
            self._require_open()
            if self._autoplay is not None:
                return self._autoplay
            if self._state != PlaybackState.IDLE:
                raise PlaybackStateError(f"Cannot autoplay while {self._state.value}")
            token = AutoplayToken()
            self._autoplay = token
            self._state = PlaybackState.AUTO_PLAYING
            token.attach(
                self._timer_factory(
                    self.config.autoplay_interval_seconds, lambda: self._autoplay_tick(token)
                )
            )
            logger.debug("Autoplay started on slide %d", self._current)
            return token

    def stop_autoplay(self) -> None:
        with self._lock:
            self._cancel_autoplay()

    def toggle_autoplay(self) -> Optional[AutoplayToken]:
        with self._lock:
            if self._autoplay is not None:
                self._cancel_autoplay()
                return None
            return self.start_autoplay()

    def _autoplay_tick(self, token: AutoplayToken) -> None:
        with self._lock:
            if token.cancelled or token is not self._autoplay:
                return
            if self._current >= self.total_slides:
                self._cancel_autoplay()
                return
            self.next()

    def _cancel_autoplay(self) -> None:
        token, self._autoplay = self._autoplay, None
        if token is None:
            return
        token.cancel()
        if self._state == PlaybackState.AUTO_PLAYING:
            self._state = PlaybackState.IDLE
        logger.debug("Autoplay stopped on slide %d", self._current)

    # -- views --------------------------------------------------------------

    def snapshot(self) -> PlaybackSnapshot:
        with self._lock:
            return PlaybackSnapshot(
                state=self._state,
                current_slide=self._current,
                total_slides=self.total_slides,
                slides_viewed=frozenset(self._viewed),
                resources_completed=frozenset(self._completed_resources),
                active_resource=self._active,
                lesson_number=self.segmenter.lesson_for_slide(self._current),
                indicator_resources=tuple(self.scheduler.query(self._current)),
                progress_percent=self._progress_percent(),
            )

    def render_plan(self) -> RenderPlan:
        with self._lock:
            if self.total_slides == 0:
                raise PlaybackStateError(f"Presentation {self.record.id} has no slides")
            return self.selector.plan(self._presentation.slide(self._current))

    # -- internals ----------------------------------------------------------

    def _require_open(self) -> None:
        if not self._opened:
            raise PlaybackStateError("Playback has not been opened")

    def _resource(self, resource_id: str) -> SlideResource:
        resource = self.scheduler.get(resource_id)
        if resource is None:
            raise PlaybackStateError(
                f"Presentation {self.record.id} has no resource {resource_id!r}",
                {"resource_id": resource_id},
            )
        return resource

    def _activate(self, resource: SlideResource) -> None:
        self._cancel_autoplay()
        self._active = resource
        self._state = PlaybackState.RESOURCE_ACTIVE

    def _clamp(self, slide_index: int) -> int:
        return min(max(slide_index, 1), max(self.total_slides, 1))

    def _elapsed_on_slide(self) -> int:
        return max(0, math.floor(self._clock() - self._slide_started))

    def _change_slide(self, target: int) -> None:
        spent = self._elapsed_on_slide()
        self._current = target
        self._viewed.add(target)
        self._slide_started = self._clock()
        self._flush(ProgressUpdate(current_slide=target, slide_viewed=target, time_spent=spent))

    def _all_viewed(self) -> bool:
        return all(index in self._viewed for index in range(1, self.total_slides + 1))

    def _progress_percent(self) -> int:
        if self.total_slides == 0:
            return 0
        viewed = sum(1 for index in self._viewed if 1 <= index <= self.total_slides)
        return math.floor(viewed / self.total_slides * 100 + 0.5)

    def _flush(self, update: ProgressUpdate) -> None:
        """Queue an update for the background writer."""
        with self._pending_lock:
            self._pending.append(update)
        if self._writer is None:
            self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="deckflow-progress")
        self._writer.submit(self._write_pending)

    def _write_pending(self) -> None:
        """Write queued updates in order; a failure leaves the rest for the next flush."""
        while True:
            with self._pending_lock:
                if not self._pending:
                    return
                update = self._pending[0]
            try:
                self.store.update(self.record.id, self.learner_id, update)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Progress write for %s deferred (%d pending): %s",
                    self.record.id,
                    self.pending_writes,
                    exc,
                )
                return
            with self._pending_lock:
                self._pending.popleft()

    def wait_for_writes(self, timeout: Optional[float] = None) -> None:
        """Block until every update queued so far has been attempted once."""
        with self._lock:
            writer = self._writer
            if writer is not None:
                writer.submit(lambda: None).result(timeout)

    def _stop_writer(self) -> None:
        writer, self._writer = self._writer, None
        if writer is not None:
            writer.shutdown(wait=True)

    @property
    def pending_writes(self) -> int:
        with self._pending_lock:
            return len(self._pending)
