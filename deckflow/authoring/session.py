"""Instructor authoring flow: upload, parse, anchor resources, mark lessons."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from ..ingest.media import MediaStore
from ..ingest.parser import ParseResult, PresentationParser
from ..ingest.upload import check_upload
from ..logging_utils import PARSE_DONE, PARSE_START, log_event
from ..models.config import Config
from ..models.lessons import LessonBreak
from ..models.record import PresentationRecord
from ..models.resources import SlideResource
from ..models.slides import ParsedPresentation
from .scheduler import ResourceScheduler
from .segmenter import LessonSegmenter

logger = logging.getLogger(__name__)


def new_presentation_id() -> str:
    return f"pptx-{uuid.uuid4().hex}"


class AuthoringSession:
    """One uploaded deck being prepared for learners."""

    def __init__(
        self,
        file_name: str,
        parse_result: ParseResult,
    ) -> None:
        self.file_name = file_name
        self.parse_result = parse_result
        total = parse_result.presentation.total_slides
        self.scheduler = ResourceScheduler(total)
        self.segmenter = LessonSegmenter(total)

    @classmethod
    def from_upload(
        cls,
        file_name: str,
        data: bytes,
        config: Optional[Config] = None,
        media_store: Optional[MediaStore] = None,
        event_log: Optional[Path] = None,
    ) -> "AuthoringSession":
        """Check and parse an upload; rejections raise before any parse."""
        config = config or Config()
        check_upload(file_name, len(data), config)
        parser = PresentationParser(config, media_store, event_log)
        log_event(event_log, PARSE_START, {"file_name": file_name, "bytes": len(data)})
        result = parser.parse(data)
        log_event(
            event_log,
            PARSE_DONE,
            {
                "file_name": file_name,
                "total_slides": result.presentation.total_slides,
                "failed_slides": list(result.failed_slides),
            },
        )
        if result.warning:
            logger.warning("%s: %s", file_name, result.warning)
        return cls(file_name, result)

    @classmethod
    def from_record(cls, record: PresentationRecord) -> "AuthoringSession":
        """Reopen a saved record for further editing."""
        session = cls(record.file_name, ParseResult(presentation=record.presentation()))
        for resource in record.resources:
            session.scheduler.insert(resource)
        for lesson_break in record.lesson_breaks:
            session.segmenter.insert(lesson_break.after_slide, break_id=lesson_break.id)
        return session

    @property
    def presentation(self) -> ParsedPresentation:
        return self.parse_result.presentation

    def add_resource(self, resource: Any) -> SlideResource:
        if isinstance(resource, SlideResource):
            return self.scheduler.insert(resource)
        if isinstance(resource, Mapping):
            return self.scheduler.insert_from_dict(resource)
        raise TypeError(f"Expected SlideResource or mapping, got {type(resource).__name__}")

    def remove_resource(self, resource_id: str) -> SlideResource:
        return self.scheduler.remove(resource_id)

    def add_lesson_break(self, after_slide: int, break_id: Optional[str] = None) -> LessonBreak:
        return self.segmenter.insert(after_slide, break_id=break_id)

    def remove_lesson_break(self, break_id: str) -> LessonBreak:
        return self.segmenter.remove(break_id)

    def to_record(
        self,
        presentation_id: Optional[str] = None,
        uploaded_at: Optional[datetime] = None,
    ) -> PresentationRecord:
        presentation = self.presentation
        return PresentationRecord(
            id=presentation_id or new_presentation_id(),
            file_name=self.file_name,
            total_slides=presentation.total_slides,
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
            resources=self.scheduler.resources,
            lesson_breaks=self.segmenter.breaks,
            slides=list(presentation.slides),
            title=presentation.title,
            author=presentation.author,
        )
