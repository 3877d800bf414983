"""PPTX bytes to ParsedPresentation.

Archive-level failures raise ``ParseError``. A slide that cannot be decoded is
replaced with a placeholder so the deck stays available; its index is reported
in ``ParseResult.failed_slides``.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from pptx.slide import Slide

from ..logging_utils import SLIDE_DECODE_FAILED, log_event
from ..models.config import Config
from ..models.slides import ParsedPresentation, ParsedSlide
from .container import ContainerReader
from .extractor import SlideXMLExtractor
from .media import InMemoryMediaStore, MediaStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    presentation: ParsedPresentation
    failed_slides: Tuple[int, ...] = ()

    @property
    def warning(self) -> Optional[str]:
        """Author-facing notice when some slides degraded to placeholders."""
        if not self.failed_slides:
            return None
        return (
            f"{len(self.failed_slides)} of {self.presentation.total_slides} "
            "slides could not be fully extracted"
        )


class PresentationParser:
    def __init__(
        self,
        config: Optional[Config] = None,
        media_store: Optional[MediaStore] = None,
        event_log: Optional[Path] = None,
    ) -> None:
        self.config = config or Config()
        self.media_store = media_store if media_store is not None else InMemoryMediaStore()
        if event_log is None and self.config.event_log_path:
            event_log = Path(self.config.event_log_path)
        self.event_log = event_log

    def parse(self, data: bytes) -> ParseResult:
        """Parse a whole package."""
        container = ContainerReader(data)
        extractor = SlideXMLExtractor(
            container.normalizer(),
            self.media_store,
            fallback_title=self.config.fallback_title,
            two_column_max_chars=self.config.two_column_max_chars,
        )
        damaged = container.damaged_slides
        indexed = [
            (index, slide, index in damaged) for index, slide in enumerate(container.slides, start=1)
        ]

        if self.config.parse_workers > 1 and len(indexed) > 1:
            with ThreadPoolExecutor(max_workers=self.config.parse_workers) as pool:
                decoded = list(pool.map(lambda item: self._decode(extractor, *item), indexed))
        else:
            decoded = [self._decode(extractor, *item) for item in indexed]

        slides: List[ParsedSlide] = [slide for slide, _ in decoded]
        failed = tuple(slide.index for slide, ok in decoded if not ok)
        title, author = container.core_properties()
        presentation = ParsedPresentation(
            total_slides=len(slides),
            slides=slides,
            title=title,
            author=author,
        )
        return ParseResult(presentation=presentation, failed_slides=failed)

    def _decode(
        self, extractor: SlideXMLExtractor, index: int, slide: Slide, damaged: bool = False
    ) -> Tuple[ParsedSlide, bool]:
        if damaged:
            return self._fail(extractor, index, "MalformedXML: slide part is not well-formed XML")
        try:
            return extractor.extract(slide, index), True
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return self._fail(extractor, index, f"{type(exc).__name__}: {exc}")

    def _fail(self, extractor: SlideXMLExtractor, index: int, error: str) -> Tuple[ParsedSlide, bool]:
        logger.warning("Slide %d could not be decoded, using placeholder: %s", index, error)
        log_event(self.event_log, SLIDE_DECODE_FAILED, {"slide_index": index, "error": error})
        return extractor.placeholder(index), False

    def count_slides(self, data: bytes) -> int:
        """Cheap slide count without decoding shapes."""
        return ContainerReader(data).slide_count()


def parse_pptx(
    data: bytes,
    config: Optional[Config] = None,
    media_store: Optional[MediaStore] = None,
) -> ParsedPresentation:
    return PresentationParser(config, media_store).parse(data).presentation


async def parse_pptx_async(
    data: bytes,
    config: Optional[Config] = None,
    media_store: Optional[MediaStore] = None,
) -> ParseResult:
    """Parse on a worker thread so an event loop stays responsive."""
    parser = PresentationParser(config, media_store)
    return await asyncio.to_thread(parser.parse, data)
