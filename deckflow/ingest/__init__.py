"""Package ingestion: container access, shape extraction, media storage."""

from .container import ContainerReader
from .extractor import SlideXMLExtractor
from .media import DataUriMediaStore, DirectoryMediaStore, InMemoryMediaStore, MediaStore
from .parser import ParseResult, PresentationParser, parse_pptx, parse_pptx_async
from .units import UnitNormalizer, emu_to_percent
from .upload import check_upload

__all__ = [
    "ContainerReader",
    "SlideXMLExtractor",
    "MediaStore",
    "InMemoryMediaStore",
    "DataUriMediaStore",
    "DirectoryMediaStore",
    "ParseResult",
    "PresentationParser",
    "parse_pptx",
    "parse_pptx_async",
    "UnitNormalizer",
    "emu_to_percent",
    "check_upload",
]
