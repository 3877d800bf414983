"""Error types raised across ingestion, authoring and playback."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class DeckflowError(Exception):
    """Base class for deckflow errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class ParseErrorKind(str, Enum):
    INVALID_ARCHIVE = "InvalidArchive"
    MISSING_MANIFEST = "MissingManifest"
    MALFORMED_XML = "MalformedXML"
    UNSUPPORTED_PART = "UnsupportedPart"


class ParseError(DeckflowError):
    """Fatal, archive-level parse failure."""

    user_message = "The file is not a valid PowerPoint presentation."

    def __init__(self, kind: ParseErrorKind, message: str, part: Optional[str] = None):
        details: Dict[str, Any] = {"kind": kind.value}
        if part:
            details["part"] = part
        super().__init__(message, details)
        self.kind = kind
        self.part = part


class SlideDecodeError(DeckflowError):
    """A single slide could not be decoded; the parser substitutes a placeholder."""

    def __init__(self, slide_index: int, message: str):
        super().__init__(message, {"slide_index": slide_index})
        self.slide_index = slide_index


class UploadRejectionKind(str, Enum):
    OVERSIZE_INPUT = "OversizeInput"
    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"


class UploadRejectedError(DeckflowError):
    """Upload refused before any parse attempt."""

    def __init__(self, kind: UploadRejectionKind, message: str, user_message: str):
        super().__init__(message, {"kind": kind.value})
        self.kind = kind
        self.user_message = user_message


class ResourceValidationError(DeckflowError, ValueError):
    """Authoring input for a slide resource was rejected."""


class LessonBreakError(DeckflowError, ValueError):
    """A lesson break could not be placed."""


class ProgressStoreError(DeckflowError):
    """A progress store write or read failed."""


class PlaybackStateError(DeckflowError):
    """The playback engine was used out of order."""
