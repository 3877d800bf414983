"""Config model."""

from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field, confloat, conint, constr

from .base import DeckBaseModel

NonEmptyStr = constr(min_length=1)


class Config(DeckBaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=None)

    max_upload_bytes: conint(gt=0) = Field(100 * 1024 * 1024, description="Upload size limit")
    allowed_extensions: List[NonEmptyStr] = Field(
        default_factory=lambda: [".pptx"], description="Accepted upload extensions"
    )
    fallback_title: NonEmptyStr = Field("Untitled Slide", description="Title for slides without one")
    parse_workers: conint(ge=1) = Field(1, description="Threads used to decode slides")
    two_column_max_chars: conint(gt=0) = Field(60, description="Longest line still laid out in columns")
    gallery_max_images: conint(gt=0) = Field(4, description="Images shown by the gallery strategy")
    autoplay_interval_seconds: confloat(gt=0) = Field(5.0, description="Seconds per slide in autoplay")
    runs_dir: NonEmptyStr = Field("runs", description="CLI output directory")
    event_log_path: Optional[str] = Field(None, description="JSONL event log for library events")
