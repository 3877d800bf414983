"""Parsed presentation contracts."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, confloat, conint, model_validator

from .base import FrozenDeckModel

Percent = confloat(ge=0.0, le=100.0)
SlideLayout = Literal["title", "titleContent", "twoColumn", "blank", "custom"]
ShapeType = Literal["text", "image"]
Alignment = Literal["left", "center", "right", "justify"]
BulletType = Literal["none", "bullet", "number"]


class TextRun(FrozenDeckModel):
    text: str
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    font_size: Optional[float] = Field(default=None, description="Points")
    color: Optional[str] = None
    font_family: Optional[str] = None


class TextParagraph(FrozenDeckModel):
    runs: List[TextRun] = Field(default_factory=list)
    alignment: Optional[Alignment] = None
    bullet_type: Optional[BulletType] = None
    level: Optional[conint(ge=0)] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


class SlideShape(FrozenDeckModel):
    type: ShapeType
    x: Percent
    y: Percent
    width: Percent
    height: Percent
    rotation: Optional[float] = Field(default=None, description="Degrees")
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = Field(default=None, description="Points")
    content: Optional[List[TextParagraph]] = None
    image_src: Optional[str] = None

    @model_validator(mode="after")
    def _payload_matches_type(self) -> "SlideShape":
        if self.type == "text":
            if self.content is None or self.image_src is not None:
                raise ValueError("text shape requires content and no imageSrc")
        else:
            if self.image_src is None or self.content is not None:
                raise ValueError("image shape requires imageSrc and no content")
        return self

    @property
    def text(self) -> str:
        """Plain text of a text shape, paragraphs joined by newlines."""
        if not self.content:
            return ""
        return "\n".join(paragraph.text for paragraph in self.content)


class ParsedSlide(FrozenDeckModel):
    index: conint(ge=1)
    title: str
    content: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    shapes: List[SlideShape] = Field(default_factory=list)
    layout: SlideLayout = "blank"
    background_color: Optional[str] = None
    background_image: Optional[str] = None
    notes: Optional[str] = None

    @property
    def thumbnail(self) -> Optional[str]:
        """First inline image, else first picture shape, else the background image."""
        if self.images:
            return self.images[0]
        for shape in self.shapes:
            if shape.type == "image":
                return shape.image_src
        return self.background_image


class ParsedPresentation(FrozenDeckModel):
    total_slides: conint(ge=0)
    slides: List[ParsedSlide] = Field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None

    @model_validator(mode="after")
    def _slides_are_contiguous(self) -> "ParsedPresentation":
        if self.total_slides != len(self.slides):
            raise ValueError(
                f"totalSlides={self.total_slides} but {len(self.slides)} slides given"
            )
        for position, slide in enumerate(self.slides, start=1):
            if slide.index != position:
                raise ValueError(f"slide at position {position} has index {slide.index}")
        return self

    def slide(self, index: int) -> ParsedSlide:
        """Return the slide with a 1-based index."""
        if index < 1 or index > self.total_slides:
            raise IndexError(f"slide {index} out of range 1..{self.total_slides}")
        return self.slides[index - 1]

    @property
    def thumbnails(self) -> List[Optional[str]]:
        return [slide.thumbnail for slide in self.slides]
