"""RenderPlan contracts."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base import FrozenDeckModel
from .slides import SlideLayout, SlideShape

RenderStrategy = Literal["positioned-shapes", "image-gallery", "templated-layout"]
LayerRole = Literal[
    "background",
    "image",
    "shape",
    "title",
    "paragraph",
    "column",
    "placeholder",
]


class Box(FrozenDeckModel):
    x: float
    y: float
    width: float
    height: float


FULL_BLEED = Box(x=0.0, y=0.0, width=100.0, height=100.0)


class RenderLayer(FrozenDeckModel):
    role: LayerRole
    z: int = 0
    box: Optional[Box] = None
    text: Optional[str] = None
    lines: Optional[List[str]] = None
    image_src: Optional[str] = None
    color: Optional[str] = None
    shape: Optional[SlideShape] = None


class RenderPlan(FrozenDeckModel):
    slide_index: int
    strategy: RenderStrategy
    layout: Optional[SlideLayout] = None
    layers: List[RenderLayer] = Field(default_factory=list)
