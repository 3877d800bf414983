"""Rendering strategy selection.

Every slide maps to exactly one strategy:

- ``positioned-shapes`` when it carries shapes with absolute geometry;
- ``image-gallery`` when it only has inline images;
- ``templated-layout`` otherwise, keyed by the slide's layout tag.
"""

from __future__ import annotations

from typing import List

from ..models.render_plan import FULL_BLEED, Box, RenderLayer, RenderPlan, RenderStrategy
from ..models.slides import ParsedSlide
from .layout import split_columns

Z_BACKGROUND = -1
Z_IMAGE = 0
Z_SHAPE = 5
Z_TITLE = 10

TITLE_BOX = Box(x=5.0, y=5.0, width=90.0, height=15.0)
TITLE_ONLY_BOX = Box(x=5.0, y=35.0, width=90.0, height=30.0)
BODY_BOX = Box(x=5.0, y=25.0, width=90.0, height=70.0)
LEFT_COLUMN_BOX = Box(x=5.0, y=25.0, width=42.5, height=70.0)
RIGHT_COLUMN_BOX = Box(x=52.5, y=25.0, width=42.5, height=70.0)


def select_strategy(slide: ParsedSlide) -> RenderStrategy:
    if slide.shapes:
        return "positioned-shapes"
    if slide.images:
        return "image-gallery"
    return "templated-layout"


def _normalized(text: str) -> str:
    return " ".join(text.split())


def _background(slide: ParsedSlide) -> List[RenderLayer]:
    if slide.background_color is None and slide.background_image is None:
        return []
    return [
        RenderLayer(
            role="background",
            z=Z_BACKGROUND,
            box=FULL_BLEED,
            color=slide.background_color,
            image_src=slide.background_image,
        )
    ]


class RenderSelector:
    def __init__(self, fallback_title: str = "Untitled Slide", gallery_max_images: int = 4) -> None:
        self.fallback_title = fallback_title
        self.gallery_max_images = gallery_max_images

    def plan(self, slide: ParsedSlide) -> RenderPlan:
        strategy = select_strategy(slide)
        if strategy == "positioned-shapes":
            layers = self._positioned(slide)
        elif strategy == "image-gallery":
            layers = self._gallery(slide)
        else:
            layers = self._templated(slide)
        return RenderPlan(
            slide_index=slide.index,
            strategy=strategy,
            layout=slide.layout if strategy == "templated-layout" else None,
            layers=layers,
        )

    def _has_real_title(self, slide: ParsedSlide) -> bool:
        return bool(slide.title.strip()) and slide.title != self.fallback_title

    def _positioned(self, slide: ParsedSlide) -> List[RenderLayer]:
        layers = _background(slide)
        layers.extend(
            RenderLayer(role="image", z=Z_IMAGE, box=FULL_BLEED, image_src=src)
            for src in slide.images
        )
        for shape in slide.shapes:
            layers.append(
                RenderLayer(
                    role="shape",
                    z=Z_SHAPE,
                    box=Box(x=shape.x, y=shape.y, width=shape.width, height=shape.height),
                    shape=shape,
                )
            )
        title = _normalized(slide.title)
        title_on_canvas = any(
            shape.type == "text" and _normalized(shape.text) == title for shape in slide.shapes
        )
        if not title_on_canvas and self._has_real_title(slide):
            layers.append(RenderLayer(role="title", z=Z_TITLE, box=TITLE_BOX, text=slide.title))
        return layers

    def _gallery(self, slide: ParsedSlide) -> List[RenderLayer]:
        layers = _background(slide)
        if self._has_real_title(slide):
            layers.append(RenderLayer(role="title", z=Z_TITLE, text=slide.title))
        layers.extend(
            RenderLayer(role="image", z=Z_IMAGE, image_src=src)
            for src in slide.images[: self.gallery_max_images]
        )
        layers.extend(RenderLayer(role="paragraph", z=Z_SHAPE, text=line) for line in slide.content)
        return layers

    def _templated(self, slide: ParsedSlide) -> List[RenderLayer]:
        layers = _background(slide)
        layout = slide.layout
        if layout == "blank":
            layers.append(
                RenderLayer(
                    role="placeholder",
                    z=Z_SHAPE,
                    box=TITLE_ONLY_BOX,
                    text=f"Slide {slide.index}",
                )
            )
            return layers
        if layout == "title":
            layers.append(RenderLayer(role="title", z=Z_TITLE, box=TITLE_ONLY_BOX, text=slide.title))
            return layers

        layers.append(RenderLayer(role="title", z=Z_TITLE, box=TITLE_BOX, text=slide.title))
        if layout == "twoColumn":
            left, right = split_columns(slide.content)
            layers.append(RenderLayer(role="column", z=Z_SHAPE, box=LEFT_COLUMN_BOX, lines=left))
            layers.append(RenderLayer(role="column", z=Z_SHAPE, box=RIGHT_COLUMN_BOX, lines=right))
        else:
            # titleContent, and custom slides that lost their geometry
            layers.append(
                RenderLayer(role="column", z=Z_SHAPE, box=BODY_BOX, lines=list(slide.content))
            )
        return layers


def plan_slide(slide: ParsedSlide) -> RenderPlan:
    return RenderSelector().plan(slide)
