"""Per-slide shape tree extraction."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from pptx.enum.shapes import PP_PLACEHOLDER
from pptx.oxml.ns import qn
from pptx.shapes.picture import Picture
from pptx.slide import Slide

from ..errors import SlideDecodeError
from ..models.slides import ParsedSlide, SlideShape, TextParagraph, TextRun
from ..render.layout import classify_layout
from .media import MediaStore
from .units import UnitNormalizer, emu_to_points

TITLE_PLACEHOLDERS = {PP_PLACEHOLDER.TITLE, PP_PLACEHOLDER.CENTER_TITLE}
BULLETED_PLACEHOLDERS = {PP_PLACEHOLDER.BODY, PP_PLACEHOLDER.OBJECT}

ALIGNMENTS = {
    "l": "left",
    "ctr": "center",
    "r": "right",
    "just": "justify",
    "dist": "justify",
}

TRUE_VALUES = {"1", "true"}
ROTATION_UNITS = 60000


def _flag(element, name: str) -> Optional[bool]:
    value = element.get(name)
    if value is None:
        return None
    return value in TRUE_VALUES


def _srgb(parent) -> Optional[str]:
    """Hex color of a direct ``a:solidFill/a:srgbClr`` child, if any."""
    if parent is None:
        return None
    solid = parent.find(qn("a:solidFill"))
    if solid is None:
        return None
    srgb = solid.find(qn("a:srgbClr"))
    if srgb is None or not srgb.get("val"):
        return None
    return f"#{srgb.get('val').upper()}"


def _embed_id(blip) -> Optional[str]:
    if blip is None:
        return None
    return blip.get(qn("r:embed"))


class SlideXMLExtractor:
    """Turns one python-pptx slide into a ``ParsedSlide``."""

    def __init__(
        self,
        normalizer: UnitNormalizer,
        media_store: MediaStore,
        fallback_title: str = "Untitled Slide",
        two_column_max_chars: int = 60,
    ) -> None:
        self.normalizer = normalizer
        self.media_store = media_store
        self.fallback_title = fallback_title
        self.two_column_max_chars = two_column_max_chars

    def extract(self, slide: Slide, index: int) -> ParsedSlide:
        shapes: List[SlideShape] = []
        content: List[str] = []
        title: Optional[str] = None

        for shape in slide.shapes:
            if isinstance(shape, Picture):
                picture = self._picture_shape(slide, shape, index)
                if picture is not None:
                    shapes.append(picture)
                continue
            if not shape.has_text_frame:
                # groups, connectors, tables and charts carry no shape of their own
                continue

            paragraphs = self._paragraphs(shape)
            lines = [p.text.strip() for p in paragraphs if p.text.strip()]
            if title is None and lines and self._is_title(shape):
                title = " ".join(lines)
            else:
                content.extend(lines)

            sp_pr = shape.element.find(qn("p:spPr"))
            fill = _srgb(sp_pr)
            if lines or fill:
                shapes.append(self._text_shape(shape, index, paragraphs, sp_pr, fill))

        images = list(self._decorative_images(slide))
        background_color, background_image = self._background(slide)
        title = title or self.fallback_title

        if shapes or images:
            layout = "custom"
        else:
            layout = classify_layout(
                title,
                content,
                fallback_title=self.fallback_title,
                two_column_max_chars=self.two_column_max_chars,
            )

        return ParsedSlide(
            index=index,
            title=title,
            content=content,
            images=images,
            shapes=shapes,
            layout=layout,
            background_color=background_color,
            background_image=background_image,
            notes=self._notes(slide),
        )

    def placeholder(self, index: int) -> ParsedSlide:
        """Minimal slide used when decoding fails."""
        return ParsedSlide(index=index, title=self.fallback_title, layout="blank")

    # -- shapes -------------------------------------------------------------

    def _geometry(self, shape, index: int) -> Tuple[float, float, float, float]:
        left, top, width, height = shape.left, shape.top, shape.width, shape.height
        if None in (left, top, width, height):
            raise SlideDecodeError(
                index, f"Shape {shape.shape_id} ({shape.name!r}) has no recoverable geometry"
            )
        return self.normalizer.box(left, top, width, height)

    def _rotation(self, sp_pr) -> Optional[float]:
        xfrm = sp_pr.find(qn("a:xfrm")) if sp_pr is not None else None
        if xfrm is None or not xfrm.get("rot"):
            return None
        degrees = int(xfrm.get("rot")) / ROTATION_UNITS
        return degrees or None

    def _stroke(self, sp_pr) -> Tuple[Optional[str], Optional[float]]:
        line = sp_pr.find(qn("a:ln")) if sp_pr is not None else None
        if line is None:
            return None, None
        width = line.get("w")
        return _srgb(line), emu_to_points(int(width)) if width else None

    def _picture_shape(self, slide: Slide, shape: Picture, index: int) -> Optional[SlideShape]:
        r_id = _embed_id(shape.element.find(".//" + qn("a:blip")))
        if r_id is None:
            # linked (external) pictures have nothing to extract
            return None
        image_src = self._store_related_image(slide, r_id)
        x, y, width, height = self._geometry(shape, index)
        sp_pr = shape.element.find(qn("p:spPr"))
        stroke, stroke_width = self._stroke(sp_pr)
        return SlideShape(
            type="image",
            x=x,
            y=y,
            width=width,
            height=height,
            rotation=self._rotation(sp_pr),
            stroke=stroke,
            stroke_width=stroke_width,
            image_src=image_src,
        )

    def _text_shape(self, shape, index, paragraphs, sp_pr, fill) -> SlideShape:
        x, y, width, height = self._geometry(shape, index)
        stroke, stroke_width = self._stroke(sp_pr)
        return SlideShape(
            type="text",
            x=x,
            y=y,
            width=width,
            height=height,
            rotation=self._rotation(sp_pr),
            fill=fill,
            stroke=stroke,
            stroke_width=stroke_width,
            content=paragraphs,
        )

    @staticmethod
    def _is_title(shape) -> bool:
        return shape.is_placeholder and shape.placeholder_format.type in TITLE_PLACEHOLDERS

    @staticmethod
    def _default_bullet(shape) -> str:
        if shape.is_placeholder and shape.placeholder_format.type in BULLETED_PLACEHOLDERS:
            return "bullet"
        return "none"

    # -- text ---------------------------------------------------------------

    def _paragraphs(self, shape) -> List[TextParagraph]:
        tx_body = shape.element.find(qn("p:txBody"))
        if tx_body is None:
            return []
        default_bullet = self._default_bullet(shape)
        return [self._paragraph(p, default_bullet) for p in tx_body.iterchildren(qn("a:p"))]

    def _paragraph(self, p, default_bullet: str) -> TextParagraph:
        p_pr = p.find(qn("a:pPr"))
        alignment = None
        level = 0
        bullet = default_bullet
        if p_pr is not None:
            alignment = ALIGNMENTS.get(p_pr.get("algn"))
            level = int(p_pr.get("lvl", "0"))
            if p_pr.find(qn("a:buNone")) is not None:
                bullet = "none"
            elif p_pr.find(qn("a:buAutoNum")) is not None:
                bullet = "number"
            elif p_pr.find(qn("a:buChar")) is not None:
                bullet = "bullet"
        return TextParagraph(
            runs=list(self._runs(p)),
            alignment=alignment,
            bullet_type=bullet,
            level=level,
        )

    def _runs(self, p) -> Iterable[TextRun]:
        for child in p.iterchildren():
            if child.tag == qn("a:br"):
                yield TextRun(text="\n")
            elif child.tag in (qn("a:r"), qn("a:fld")):
                text_el = child.find(qn("a:t"))
                text = text_el.text if text_el is not None and text_el.text else ""
                yield self._run(text, child.find(qn("a:rPr")))

    @staticmethod
    def _run(text: str, r_pr) -> TextRun:
        if r_pr is None:
            return TextRun(text=text)
        size = r_pr.get("sz")
        underline = r_pr.get("u")
        latin = r_pr.find(qn("a:latin"))
        typeface = latin.get("typeface") if latin is not None else None
        if typeface and typeface.startswith("+"):
            # theme font reference, not a family name
            typeface = None
        return TextRun(
            text=text,
            bold=_flag(r_pr, "b"),
            italic=_flag(r_pr, "i"),
            underline=None if underline is None else underline != "none",
            font_size=int(size) / 100 if size else None,
            color=_srgb(r_pr),
            font_family=typeface,
        )

    # -- media, background, notes ------------------------------------------

    def _store_related_image(self, slide: Slide, r_id: str) -> str:
        part = slide.part.related_part(r_id)
        return self.media_store.store(part.blob, getattr(part, "content_type", None))

    def _decorative_images(self, slide: Slide) -> Iterable[str]:
        """Images filling non-picture shapes, in document order."""
        c_sld = slide.element.find(qn("p:cSld"))
        sp_tree = c_sld.find(qn("p:spTree")) if c_sld is not None else None
        if sp_tree is None:
            return
        seen: Set[str] = set()
        for blip in sp_tree.iter(qn("a:blip")):
            if any(True for _ in blip.iterancestors(qn("p:pic"), qn("p:graphicFrame"))):
                continue
            r_id = _embed_id(blip)
            if r_id is None or r_id in seen:
                continue
            seen.add(r_id)
            yield self._store_related_image(slide, r_id)

    def _background(self, slide: Slide) -> Tuple[Optional[str], Optional[str]]:
        c_sld = slide.element.find(qn("p:cSld"))
        bg = c_sld.find(qn("p:bg")) if c_sld is not None else None
        if bg is None:
            return None, None
        color = None
        srgb = next(bg.iter(qn("a:srgbClr")), None)
        if srgb is not None and srgb.get("val"):
            color = f"#{srgb.get('val').upper()}"
        image = None
        r_id = _embed_id(next(bg.iter(qn("a:blip")), None))
        if r_id is not None:
            image = self._store_related_image(slide, r_id)
        return color, image

    @staticmethod
    def _notes(slide: Slide) -> Optional[str]:
        if not slide.has_notes_slide:
            return None
        frame = slide.notes_slide.notes_text_frame
        if frame is None:
            return None
        return frame.text.strip() or None
