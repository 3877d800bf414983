"""OOXML package access.

Indexes the ZIP entries of an uploaded deck, checks the package manifests and
opens it with python-pptx, which resolves the relationship graph: the ordered
slide list from the presentation part, and per slide its media and notes.
Archive-level problems surface as ``ParseError``; everything past this point
is handled per slide.

A slide part whose XML does not parse is swapped for an empty slide before
python-pptx sees the package, so one damaged slide costs that slide only.
Its index is reported through ``ContainerReader.damaged_slides``.
"""

from __future__ import annotations

import io
import re
import zipfile
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from lxml import etree
from lxml.etree import XMLSyntaxError
from pptx import Presentation
from pptx.exc import PackageNotFoundError
from pptx.slide import Slide

from ..errors import ParseError, ParseErrorKind
from .units import DEFAULT_SLIDE_HEIGHT, DEFAULT_SLIDE_WIDTH, UnitNormalizer

CONTENT_TYPES_PART = "[Content_Types].xml"
PACKAGE_RELS_PART = "_rels/.rels"
CORE_PROPERTIES_PART = "docProps/core.xml"

SLIDE_PART_PATTERN = re.compile(r"^ppt/slides/slide\d+\.xml$")

EMPTY_SLIDE_XML = (
    b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    b'<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main"'
    b' xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships"'
    b' xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">'
    b"<p:cSld><p:spTree>"
    b'<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    b"<p:grpSpPr/>"
    b"</p:spTree></p:cSld>"
    b"<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
    b"</p:sld>"
)


def _index_entries(data: bytes) -> Dict[str, zipfile.ZipInfo]:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            return {info.filename: info for info in archive.infolist()}
    except zipfile.BadZipFile as exc:
        raise ParseError(ParseErrorKind.INVALID_ARCHIVE, f"Not a ZIP archive: {exc}") from exc


def _repair_slide_parts(data: bytes, entries: Dict[str, zipfile.ZipInfo]) -> Tuple[bytes, Set[str]]:
    """Replace slide parts that are not well-formed XML with an empty slide.

    Returns the (possibly rewritten) package bytes and the repaired part names
    in python-pptx partname form (leading slash).
    """
    damaged: Set[str] = set()
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for name in entries:
            if not SLIDE_PART_PATTERN.match(name):
                continue
            try:
                etree.fromstring(archive.read(name))
            except XMLSyntaxError:
                damaged.add(name)
        if not damaged:
            return data, set()

        out = io.BytesIO()
        with zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as rebuilt:
            for info in archive.infolist():
                payload = EMPTY_SLIDE_XML if info.filename in damaged else archive.read(info.filename)
                rebuilt.writestr(info, payload)
    return out.getvalue(), {f"/{name}" for name in damaged}


class ContainerReader:
    """Opened presentation package."""

    def __init__(self, data: bytes) -> None:
        self.entries = _index_entries(data)
        for required in (CONTENT_TYPES_PART, PACKAGE_RELS_PART):
            if required not in self.entries:
                raise ParseError(
                    ParseErrorKind.MISSING_MANIFEST,
                    f"Package has no {required}",
                    part=required,
                )
        data, repaired_parts = _repair_slide_parts(data, self.entries)
        self._prs = self._open_package(data)
        self._slides = self._resolve_slides()
        self._damaged = frozenset(
            index
            for index, slide in enumerate(self._slides, start=1)
            if str(slide.part.partname) in repaired_parts
        )

    @property
    def damaged_slides(self) -> FrozenSet[int]:
        """1-based indices of slides whose XML part could not be parsed."""
        return self._damaged

    @staticmethod
    def _open_package(data: bytes):
        try:
            return Presentation(io.BytesIO(data))
        except XMLSyntaxError as exc:
            raise ParseError(ParseErrorKind.MALFORMED_XML, f"Unparseable XML part: {exc}") from exc
        except PackageNotFoundError as exc:
            raise ParseError(ParseErrorKind.INVALID_ARCHIVE, str(exc)) from exc
        except KeyError as exc:
            raise ParseError(
                ParseErrorKind.MISSING_MANIFEST,
                f"Relationship target missing: {exc}",
                part=str(exc.args[0]) if exc.args else None,
            ) from exc
        except ValueError as exc:
            # python-pptx refuses packages whose main part is not a presentation
            raise ParseError(ParseErrorKind.UNSUPPORTED_PART, str(exc)) from exc

    def _resolve_slides(self) -> List[Slide]:
        try:
            return list(self._prs.slides)
        except KeyError as exc:
            raise ParseError(
                ParseErrorKind.MISSING_MANIFEST,
                f"Slide relationship missing: {exc}",
                part="ppt/_rels/presentation.xml.rels",
            ) from exc

    @property
    def slides(self) -> List[Slide]:
        return list(self._slides)

    def slide_count(self) -> int:
        return len(self._slides)

    @property
    def slide_size(self) -> Tuple[int, int]:
        """Native (width, height) in EMU."""
        width = self._prs.slide_width or DEFAULT_SLIDE_WIDTH
        height = self._prs.slide_height or DEFAULT_SLIDE_HEIGHT
        return int(width), int(height)

    def normalizer(self) -> UnitNormalizer:
        width, height = self.slide_size
        return UnitNormalizer(slide_width=width, slide_height=height)

    def core_properties(self) -> Tuple[Optional[str], Optional[str]]:
        """(title, author) from the package core properties, if present."""
        # python-pptx synthesizes default properties when the part is absent
        if CORE_PROPERTIES_PART not in self.entries:
            return None, None
        props = self._prs.core_properties
        return props.title or None, props.author or None
