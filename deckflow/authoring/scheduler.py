"""Anchoring of interactive resources to slide boundaries."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from ..errors import ResourceValidationError
from ..models.resources import SlideResource


class ResourceScheduler:
    """Answers "which resources show at slide N".

    With the one-slide window, a resource is active at slide ``s`` exactly
    when ``show_after_slide == s``, so resources are indexed by that anchor.
    Anchor 0 shows before the first slide, ``total_slides`` after the last.
    """

    def __init__(self, total_slides: int, resources: Iterable[SlideResource] = ()) -> None:
        if total_slides < 0:
            raise ValueError(f"total_slides must be >= 0, got {total_slides}")
        self.total_slides = total_slides
        self._ordered: List[SlideResource] = []
        self._by_anchor: Dict[int, List[SlideResource]] = defaultdict(list)
        for resource in resources:
            self.insert(resource)

    @property
    def resources(self) -> List[SlideResource]:
        return list(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def get(self, resource_id: str) -> Optional[SlideResource]:
        for resource in self._ordered:
            if resource.id == resource_id:
                return resource
        return None

    def insert(self, resource: SlideResource) -> SlideResource:
        if not 0 <= resource.show_after_slide <= self.total_slides:
            raise ResourceValidationError(
                f"Resource {resource.id!r} anchored after slide {resource.show_after_slide}, "
                f"deck has {self.total_slides} slides",
                {"field": "showAfterSlide", "value": resource.show_after_slide},
            )
        if self.get(resource.id) is not None:
            raise ResourceValidationError(
                f"Duplicate resource id {resource.id!r}", {"field": "id", "value": resource.id}
            )
        self._ordered.append(resource)
        self._by_anchor[resource.show_after_slide].append(resource)
        return resource

    def insert_from_dict(self, data: Mapping[str, Any]) -> SlideResource:
        """Validate raw authoring input and insert it."""
        try:
            resource = SlideResource.model_validate(dict(data))
        except ValidationError as exc:
            raise ResourceValidationError(
                f"Invalid resource: {exc.error_count()} validation error(s)",
                {"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc
        return self.insert(resource)

    def remove(self, resource_id: str) -> SlideResource:
        resource = self.get(resource_id)
        if resource is None:
            raise KeyError(f"Unknown resource id: {resource_id}")
        self._ordered.remove(resource)
        anchored = self._by_anchor[resource.show_after_slide]
        anchored.remove(resource)
        if not anchored:
            del self._by_anchor[resource.show_after_slide]
        return resource

    def query(self, slide_index: int) -> List[SlideResource]:
        """Resources active at ``slide_index``, in insertion order."""
        return list(self._by_anchor.get(slide_index, ()))

    def first_at(self, slide_index: int) -> Optional[SlideResource]:
        anchored = self._by_anchor.get(slide_index)
        return anchored[0] if anchored else None

    def slides_with_resources(self) -> List[int]:
        return sorted(self._by_anchor)
