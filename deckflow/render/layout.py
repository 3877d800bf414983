"""Layout tags for slides that carry no absolute geometry."""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

TWO_COLUMN_MIN_LINES = 4


def split_columns(content: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split content at its natural midpoint, ceil(n / 2)."""
    midpoint = math.ceil(len(content) / 2)
    return list(content[:midpoint]), list(content[midpoint:])


def classify_layout(
    title: str,
    content: Sequence[str],
    fallback_title: str = "Untitled Slide",
    two_column_max_chars: int = 60,
) -> str:
    """Assign a layout tag from the flat title/content of a slide.

    Slides without content are ``title`` slides when they carry a real title,
    ``blank`` otherwise. Four or more short lines read as two columns; any
    other content is ``titleContent``.
    """
    if not content:
        if title.strip() and title != fallback_title:
            return "title"
        return "blank"
    if len(content) >= TWO_COLUMN_MIN_LINES and all(
        len(line) <= two_column_max_chars for line in content
    ):
        left, right = split_columns(content)
        if left and right:
            return "twoColumn"
    return "titleContent"
