"""Layout classification and render strategy selection."""

from .layout import classify_layout, split_columns
from .selector import RenderSelector, plan_slide, select_strategy

__all__ = [
    "classify_layout",
    "split_columns",
    "RenderSelector",
    "plan_slide",
    "select_strategy",
]
