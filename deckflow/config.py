"""Runtime configuration loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .models.config import Config


def _require_file(path: Path, label: str) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Missing {label}: {path}")


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration with canonical defaults, overridden by an optional JSON file."""
    overrides: Dict[str, Any] = {}
    if config_path is not None:
        _require_file(config_path, "config_json")
        with open(config_path, "r", encoding="utf-8") as handle:
            overrides = json.load(handle)
        if not isinstance(overrides, dict):
            raise ValueError(f"Config file must hold a JSON object: {config_path}")
    return Config.model_validate(overrides)
