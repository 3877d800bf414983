"""Run log for deck ingestion.

Each authoring run appends one JSON object per line to ``run_log.jsonl``:
upload rejections, parse start/finish with slide counts, slides that fell
back to placeholders, and the written presentation record. Library code
passes ``None`` as the path when no run directory is configured.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

PARSE_START = "PARSE_START"
PARSE_DONE = "PARSE_DONE"
PARSE_FAILED = "PARSE_FAILED"
SLIDE_DECODE_FAILED = "SLIDE_DECODE_FAILED"
UPLOAD_REJECTED = "UPLOAD_REJECTED"
RECORD_WRITTEN = "RECORD_WRITTEN"

EVENT_TYPES = frozenset(
    {PARSE_START, PARSE_DONE, PARSE_FAILED, SLIDE_DECODE_FAILED, UPLOAD_REJECTED, RECORD_WRITTEN}
)


def log_event(log_path: Optional[Path], event_type: str, payload: Dict[str, Any]) -> None:
    """Append an ingestion event to the run log; no-op without a path."""
    if log_path is None:
        return
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown run log event: {event_type}")
    record = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "event_type": event_type,
        "payload": payload,
    }
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, ensure_ascii=True) + "\n")
