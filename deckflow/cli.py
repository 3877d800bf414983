"""CLI entry point for deckflow."""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .authoring.segmenter import LessonSegmenter
from .authoring.session import AuthoringSession
from .config import load_config
from .errors import LessonBreakError, ParseError, UploadRejectedError
from .ingest.container import ContainerReader
from .ingest.media import DataUriMediaStore, DirectoryMediaStore, MediaStore
from .ingest.parser import PresentationParser
from .logging_utils import PARSE_FAILED, RECORD_WRITTEN, UPLOAD_REJECTED, log_event
from .models.config import Config
from .render.selector import RenderSelector


def _generate_run_id() -> str:
    """Generate a timestamp-based run ID."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", type=str, help="Path to a .pptx file")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file (default: built-in defaults)",
    )


def _load(args: argparse.Namespace) -> Config:
    return load_config(Path(args.config) if getattr(args, "config", None) else None)


def _read_deck(path: Path) -> Optional[bytes]:
    if not path.exists():
        print(f"ERROR: File not found: {path}")
        return None
    return path.read_bytes()


def cmd_parse(args: argparse.Namespace) -> int:
    """Check, parse and write presentation.json for an upload."""
    config = _load(args)
    deck_path = Path(args.file)
    data = _read_deck(deck_path)
    if data is None:
        return 1

    run_dir = Path(args.out) if args.out else Path(config.runs_dir) / _generate_run_id()
    run_dir.mkdir(parents=True, exist_ok=True)
    log_path = run_dir / "run_log.jsonl"

    media_store: MediaStore
    if args.media_dir:
        media_store = DirectoryMediaStore(Path(args.media_dir))
    else:
        media_store = DataUriMediaStore()

    try:
        session = AuthoringSession.from_upload(
            deck_path.name, data, config=config, media_store=media_store, event_log=log_path
        )
    except UploadRejectedError as exc:
        log_event(log_path, UPLOAD_REJECTED, exc.to_dict())
        print(f"ERROR: {exc.user_message}")
        return 1
    except ParseError as exc:
        log_event(log_path, PARSE_FAILED, exc.to_dict())
        print(f"ERROR: {exc.user_message} ({exc.kind.value}: {exc.message})")
        return 1

    record = session.to_record()
    record_path = run_dir / "presentation.json"
    with open(record_path, "w", encoding="utf-8") as f:
        f.write(record.to_json())
    log_event(log_path, RECORD_WRITTEN, {"path": str(record_path), "id": record.id})

    if session.parse_result.warning:
        print(f"WARNING: {session.parse_result.warning}")
    print(f"Parsed {record.total_slides} slides from: {deck_path}")
    print(f"Presentation saved to: {record_path}")
    print(f"Run artifacts in: {run_dir}")
    return 0


def cmd_count(args: argparse.Namespace) -> int:
    data = _read_deck(Path(args.file))
    if data is None:
        return 1
    try:
        count = ContainerReader(data).slide_count()
    except ParseError as exc:
        print(f"ERROR: {exc.user_message} ({exc.kind.value})")
        return 1
    print(count)
    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    """Print render plans as JSON."""
    config = _load(args)
    data = _read_deck(Path(args.file))
    if data is None:
        return 1
    try:
        presentation = PresentationParser(config).parse(data).presentation
    except ParseError as exc:
        print(f"ERROR: {exc.user_message} ({exc.kind.value})")
        return 1

    selector = RenderSelector(config.fallback_title, config.gallery_max_images)
    if args.slide is not None:
        try:
            slides = [presentation.slide(args.slide)]
        except IndexError as exc:
            print(f"ERROR: {exc}")
            return 1
    else:
        slides = list(presentation.slides)
    plans = [selector.plan(slide).to_dict() for slide in slides]
    print(json.dumps(plans if args.slide is None else plans[0], indent=2, sort_keys=True))
    return 0


def cmd_lessons(args: argparse.Namespace) -> int:
    data = _read_deck(Path(args.file))
    if data is None:
        return 1
    try:
        total = ContainerReader(data).slide_count()
    except ParseError as exc:
        print(f"ERROR: {exc.user_message} ({exc.kind.value})")
        return 1

    segmenter = LessonSegmenter(total)
    try:
        for after_slide in args.breaks or []:
            segmenter.insert(after_slide)
    except LessonBreakError as exc:
        print(f"ERROR: {exc}")
        return 1
    for number, first, last in segmenter.lessons():
        print(f"Lesson {number}: slides {first}-{last}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="deckflow CLI - presentation ingestion and playback")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse a .pptx into presentation.json")
    _add_common_args(parse_parser)
    parse_parser.add_argument(
        "--out", type=str, default=None, help="Output directory (default: runs/<timestamp>)"
    )
    parse_parser.add_argument(
        "--media-dir",
        type=str,
        default=None,
        help="Store extracted images in this directory (default: inline data URIs)",
    )
    parse_parser.set_defaults(func=cmd_parse)

    # Count command
    count_parser = subparsers.add_parser("count", help="Print the slide count")
    count_parser.add_argument("file", type=str, help="Path to a .pptx file")
    count_parser.set_defaults(func=cmd_count)

    # Plan command
    plan_parser = subparsers.add_parser("plan", help="Print render plans as JSON")
    _add_common_args(plan_parser)
    plan_parser.add_argument(
        "--slide", type=int, default=None, help="Only this 1-based slide (default: all)"
    )
    plan_parser.set_defaults(func=cmd_plan)

    # Lessons command
    lessons_parser = subparsers.add_parser("lessons", help="Print lesson ranges for given breaks")
    lessons_parser.add_argument("file", type=str, help="Path to a .pptx file")
    lessons_parser.add_argument(
        "--break",
        dest="breaks",
        type=int,
        action="append",
        default=None,
        help="Start a new lesson after this slide (repeatable)",
    )
    lessons_parser.set_defaults(func=cmd_lessons)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
