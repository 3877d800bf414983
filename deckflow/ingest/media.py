"""Media blob stores for images extracted from a package."""

from __future__ import annotations

import base64
import hashlib
import mimetypes
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

DEFAULT_CONTENT_TYPE = "image/png"


class MediaStore(Protocol):
    def store(self, data: bytes, content_type: Optional[str] = None) -> str:
        """Persist ``data`` and return an opaque image reference."""

    def resolve(self, ref: str) -> Union[bytes, str]:
        """Return the bytes (or a URL) behind a reference."""


def _digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class InMemoryMediaStore:
    """Content-addressed store; identical bytes always map to the same reference."""

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def store(self, data: bytes, content_type: Optional[str] = None) -> str:
        ref = f"sha256:{_digest(data)}"
        with self._lock:
            self._blobs.setdefault(ref, data)
        return ref

    def resolve(self, ref: str) -> bytes:
        try:
            return self._blobs[ref]
        except KeyError:
            raise KeyError(f"Unknown media reference: {ref}") from None

    def __len__(self) -> int:
        return len(self._blobs)


class DataUriMediaStore:
    """Inlines each image as a base64 data URI."""

    def store(self, data: bytes, content_type: Optional[str] = None) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{content_type or DEFAULT_CONTENT_TYPE};base64,{encoded}"

    def resolve(self, ref: str) -> bytes:
        if not ref.startswith("data:") or ";base64," not in ref:
            raise KeyError(f"Not a base64 data URI: {ref[:40]}")
        return base64.b64decode(ref.split(";base64,", 1)[1])


class DirectoryMediaStore:
    """Writes images to ``root`` under content-hash file names."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def store(self, data: bytes, content_type: Optional[str] = None) -> str:
        ext = mimetypes.guess_extension(content_type or DEFAULT_CONTENT_TYPE) or ".bin"
        if ext == ".jpe":
            ext = ".jpg"
        name = f"{_digest(data)}{ext}"
        path = self.root / name
        if not path.exists():
            path.write_bytes(data)
        return name

    def resolve(self, ref: str) -> bytes:
        path = self.root / ref
        if not path.exists():
            raise KeyError(f"Unknown media reference: {ref}")
        return path.read_bytes()
