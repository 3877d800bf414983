"""Pre-parse upload checks."""

from __future__ import annotations

from pathlib import PurePath

from ..errors import UploadRejectedError, UploadRejectionKind
from ..models.config import Config


def _format_megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.0f}MB"


def check_upload(file_name: str, size: int, config: Config) -> None:
    """Reject uploads with the wrong extension or over the size limit."""
    suffix = PurePath(file_name).suffix.lower()
    allowed = [ext.lower() for ext in config.allowed_extensions]
    if suffix not in allowed:
        raise UploadRejectedError(
            UploadRejectionKind.UNSUPPORTED_FILE_TYPE,
            f"Unsupported extension {suffix or '(none)'!r} for {file_name}",
            user_message=f"Please upload a {' or '.join(allowed)} file",
        )
    if size > config.max_upload_bytes:
        raise UploadRejectedError(
            UploadRejectionKind.OVERSIZE_INPUT,
            f"{file_name} is {size} bytes, limit is {config.max_upload_bytes}",
            user_message=f"File size must be under {_format_megabytes(config.max_upload_bytes)}",
        )
