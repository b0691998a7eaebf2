"""Filesystem helpers for the cache directory and the playlist output."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

INVALID_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|]")


def sanitize_filename(value: str, default: str = "file") -> str:
    """Removes characters that are invalid on most filesystems."""

    sanitized = INVALID_FILENAME_CHARS.sub("", value or "").strip()
    if sanitized in {".", ".."}:
        sanitized = ""
    return sanitized or default


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path


def atomic_write_text(path: str, content: str) -> None:
    """Writes ``content`` to a sibling temp file, then renames it over ``path``.

    Readers observe either the previous file or the complete new one.
    """

    directory = os.path.dirname(os.path.abspath(path)) or "."
    ensure_directory(directory)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=os.path.basename(path))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def is_safe_filename(value: str) -> bool:
    """True when ``value`` can be used as a filename without being altered."""

    return bool(value) and sanitize_filename(value, default="") == value
