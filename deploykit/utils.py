"""Small filesystem, formatting and console helpers."""

from __future__ import annotations

import os
from datetime import datetime

_SIZE_PREFIXES = "KMGTPE"
_UNSAFE_FILENAME_CHARS = ("/", "\\", ":", "*", "?", '"', "<", ">", "|")
_VALID_PROJECT_TYPES = frozenset({"npm", "maven", "gradle", "auto"})
VERSION_FORMAT = "%Y%m%d-%H%M%S"


def _base_name(path: str) -> str:
    """Return the last element of *path*, ignoring trailing separators."""
    if path == "":
        return "."
    separators = os.sep + (os.altsep or "")
    stripped = path.rstrip(separators)
    if stripped == "":
        return os.sep
    return os.path.basename(stripped)


def file_exists(path: str | os.PathLike) -> bool:
    """Return True if *path* can be stat'ed."""
    try:
        os.stat(path)
    except (OSError, ValueError):
        return False
    return True


def dir_exists(path: str | os.PathLike) -> bool:
    """Return True if *path* exists and is a directory."""
    return os.path.isdir(path)


def ensure_dir(path: str | os.PathLike) -> None:
    """Create *path* (and its parents) unless it is already a directory."""
    if not dir_exists(path):
        os.makedirs(path, mode=0o755, exist_ok=True)


def get_project_name(project_path: str) -> str:
    """Derive a project name from a path, using the working directory for '.'."""
    if project_path in ("", "."):
        try:
            return _base_name(os.getcwd())
        except OSError:
            return "unknown"
    return _base_name(project_path)


def generate_version() -> str:
    """Return a timestamp version such as 20240131-235959."""
    return datetime.now().strftime(VERSION_FORMAT)


def format_file_size(size: int) -> str:
    """Format a byte count with binary prefixes and one decimal place."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {_SIZE_PREFIXES[exp]}B"


def sanitize_file_name(name: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    return name.translate({ord(ch): "_" for ch in _UNSAFE_FILENAME_CHARS})


def is_valid_project_type(project_type: str) -> bool:
    """Return True for npm, maven, gradle or auto."""
    return project_type in _VALID_PROJECT_TYPES


def print_success(message: str) -> None:
    print(f"✅ {message}")


def print_error(message: str) -> None:
    print(f"❌ {message}")


def print_warning(message: str) -> None:
    print(f"⚠️  {message}")


def print_info(message: str) -> None:
    print(f"ℹ️  {message}")