"""Path helpers for the scan root: user expansion and Windows/WSL drive translation."""
from __future__ import annotations

from pathlib import Path
import os
import re

_WINDOWS_DRIVE_PATTERN = re.compile(r"^([A-Za-z]):[\\/](.*)")
_WSL_PATTERN = re.compile(r"^/mnt/([a-zA-Z])/(.*)")


def _windows_to_wsl(path: str) -> str:
    match = _WINDOWS_DRIVE_PATTERN.match(path)
    if not match:
        return path
    drive = match.group(1).lower()
    rest = match.group(2).replace('\\', '/')
    return f"/mnt/{drive}/{rest}"


def resolve_root(value: str | None, default: str = "/") -> Path:
    """Turn the user-supplied scan directory into an absolute path.

    Empty values fall back to `default`. On POSIX a `C:\\...` path is mapped to
    its `/mnt/c/...` WSL mount so the same flag works from either shell.
    """
    value = (value or "").strip() or default
    value = os.path.expanduser(value)
    if os.name == 'posix':
        value = _windows_to_wsl(value)
    return Path(os.path.abspath(value))

