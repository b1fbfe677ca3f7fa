"""Scanner: walk a source directory and yield candidate file paths."""
import logging
import os
from pathlib import Path
from typing import Callable, Iterator, Optional

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp"})

WalkErrorCallback = Callable[[OSError], None]

log = logging.getLogger(__name__)


def _log_walk_error(err: OSError) -> None:
    log.warning("Skipping unreadable entry %s: %s", err.filename, err.strerror or err)


def discover(source, on_error: Optional[WalkErrorCallback] = None) -> Iterator[Path]:
    """Yield every non-directory entry below `source`, hidden ones included.

    Args:
        source: directory to walk
        on_error: called with the OSError for each entry the walk cannot read;
            the entry is skipped and the walk carries on. Defaults to a warning log.
    """
    root = Path(source)
    if not root.exists():
        raise FileNotFoundError(f"Source path not found: {source}")

    if not root.is_dir():
        yield root
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error or _log_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            yield Path(dirpath) / name


def _extension(path) -> str:
    # unlike Path.suffix, a bare dotfile such as ".jpg" keeps its extension
    name = Path(path).name
    dot = name.rfind(".")
    return name[dot:].lower() if dot >= 0 else ""


def is_image(path) -> bool:
    """True when the extension (case-insensitive) is an allow-listed image type."""
    return _extension(path) in IMAGE_EXTENSIONS


def scan_images(source, on_error: Optional[WalkErrorCallback] = None) -> Iterator[Path]:
    return (p for p in discover(source, on_error=on_error) if is_image(p))
