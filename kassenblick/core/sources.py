"""
Reading and atomically rewriting the CSV sources.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger("KassenBlick.sources")

PathLike = Union[str, Path]


class SourceUnavailableError(OSError):
    """The source file could not be opened or decoded."""


def read_source(path: PathLike) -> str:
    """Read a source file as text (UTF-8, optional BOM). Raises SourceUnavailableError."""
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(f"Cannot open {Path(path).name} at: {path} ({e})") from e


def write_source(path: PathLike, content: str) -> None:
    """Replace the file content atomically so a concurrent read never sees a partial file."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except Exception:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    logger.debug(f"Wrote {len(content)} characters to {path}")
