"""File list resolution and build context packing."""

import io
import os
import tarfile
from pathlib import Path
from typing import Iterable, List, Union

import structlog

from ..models.errors import InvalidInvocation

logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def collect_files(patterns: Iterable[str], base_dir: PathLike = ".") -> List[str]:
    """Expand glob patterns into a list of regular files.

    Paths are returned relative to ``base_dir`` in the order the patterns
    produce them. Directories are dropped and duplicates removed; a literal
    path that does not exist is an error.

    Args:
        patterns: Glob patterns or plain paths, relative to base_dir
        base_dir: Directory the patterns are resolved against

    Returns:
        Relative POSIX paths of the matched files
    """
    base = Path(base_dir)
    seen = set()
    files: List[str] = []

    for pattern in patterns:
        if any(ch in pattern for ch in "*?["):
            matches = sorted(base.glob(pattern))
        else:
            path = base / pattern
            if not path.exists():
                raise InvalidInvocation(f"Source file not found: {pattern}")
            matches = [path]

        for match in matches:
            if match.is_dir():
                continue
            relative = match.relative_to(base).as_posix()
            if relative not in seen:
                seen.add(relative)
                files.append(relative)

    logger.debug("Collected build files", base_dir=str(base), count=len(files))
    return files


def make_build_context(context_dir: PathLike, files: Iterable[str]) -> io.BytesIO:
    """Pack the given files, relative to ``context_dir``, into a tar archive.

    Returns:
        In-memory uncompressed tar positioned at the start
    """
    context = Path(context_dir)
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as tar:
        for name in files:
            arcname = os.path.normpath(name)
            if arcname.startswith("..") or os.path.isabs(arcname):
                raise InvalidInvocation(f"Build file outside of context: {name}")
            tar.add(str(context / arcname), arcname=arcname, recursive=False)
    buffer.seek(0)
    return buffer
