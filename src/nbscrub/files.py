"""Locate notebooks below the paths given on the command line."""

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

NOTEBOOK_SUFFIX = ".ipynb"

# Directories never worth walking into.
SKIP_DIRS = frozenset({".git", ".hg", ".svn", ".ipynb_checkpoints", "__pycache__"})


def is_excluded(path: Path, patterns: Iterable[str]) -> bool:
    """True if the file name or the full path matches any glob pattern."""
    name = path.name
    posix = path.as_posix()
    return any(fnmatch(name, pattern) or fnmatch(posix, pattern) for pattern in patterns)


def _walk(directory: Path, patterns: Sequence[str]) -> Iterable[Path]:
    for child in sorted(directory.iterdir()):
        if is_excluded(child, patterns):
            logger.debug("Excluded %s", child)
            continue
        if child.is_dir():
            if child.name in SKIP_DIRS:
                continue
            yield from _walk(child, patterns)
        elif child.suffix == NOTEBOOK_SUFFIX:
            yield child


def find_notebooks(paths: Sequence[Path | str], exclude: Sequence[str] = ()) -> list[Path]:
    """Expand paths into the notebooks they contain.

    Files named explicitly are always returned, whatever their suffix or the
    exclusion patterns; directories are walked recursively for `.ipynb`
    files, skipping anything matching `exclude`.

    Args:
        paths: Files and directories to search
        exclude: Glob patterns matched against file names and paths

    Returns:
        list[Path]: Notebooks found, without duplicates, in discovery order
    """
    found: dict[Path, None] = {}
    for raw_path in paths:
        path = Path(raw_path)
        if path.is_dir():
            for notebook in _walk(path, exclude):
                found.setdefault(notebook.resolve(), None)
        elif path.exists():
            found.setdefault(path.resolve(), None)
        else:
            logger.warning("Path does not exist: %s", path)
    return list(found)
