"""Pre-commit hook helpers."""

import logging
import math
from pathlib import Path
from typing import Sequence

from nbscrub import NbScrubError
from nbscrub.files import NOTEBOOK_SUFFIX, is_excluded
from nbscrub.models import Settings
from nbscrub.output.writer import NotebookWriter
from nbscrub.parsing.notebook import NotebookParser
from nbscrub.processing.strip import strip_notebook

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_KB = 500


def stripped_size(path: Path, settings: Settings) -> int:
    """Size in bytes of a notebook once it has been cleaned.

    Raises:
        NotebookParseError: If the notebook cannot be read
    """
    nb, _ = strip_notebook(NotebookParser().parse(path), settings)
    return len(NotebookWriter().dumps(nb).encode("utf-8"))


def file_size(path: Path, settings: Settings, exclude: Sequence[str] = ()) -> int:
    """Size in bytes a file will have once committed.

    Notebooks are measured after cleaning unless they match `exclude`;
    anything else, and notebooks that cannot be parsed, by their size on disk.
    """
    if path.suffix == NOTEBOOK_SUFFIX and not is_excluded(path, exclude):
        try:
            return stripped_size(path, settings)
        except NbScrubError as e:
            logger.warning("Could not parse %s, using on-disk size: %s", path, e)
    return path.stat().st_size


def find_large_files(
    paths: Sequence[Path],
    settings: Settings,
    max_size_kb: int = DEFAULT_MAX_SIZE_KB,
    exclude: Sequence[str] = (),
) -> list[tuple[Path, int]]:
    """Files whose size exceeds `max_size_kb`.

    Args:
        paths: Files to measure
        settings: Stripping policy applied to notebooks before measuring
        max_size_kb: Limit in KB; sizes are rounded up to whole KB
        exclude: Patterns of notebooks measured as they are on disk

    Returns:
        list: (path, size in KB) for each file over the limit, in input order
    """
    large = []
    for path in dict.fromkeys(paths):
        size_kb = math.ceil(file_size(path, settings, exclude) / 1024)
        if size_kb > max_size_kb:
            large.append((path, size_kb))
    return large
