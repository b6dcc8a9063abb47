"""Jupyter notebook parsing functionality."""

import logging
import sys
from pathlib import Path

from nbformat.reader import NotJSONError, get_version, parse_json
from pydantic import ValidationError

from nbscrub import NotebookParseError
from nbscrub.models import Notebook

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR_VERSION = 4


class NotebookParser:
    """Parser for Jupyter notebooks.

    Reads the raw JSON with nbformat's reader helpers and validates it into the
    notebook model without normalizing anything, so that cleaning a clean
    notebook reproduces it exactly.
    """

    def parse(self, filepath: Path | str) -> Notebook:
        """Parse a Jupyter notebook file.

        Args:
            filepath: Path to the .ipynb file

        Returns:
            Notebook: Parsed notebook

        Raises:
            NotebookParseError: If the file is missing or is not a valid notebook
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise NotebookParseError(f"Notebook file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise NotebookParseError(f"Failed to read notebook {filepath}: {e}") from e

        return self.parse_string(text, source=str(filepath))

    def parse_stdin(self) -> Notebook:
        """Parse a notebook from standard input."""
        return self.parse_string(sys.stdin.read(), source="<stdin>")

    def parse_string(self, text: str, source: str = "<string>") -> Notebook:
        """Parse notebook JSON text.

        Args:
            text: Notebook JSON
            source: Name used in error messages

        Returns:
            Notebook: Parsed notebook

        Raises:
            NotebookParseError: If the text is not JSON or not an nbformat 4 notebook
        """
        try:
            nb_dict = parse_json(text)
        except NotJSONError as e:
            raise NotebookParseError(f"Invalid notebook {source}: not valid JSON") from e

        if not isinstance(nb_dict, dict):
            raise NotebookParseError(f"Invalid notebook {source}: top level must be an object")

        major, minor = get_version(nb_dict)
        if major != SUPPORTED_MAJOR_VERSION:
            raise NotebookParseError(
                f"Invalid notebook {source}: unsupported nbformat {major}.{minor}"
            )

        try:
            nb = Notebook.model_validate(nb_dict)
        except ValidationError as e:
            raise NotebookParseError(f"Invalid notebook {source}: {e}") from e

        logger.debug("Parsed %s (nbformat %d.%d, %d cells)", source, major, minor, len(nb.cells))
        return nb
