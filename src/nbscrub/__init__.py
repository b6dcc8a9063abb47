"""nbscrub - Strip volatile state from Jupyter notebooks before it reaches git.

Outputs, execution counts, cell ids and editor metadata are removed according
to a declarative policy so that diffs only show meaningful changes.
"""

from enum import Enum

__version__ = "0.1.0"


class NbScrubError(Exception):
    """Base exception for all nbscrub errors."""

    pass


class NotebookParseError(NbScrubError):
    """Raised when a notebook cannot be read or does not fit the notebook model."""

    pass


class NotebookWriteError(NbScrubError):
    """Raised when a cleaned notebook cannot be written."""

    pass


class ConfigurationError(NbScrubError):
    """Raised when configuration is invalid or cannot be read."""

    pass


class ExtraKeyParseErrorKind(str, Enum):
    """Why an extra key string was rejected."""

    EMPTY = "empty"
    EMPTY_SUB_KEY = "empty_sub_key"
    NOT_CELL_OR_METADATA = "not_cell_or_metadata"


_PARSE_ERROR_MESSAGES = {
    ExtraKeyParseErrorKind.EMPTY: "Key must not be empty",
    ExtraKeyParseErrorKind.EMPTY_SUB_KEY: "Key must name a field below `metadata` or `cell.metadata`",
    ExtraKeyParseErrorKind.NOT_CELL_OR_METADATA: "Key must start with `cell.metadata` or `metadata`",
}


class ExtraKeyParseError(NbScrubError, ValueError):
    """Raised when an extra key string cannot be parsed.

    Attributes:
        kind: Category of the parse failure
        key: The offending key text
    """

    def __init__(self, kind: ExtraKeyParseErrorKind, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{_PARSE_ERROR_MESSAGES[kind]}: {key!r}")
