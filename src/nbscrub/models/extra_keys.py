"""Addressable metadata locations that can be stripped from a notebook."""

from dataclasses import dataclass
from enum import Enum

from nbscrub import ExtraKeyParseError, ExtraKeyParseErrorKind


class KeyTarget(str, Enum):
    """Which metadata object an extra key points into."""

    CELL_METADATA = "cell.metadata"
    NOTEBOOK_METADATA = "metadata"


@dataclass(frozen=True)
class ExtraKey:
    """A dotted path to a metadata field targeted for removal.

    Path segments are kept as written. A segment boundary and a literal dot
    inside a key look the same in text form; the resolver decides which one
    is meant when it walks the actual metadata.

    Attributes:
        target: Cell or notebook metadata
        path: Non-empty sequence of raw key segments
    """

    target: KeyTarget
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.path:
            raise ExtraKeyParseError(ExtraKeyParseErrorKind.EMPTY_SUB_KEY, self.target.value)

    @classmethod
    def parse(cls, text: str) -> "ExtraKey":
        """Parse `metadata.<path>` or `cell.metadata.<path>`.

        Raises:
            ExtraKeyParseError: If the text is empty, has no path below the
                prefix, or starts with anything else
        """
        if not text:
            raise ExtraKeyParseError(ExtraKeyParseErrorKind.EMPTY, text)

        parts = text.split(".")
        head, rest = parts[0], parts[1:]

        if head == "cell":
            if not rest or rest[0] != "metadata":
                raise ExtraKeyParseError(ExtraKeyParseErrorKind.NOT_CELL_OR_METADATA, text)
            target = KeyTarget.CELL_METADATA
            path = rest[1:]
        elif head == "metadata":
            target = KeyTarget.NOTEBOOK_METADATA
            path = rest
        else:
            raise ExtraKeyParseError(ExtraKeyParseErrorKind.NOT_CELL_OR_METADATA, text)

        if not any(path):
            raise ExtraKeyParseError(ExtraKeyParseErrorKind.EMPTY_SUB_KEY, text)

        return cls(target=target, path=tuple(path))

    def __str__(self) -> str:
        return f"{self.target.value}.{'.'.join(self.path)}"
