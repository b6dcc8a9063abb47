"""Result types reported by the check and strip engines."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class CheckKind(str, Enum):
    """Kind of change the strip engine would make."""

    STRIP_META = "strip_meta"
    DROP_CELL = "drop_cell"
    CLEAR_OUTPUT = "clear_output"
    CLEAR_COUNT = "clear_count"
    CLEAR_ID = "clear_id"
    CELL_STRIP_META = "cell_strip_meta"


class CheckResult(BaseModel):
    """A single finding from the check engine.

    Attributes:
        kind: What would change
        cell_number: Zero-based position of the cell in the checked notebook
        extra_key: Text form of the metadata key, for metadata findings
    """

    kind: CheckKind
    cell_number: Optional[int] = None
    extra_key: Optional[str] = None

    def __str__(self) -> str:
        if self.kind is CheckKind.STRIP_META:
            return f"Found notebook metadata: {self.extra_key}"
        if self.kind is CheckKind.DROP_CELL:
            return f"cell {self.cell_number}: Found cell to be dropped"
        if self.kind is CheckKind.CLEAR_OUTPUT:
            return f"cell {self.cell_number}: Found cell with output"
        if self.kind is CheckKind.CLEAR_COUNT:
            return f"cell {self.cell_number}: Found cell with execution count"
        if self.kind is CheckKind.CLEAR_ID:
            return f"cell {self.cell_number}: Found cell with id to clear"
        return f"cell {self.cell_number}: Found cell metadata {self.extra_key}"


class StripResult(str, Enum):
    """Outcome of cleaning one notebook."""

    NO_CHANGE = "no_change"
    STRIPPED = "stripped"

    @classmethod
    def from_stripped(cls, stripped: bool) -> "StripResult":
        return cls.STRIPPED if stripped else cls.NO_CHANGE

    def __str__(self) -> str:
        return "Stripped" if self is StripResult.STRIPPED else "No Change"
