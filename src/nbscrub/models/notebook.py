"""Data models for notebook documents.

Fields are declared in nbformat's canonical (alphabetical) key order so that a
parsed notebook serializes back with its keys where Jupyter put them. Unknown
keys are kept and written after the known ones.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer

SourceValue = Union[str, list[str]]

# Keys that are omitted from the serialized cell when unset, rather than
# written as null.
_OMIT_WHEN_ABSENT = ("attachments", "id")


def _without_absent(data: dict) -> dict:
    for key in _OMIT_WHEN_ABSENT:
        if key in data and data[key] is None:
            del data[key]
    return data


class CodeCell(BaseModel):
    """An executable code cell.

    Attributes:
        cell_type: Always "code"
        execution_count: Execution counter, None when never run
        id: Cell identifier (nbformat >= 4.5)
        metadata: Cell metadata, normally a JSON object
        outputs: Captured outputs
        source: Cell source as a string or list of lines
    """

    cell_type: Literal["code"] = "code"
    execution_count: Optional[int] = None
    id: Optional[str] = None
    metadata: Any = Field(default_factory=dict)
    outputs: list[Any] = Field(default_factory=list)
    source: SourceValue = ""

    model_config = ConfigDict(extra="allow")

    @model_serializer(mode="wrap")
    def _serialize(self, handler):
        return _without_absent(handler(self))


class MarkdownCell(BaseModel):
    """A markdown cell."""

    attachments: Optional[Any] = None
    cell_type: Literal["markdown"] = "markdown"
    id: Optional[str] = None
    metadata: Any = Field(default_factory=dict)
    source: SourceValue = ""

    model_config = ConfigDict(extra="allow")

    @model_serializer(mode="wrap")
    def _serialize(self, handler):
        return _without_absent(handler(self))


class RawCell(BaseModel):
    """A raw (unrendered) cell."""

    attachments: Optional[Any] = None
    cell_type: Literal["raw"] = "raw"
    id: Optional[str] = None
    metadata: Any = Field(default_factory=dict)
    source: SourceValue = ""

    model_config = ConfigDict(extra="allow")

    @model_serializer(mode="wrap")
    def _serialize(self, handler):
        return _without_absent(handler(self))


Cell = Annotated[Union[CodeCell, MarkdownCell, RawCell], Field(discriminator="cell_type")]


class Notebook(BaseModel):
    """A complete nbformat 4 notebook.

    Attributes:
        cells: Ordered list of cells
        metadata: Notebook metadata, normally a JSON object
        nbformat: Major format version
        nbformat_minor: Minor format version
    """

    cells: list[Cell] = Field(default_factory=list)
    metadata: Any = Field(default_factory=dict)
    nbformat: int = 4
    nbformat_minor: int = 5

    model_config = ConfigDict(extra="allow")
