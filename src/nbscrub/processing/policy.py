"""Per-cell policy decisions shared by the check and strip engines.

Every function here is pure. Metadata that is not a JSON object is treated as
carrying no tags and no protections.
"""

from typing import AbstractSet, Any, Optional

from nbscrub.models import CodeCell, IdAction, MarkdownCell, Notebook, RawCell, Settings
from nbscrub.models.notebook import SourceValue
from nbscrub.parsing.keypath import get_value_child

AnyCell = CodeCell | MarkdownCell | RawCell

KEEP_OUTPUT_TAG = "keep_output"


def source_is_empty(source: SourceValue) -> bool:
    """True when every line of the source is blank."""
    if isinstance(source, str):
        return not source.strip()
    return all(not line.strip() for line in source)


def is_empty_source(cell: AnyCell) -> bool:
    return source_is_empty(cell.source)


def cell_tags(cell: AnyCell) -> list[str]:
    """String entries of `metadata.tags`, or an empty list."""
    if not isinstance(cell.metadata, dict):
        return []
    tags = cell.metadata.get("tags")
    if not isinstance(tags, list):
        return []
    return [t for t in tags if isinstance(t, str)]


def should_drop_cell(cell: AnyCell, drop_empty_cells: bool, drop_tags: AbstractSet[str]) -> bool:
    """Decide whether a cell is removed from the notebook.

    Args:
        cell: Cell to inspect
        drop_empty_cells: Remove cells with blank source
        drop_tags: Tags that mark a cell for removal

    Returns:
        bool: True if the cell should be dropped
    """
    if drop_empty_cells and is_empty_source(cell):
        return True
    if not drop_tags:
        return False
    return any(tag in drop_tags for tag in cell_tags(cell))


def should_clear_output(cell: CodeCell, drop_output: bool, strip_init_cell: bool) -> bool:
    """Decide whether a code cell's outputs are cleared.

    A cell marked `init_cell` keeps its output unless `strip_init_cell` is
    set, independently of `drop_output`. Otherwise a `keep_output` metadata
    key or tag protects the cell.

    Args:
        cell: Code cell to inspect
        drop_output: Effective output policy for the notebook
        strip_init_cell: Clear init cells too

    Returns:
        bool: True if the outputs should be cleared
    """
    metadata = cell.metadata
    if not isinstance(metadata, dict):
        return drop_output

    if "init_cell" in metadata:
        return metadata["init_cell"] is not True or strip_init_cell

    if not drop_output:
        return False

    keep_output = "keep_output" in metadata or KEEP_OUTPUT_TAG in cell_tags(cell)
    return not keep_output


def effective_drop_output(nb: Notebook, settings: Settings) -> bool:
    """`drop_output` unless the notebook opts out with `metadata.keep_output: true`."""
    nb_keep_output = get_value_child(nb.metadata, ["keep_output"])
    return settings.drop_output and nb_keep_output is not True


def is_clear_outputs(cell: CodeCell) -> bool:
    return not cell.outputs


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def outputs_have_exec_count(outputs: list[Any]) -> bool:
    """True when some output carries a numeric `execution_count`."""
    return any(
        isinstance(output, dict) and _is_number(output.get("execution_count"))
        for output in outputs
    )


def is_clear_exec_count(cell: CodeCell) -> bool:
    """True when neither the cell nor any of its outputs has an execution count."""
    return cell.execution_count is None and not outputs_have_exec_count(cell.outputs)


def is_clear_id(cell: AnyCell, position: int) -> bool:
    """True when the id is absent or already equals the cell's position."""
    return cell.id is None or cell.id == str(position)


def needs_id_update(cell: AnyCell, position: int, id_action: IdAction) -> bool:
    """Whether applying `id_action` would change this cell's id."""
    if id_action is IdAction.DROP:
        return cell.id is not None
    if id_action is IdAction.SEQUENTIAL:
        # absent ids count as clear for DROP but still need a number here
        return cell.id is None or not is_clear_id(cell, position)
    return False


def new_cell_id(position: int, id_action: IdAction) -> Optional[str]:
    """The id a cell gets under `id_action` (None means removed)."""
    if id_action is IdAction.SEQUENTIAL:
        return str(position)
    return None
