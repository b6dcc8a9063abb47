"""Strip volatile state from a notebook in place."""

import logging

from nbscrub.models import CodeCell, IdAction, Notebook, Settings
from nbscrub.parsing.keypath import MISSING, partition_extra_keys, pop_cell_key, pop_meta_key
from nbscrub.processing.policy import (
    effective_drop_output,
    is_clear_exec_count,
    is_clear_outputs,
    needs_id_update,
    new_cell_id,
    should_clear_output,
    should_drop_cell,
)

logger = logging.getLogger(__name__)

# Cell ids became mandatory in nbformat 4.5; at 4.4 and below they are optional.
IDS_OPTIONAL_MINOR = 4


def clear_counts(cell: CodeCell) -> None:
    """Clear the execution count of a cell and of each of its outputs."""
    cell.execution_count = None
    for output in cell.outputs:
        if isinstance(output, dict) and "execution_count" in output:
            output["execution_count"] = None


def strip_notebook(nb: Notebook, settings: Settings) -> tuple[Notebook, bool]:
    """Apply the stripping policy to a notebook.

    The notebook is modified in place and returned for convenience.

    Args:
        nb: Notebook to clean
        settings: Stripping policy

    Returns:
        tuple: (notebook, stripped) where stripped is True if anything changed
    """
    cell_keys, meta_keys = partition_extra_keys(settings.strip_keys)
    stripped = False

    for meta_key in meta_keys:
        if pop_meta_key(nb, meta_key) is not MISSING:
            logger.debug("Removed notebook metadata %s", meta_key)
            stripped = True

    retained = [
        cell
        for cell in nb.cells
        if not should_drop_cell(cell, settings.drop_empty_cells, settings.drop_tagged_cells)
    ]
    if len(retained) != len(nb.cells):
        logger.debug("Dropped %d cell(s)", len(nb.cells) - len(retained))
        nb.cells = retained
        stripped = True

    drop_output = effective_drop_output(nb, settings)
    ids_dropped = False

    for position, cell in enumerate(nb.cells):
        # Keys are popped before the output policy reads the cell metadata.
        for cell_key in cell_keys:
            if pop_cell_key(cell, cell_key) is not MISSING:
                stripped = True

        if isinstance(cell, CodeCell):
            if not is_clear_outputs(cell) and should_clear_output(
                cell, drop_output, settings.strip_init_cell
            ):
                cell.outputs = []
                stripped = True
            if settings.drop_count and not is_clear_exec_count(cell):
                clear_counts(cell)
                stripped = True

        if needs_id_update(cell, position, settings.id_action):
            cell.id = new_cell_id(position, settings.id_action)
            ids_dropped |= settings.id_action is IdAction.DROP
            stripped = True

    if ids_dropped and nb.nbformat_minor > IDS_OPTIONAL_MINOR:
        logger.debug("Downgrading nbformat_minor %d -> %d", nb.nbformat_minor, IDS_OPTIONAL_MINOR)
        nb.nbformat_minor = IDS_OPTIONAL_MINOR
        stripped = True

    return nb, stripped
