"""Report what stripping would change, without changing anything."""

import copy
import logging

from nbscrub.models import CheckKind, CheckResult, CodeCell, Notebook, Settings
from nbscrub.parsing.keypath import MISSING, get_value_child, partition_extra_keys, pop_value_child
from nbscrub.processing.policy import (
    effective_drop_output,
    is_clear_exec_count,
    is_clear_outputs,
    needs_id_update,
    should_clear_output,
    should_drop_cell,
)

logger = logging.getLogger(__name__)


def _metadata_after_pop(metadata, keys):
    """Copy of `metadata` as it looks once `keys` have been popped."""
    remaining = copy.deepcopy(metadata)
    for key in keys:
        pop_value_child(remaining, key.path)
    return remaining


def check_notebook(nb: Notebook, settings: Settings) -> list[CheckResult]:
    """List every change `strip_notebook` would make, in the order it makes them.

    Cell numbers are positions in the notebook as given. Decisions that depend
    on state produced by earlier strip steps (ids renumbered after dropped
    cells, counts left in outputs that are about to be cleared, metadata keys
    that are about to be popped) are evaluated against that later state.

    Args:
        nb: Notebook to inspect; it is not modified
        settings: Stripping policy

    Returns:
        list[CheckResult]: Findings, empty if the notebook is already clean
    """
    cell_keys, meta_keys = partition_extra_keys(settings.strip_keys)
    results: list[CheckResult] = []

    for meta_key in meta_keys:
        if get_value_child(nb.metadata, meta_key.path) is not MISSING:
            results.append(CheckResult(kind=CheckKind.STRIP_META, extra_key=str(meta_key)))

    survivors = []
    for cell_number, cell in enumerate(nb.cells):
        if should_drop_cell(cell, settings.drop_empty_cells, settings.drop_tagged_cells):
            results.append(CheckResult(kind=CheckKind.DROP_CELL, cell_number=cell_number))
        else:
            survivors.append((cell_number, cell))

    remaining_nb_metadata = _metadata_after_pop(nb.metadata, meta_keys)
    drop_output = effective_drop_output(
        nb.model_copy(update={"metadata": remaining_nb_metadata}), settings
    )

    for position, (cell_number, cell) in enumerate(survivors):
        for cell_key in cell_keys:
            if get_value_child(cell.metadata, cell_key.path) is not MISSING:
                results.append(
                    CheckResult(
                        kind=CheckKind.CELL_STRIP_META,
                        cell_number=cell_number,
                        extra_key=str(cell_key),
                    )
                )

        if isinstance(cell, CodeCell):
            stripped_cell = cell.model_copy(
                update={"metadata": _metadata_after_pop(cell.metadata, cell_keys)}
            )
            clears_output = not is_clear_outputs(cell) and should_clear_output(
                stripped_cell, drop_output, settings.strip_init_cell
            )
            if clears_output:
                results.append(CheckResult(kind=CheckKind.CLEAR_OUTPUT, cell_number=cell_number))

            if clears_output:
                has_count = cell.execution_count is not None
            else:
                has_count = not is_clear_exec_count(cell)
            if settings.drop_count and has_count:
                results.append(CheckResult(kind=CheckKind.CLEAR_COUNT, cell_number=cell_number))

        if needs_id_update(cell, position, settings.id_action):
            results.append(CheckResult(kind=CheckKind.CLEAR_ID, cell_number=cell_number))

    logger.debug("Check found %d issue(s)", len(results))
    return results
