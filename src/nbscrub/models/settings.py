"""Resolved stripping policy consumed by the check and strip engines."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from nbscrub.models.extra_keys import ExtraKey

EXTRA_KEYS = (
    "metadata.signature",
    "metadata.widgets",
    "cell.metadata.collapsed",
    "cell.metadata.ExecuteTime",
    "cell.metadata.execution",
    "cell.metadata.heading_collapsed",
    "cell.metadata.hidden",
    "cell.metadata.scrolled",
)

KERNEL_INFO_KEYS = (
    "metadata.kernelspec",
    "metadata.language_info.version",
)

DEFAULT_EXTRA_KEYS: tuple[ExtraKey, ...] = tuple(ExtraKey.parse(k) for k in EXTRA_KEYS)
KERNEL_INFO_EXTRA_KEYS: tuple[ExtraKey, ...] = tuple(ExtraKey.parse(k) for k in KERNEL_INFO_KEYS)


class IdAction(str, Enum):
    """What to do with cell ids.

    KEEP leaves them alone, DROP removes them (downgrading the notebook to
    nbformat 4.4 where ids are optional), SEQUENTIAL renumbers them to the
    cell's position.
    """

    KEEP = "keep"
    DROP = "drop"
    SEQUENTIAL = "sequential"


class Settings(BaseModel):
    """Immutable policy for one run.

    Attributes:
        extra_keys: Metadata keys to remove, in popping order
        drop_tagged_cells: Cell tags that cause the cell to be removed
        drop_empty_cells: Remove cells whose source is blank
        drop_output: Clear code cell outputs
        drop_count: Clear execution counts
        strip_init_cell: Also clear outputs of cells marked `init_cell`
        strip_kernel_info: Also remove kernelspec and language version
        id_action: Cell id policy
    """

    extra_keys: tuple[ExtraKey, ...] = DEFAULT_EXTRA_KEYS
    drop_tagged_cells: frozenset[str] = Field(default_factory=frozenset)
    drop_empty_cells: bool = False
    drop_output: bool = True
    drop_count: bool = True
    strip_init_cell: bool = False
    strip_kernel_info: bool = False
    id_action: IdAction = IdAction.KEEP

    model_config = ConfigDict(frozen=True)

    @property
    def strip_keys(self) -> tuple[ExtraKey, ...]:
        """All keys to pop, with kernel info keys appended when requested."""
        keys = self.extra_keys
        if self.strip_kernel_info:
            keys = keys + KERNEL_INFO_EXTRA_KEYS
        return tuple(dict.fromkeys(keys))
