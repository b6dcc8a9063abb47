"""Resolve dotted key paths inside JSON metadata.

Real metadata keys may contain dots (``application/vnd.databricks.v1+cell``),
so a path such as ``["a", "b"]`` can mean the nested key ``a`` -> ``b`` or the
single key ``"a.b"``. Resolution is greedy: at each level the widest compound
key formed from the leading segments is tried first, and narrower prefixes
only when the wider key is absent. Once a prefix matches, the lookup commits
to it and never backtracks to a shorter one.
"""

from typing import Any, Sequence

from nbscrub.models import CodeCell, ExtraKey, KeyTarget, MarkdownCell, Notebook, RawCell


class _Missing:
    """Sentinel for "no value at this path" (None is a valid JSON value)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def _match_prefix(value: Any, path: Sequence[str]) -> tuple[str, Sequence[str]] | None:
    """Find the widest compound key of `path` present in `value`."""
    if not isinstance(value, dict):
        return None
    for i in range(len(path), 0, -1):
        candidate = ".".join(path[:i])
        if candidate in value:
            return candidate, path[i:]
    return None


def get_value_child(value: Any, path: Sequence[str]) -> Any:
    """Return the value at `path` below `value`, or MISSING.

    Args:
        value: JSON-like tree, normally a dict
        path: Key segments; an empty path returns `value` itself

    Returns:
        The resolved value, or MISSING when nothing matches
    """
    if not path:
        return value
    match = _match_prefix(value, path)
    if match is None:
        return MISSING
    key, rest = match
    return get_value_child(value[key], rest)


def pop_value_child(value: Any, path: Sequence[str]) -> Any:
    """Remove and return the value at `path` below `value`, or MISSING.

    Only the matched entry is removed; parent objects left empty are kept.
    """
    if not path:
        return MISSING
    match = _match_prefix(value, path)
    if match is None:
        return MISSING
    key, rest = match
    if not rest:
        return value.pop(key)
    return pop_value_child(value[key], rest)


def pop_cell_key(cell: CodeCell | MarkdownCell | RawCell, extra_key: ExtraKey) -> Any:
    """Pop a `cell.metadata.*` key from a cell; other keys are ignored."""
    if extra_key.target is not KeyTarget.CELL_METADATA:
        return MISSING
    return pop_value_child(cell.metadata, extra_key.path)


def pop_meta_key(nb: Notebook, extra_key: ExtraKey) -> Any:
    """Pop a `metadata.*` key from the notebook; other keys are ignored."""
    if extra_key.target is not KeyTarget.NOTEBOOK_METADATA:
        return MISSING
    return pop_value_child(nb.metadata, extra_key.path)


def partition_extra_keys(extra_keys: Sequence[ExtraKey]) -> tuple[list[ExtraKey], list[ExtraKey]]:
    """Split keys into (cell keys, notebook keys), preserving order."""
    cell_keys = [k for k in extra_keys if k.target is KeyTarget.CELL_METADATA]
    meta_keys = [k for k in extra_keys if k.target is KeyTarget.NOTEBOOK_METADATA]
    return cell_keys, meta_keys
