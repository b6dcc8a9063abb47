"""Data models for nbscrub."""

from nbscrub.models.extra_keys import ExtraKey, KeyTarget
from nbscrub.models.notebook import Cell, CodeCell, MarkdownCell, Notebook, RawCell, SourceValue
from nbscrub.models.results import CheckKind, CheckResult, StripResult
from nbscrub.models.settings import (
    DEFAULT_EXTRA_KEYS,
    KERNEL_INFO_EXTRA_KEYS,
    IdAction,
    Settings,
)

__all__ = [
    "ExtraKey",
    "KeyTarget",
    "Cell",
    "CodeCell",
    "MarkdownCell",
    "RawCell",
    "Notebook",
    "SourceValue",
    "CheckKind",
    "CheckResult",
    "StripResult",
    "IdAction",
    "Settings",
    "DEFAULT_EXTRA_KEYS",
    "KERNEL_INFO_EXTRA_KEYS",
]
