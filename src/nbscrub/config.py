"""Configuration management for nbscrub.

Settings come from, in increasing priority: built-in defaults, environment
variables prefixed with ``NBSCRUB_``, a TOML configuration file, and command
line overrides. The configuration file is the first of ``.nbscrub.toml``,
``nbscrub.toml`` or a ``pyproject.toml`` with a ``[tool.nbscrub]`` table found
in the working directory or one of its parents. File keys use kebab-case
(``drop-empty-cells``).
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nbscrub import ConfigurationError
from nbscrub.models import DEFAULT_EXTRA_KEYS, ExtraKey, IdAction, Settings

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".nbscrub.toml", "nbscrub.toml")
PYPROJECT_FILE_NAME = "pyproject.toml"
TOOL_TABLE = "nbscrub"


class NbScrubConfig(BaseSettings):
    """User configuration before it is resolved into Settings.

    Environment variables should be prefixed with NBSCRUB_
    Example: NBSCRUB_DROP_EMPTY_CELLS=true

    Attributes:
        extra_keys: Metadata keys to strip on top of the built-in ones
        keep_keys: Metadata keys to keep even if stripped by default
        drop_empty_cells: Remove cells with blank source
        drop_output: Clear code cell outputs
        drop_count: Clear execution counts
        id_action: Keep, drop or renumber cell ids
        strip_init_cell: Clear outputs of init cells too
        strip_kernel_info: Remove kernelspec and language version
        drop_tagged_cells: Tags that cause a cell to be removed
        exclude: File patterns to skip when searching directories
        extend_exclude: Additional file patterns to skip
    """

    # Metadata keys
    extra_keys: list[ExtraKey] = Field(
        default_factory=list,
        description="Extra metadata keys to strip",
    )
    keep_keys: list[ExtraKey] = Field(
        default_factory=list,
        description="Metadata keys to keep regardless of defaults",
    )

    # Cell policy
    drop_empty_cells: bool = Field(default=False, description="Drop cells with blank source")
    drop_output: bool = Field(default=True, description="Clear code cell outputs")
    drop_count: bool = Field(default=True, description="Clear execution counts")
    id_action: IdAction = Field(default=IdAction.KEEP, description="Cell id policy")
    strip_init_cell: bool = Field(default=False, description="Clear init cell outputs")
    strip_kernel_info: bool = Field(
        default=False,
        description="Strip metadata.kernelspec and metadata.language_info.version",
    )
    drop_tagged_cells: list[str] = Field(
        default_factory=list,
        description="Tags marking cells to drop",
    )

    # File selection
    exclude: list[str] = Field(default_factory=list, description="File patterns to ignore")
    extend_exclude: list[str] = Field(
        default_factory=list,
        description="Additional file patterns to ignore",
    )

    model_config = SettingsConfigDict(
        env_prefix="NBSCRUB_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("extra_keys", "keep_keys", mode="before")
    @classmethod
    def parse_extra_keys(cls, v: Any) -> Any:
        """Accept key strings such as `cell.metadata.scrolled`."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [ExtraKey.parse(k) if isinstance(k, str) else k for k in v]
        return v

    @property
    def exclude_patterns(self) -> list[str]:
        return [*self.exclude, *self.extend_exclude]

    def to_settings(self) -> Settings:
        """Resolve into the policy used by the engines.

        Keys are the built-in defaults followed by `extra_keys`, minus
        `keep_keys`, in that order and without duplicates.
        """
        keep = set(self.keep_keys)
        keys = dict.fromkeys([*DEFAULT_EXTRA_KEYS, *self.extra_keys])
        return Settings(
            extra_keys=tuple(k for k in keys if k not in keep),
            drop_tagged_cells=frozenset(self.drop_tagged_cells),
            drop_empty_cells=self.drop_empty_cells,
            drop_output=self.drop_output,
            drop_count=self.drop_count,
            strip_init_cell=self.strip_init_cell,
            strip_kernel_info=self.strip_kernel_info,
            id_action=self.id_action,
        )

    def to_toml_dict(self, show_all: bool = False) -> dict[str, Any]:
        """Configuration as kebab-case TOML values.

        Args:
            show_all: Include defaults and the resolved key list instead of
                only values that were set

        Returns:
            dict: Values ready to print as `key = value` lines
        """
        data = self.model_dump(mode="json", exclude_defaults=not show_all)
        if "extra_keys" in data:
            data["extra_keys"] = [str(k) for k in self.extra_keys]
        if "keep_keys" in data:
            data["keep_keys"] = [str(k) for k in self.keep_keys]
        if show_all:
            data["resolved_keys"] = [str(k) for k in self.to_settings().strip_keys]
        return {key.replace("_", "-"): value for key, value in data.items()}


def _has_tool_table(pyproject: Path) -> bool:
    return read_config_file(pyproject) is not None


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file for `start` or its closest parent.

    Args:
        start: Directory to start from (default: current directory)

    Returns:
        Path to the configuration file, or None
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        pyproject = directory / PYPROJECT_FILE_NAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def read_config_file(path: Path | str) -> Optional[dict[str, Any]]:
    """Read configuration values from a TOML file.

    Returns:
        Snake-case values, or None for a pyproject.toml without a
        `[tool.nbscrub]` table

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

    if path.name == PYPROJECT_FILE_NAME:
        data = data.get("tool", {}).get(TOOL_TABLE)
        if data is None:
            return None

    return {key.replace("-", "_"): value for key, value in data.items()}


def load_config(
    config_file: Optional[Path | str] = None,
    isolated: bool = False,
    overrides: Optional[Mapping[str, Any]] = None,
    start: Optional[Path] = None,
) -> NbScrubConfig:
    """Build the configuration for a run.

    Args:
        config_file: Explicit configuration file, skips discovery
        isolated: Ignore configuration files entirely
        overrides: Command line values; None entries are ignored
        start: Directory to start discovery from

    Returns:
        NbScrubConfig: Validated configuration

    Raises:
        ConfigurationError: If a file is unreadable or a value is invalid
    """
    values: dict[str, Any] = {}
    if not isolated:
        path = Path(config_file) if config_file else find_config_file(start)
        if path is not None:
            logger.debug("Using configuration file %s", path)
            values.update(read_config_file(path) or {})

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key == "extend_exclude":
            values[key] = [*values.get(key, []), *value]
        else:
            values[key] = value

    try:
        return NbScrubConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
