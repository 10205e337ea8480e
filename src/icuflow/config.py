"""Project configuration.

A project is described by a ``[tool.icuflow]`` table in ``pyproject.toml``::

    [tool.icuflow]
    locale_dir = "locale"
    src_paths = ["src"]
    ignore_patterns = ["/tests/", "migrations"]
    source_locale = "en"
    format = "po"
    prev_format = "json"
    receivers = ["i18n", "_i18n"]
    workers = 4

Relative paths are resolved against the directory holding the file.

Python 3.12+. Zero external dependencies.
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from icuflow.constants import DEFAULT_LOCALE_DIR, DEFAULT_RECEIVERS
from icuflow.enums import CatalogFormat
from icuflow.locale_utils import is_locale_code

__all__ = ["ConfigError", "ProjectConfig", "load_config"]

_TABLE = ("tool", "icuflow")


class ConfigError(ValueError):
    """Invalid project configuration."""


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Settings of one extraction project.

    Attributes:
        locale_dir: Directory with one catalog subdirectory per locale
        src_paths: Files and directories to extract messages from
        ignore_patterns: Regular expressions of paths to skip
        source_locale: Locale the messages are written in ("" for none)
        format: Catalog format to write
        prev_format: Catalog format to read when ``format`` has no file yet
        receivers: Runtime instance names recognised in Python source
        workers: Extraction threads (None runs serially)

    Raises:
        ConfigError: If a value is invalid
    """

    locale_dir: Path = Path(DEFAULT_LOCALE_DIR)
    src_paths: tuple[Path, ...] = (Path(),)
    ignore_patterns: tuple[str, ...] = ()
    source_locale: str = ""
    format: CatalogFormat = CatalogFormat.JSON
    prev_format: CatalogFormat | None = None
    receivers: tuple[str, ...] = DEFAULT_RECEIVERS
    workers: int | None = None

    def __post_init__(self) -> None:
        """Normalize field types and validate values."""
        object.__setattr__(self, "locale_dir", Path(self.locale_dir))
        object.__setattr__(self, "src_paths", tuple(Path(p) for p in self.src_paths))
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))
        object.__setattr__(self, "receivers", tuple(self.receivers))
        object.__setattr__(self, "format", _catalog_format("format", self.format))
        if self.prev_format is not None:
            object.__setattr__(self, "prev_format", _catalog_format("prev_format", self.prev_format))

        if not self.src_paths:
            msg = "src_paths cannot be empty"
            raise ConfigError(msg)
        if self.source_locale and not is_locale_code(self.source_locale):
            msg = f"source_locale is not a locale code: '{self.source_locale}'"
            raise ConfigError(msg)
        if not self.receivers or not all(isinstance(name, str) and name.isidentifier() for name in self.receivers):
            msg = f"receivers must be Python identifiers, got {list(self.receivers)}"
            raise ConfigError(msg)
        if self.workers is not None and (not isinstance(self.workers, int) or self.workers < 1):
            msg = f"workers must be an integer >= 1, got {self.workers!r}"
            raise ConfigError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object], base_dir: Path | None = None) -> "ProjectConfig":
        """Build a config from a ``[tool.icuflow]`` table.

        Args:
            data: Table contents
            base_dir: Directory relative paths are resolved against

        Raises:
            ConfigError: If the table has unknown keys or invalid values
        """
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            msg = f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            raise ConfigError(msg)

        values = dict(data)
        for key in ("src_paths", "ignore_patterns", "receivers"):
            if key in values and isinstance(values[key], str):
                values[key] = [values[key]]

        try:
            config = cls(**values)  # type: ignore[arg-type]
        except TypeError as e:
            msg = f"Invalid configuration value: {e}"
            raise ConfigError(msg) from e

        if base_dir is None:
            return config
        return replace(
            config,
            locale_dir=base_dir / config.locale_dir,
            src_paths=tuple(base_dir / p for p in config.src_paths),
        )


def _catalog_format(key: str, value: object) -> CatalogFormat:
    try:
        return CatalogFormat(value)
    except ValueError:
        msg = f"{key} must be one of {[str(f) for f in CatalogFormat]}, got {value!r}"
        raise ConfigError(msg) from None


def load_config(path: str | Path = "pyproject.toml") -> ProjectConfig:
    """Read the ``[tool.icuflow]`` table of a TOML file.

    A file without the table yields the default configuration.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML or the table is invalid
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Cannot parse '{path}': {e}"
        raise ConfigError(msg) from e

    table: object = document
    for key in _TABLE:
        table = table.get(key, {}) if isinstance(table, dict) else {}
    if not isinstance(table, dict):
        msg = f"[{'.'.join(_TABLE)}] must be a table"
        raise ConfigError(msg)

    return ProjectConfig.from_mapping(table, base_dir=path.parent)
