import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from clj_formatter.indents import parse_indents
from clj_formatter.models import FormatterConfig, IndentRule
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_FILE = Path(".clj-fmt.toml")
CONFIG_SECTION = "clj-fmt"
DEFAULT_FILE_PATTERN = r"\.clj[csx]?$"
DEFAULT_PATHS = ("src", "test")


class Configuration(BaseModel):
    """Settings for a check or fix run. Built once, never mutated."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_root: Path = Path(".")
    file_pattern: str = DEFAULT_FILE_PATTERN
    paths: Tuple[str, ...] = ()
    ansi: bool = True
    indentation: bool = True
    insert_missing_whitespace: bool = True
    remove_surrounding_whitespace: bool = True
    remove_trailing_whitespace: bool = True
    remove_consecutive_blank_lines: bool = True
    indents: Dict[str, List[IndentRule]] = Field(default_factory=dict)
    alias_map: Dict[str, str] = Field(default_factory=dict)
    jobs: int = Field(default=1, ge=1)

    @field_validator("file_pattern")
    @classmethod
    def _compile_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid file pattern {value!r}: {exc}") from exc
        return value

    @field_validator("indents", mode="before")
    @classmethod
    def _parse_indents(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return parse_indents(value)
        return value

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(self.file_pattern)

    def to_formatter_config(self) -> FormatterConfig:
        return FormatterConfig(
            indentation=self.indentation,
            insert_missing_whitespace=self.insert_missing_whitespace,
            remove_surrounding_whitespace=self.remove_surrounding_whitespace,
            remove_trailing_whitespace=self.remove_trailing_whitespace,
            remove_consecutive_blank_lines=self.remove_consecutive_blank_lines,
            indents={symbol: list(rules) for symbol, rules in self.indents.items()},
            alias_map=dict(self.alias_map),
        )


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc


def read_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read the [tool.clj-fmt] table of a TOML file, keyed by field name.

    A missing file means no settings. Keys may use dashes, as in
    ``remove-trailing-whitespace``.
    """
    if path is None or not path.exists():
        return {}

    section = _load_toml(path).get("tool", {}).get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[tool.{CONFIG_SECTION}] in {path} must be a table")
    return {key.replace("-", "_"): value for key, value in section.items()}


def read_table(path: Path) -> Dict[str, Any]:
    """Read a standalone TOML table, as given to --indents and --alias-map."""
    return _load_toml(path)


def build_config(settings: Mapping[str, Any]) -> Configuration:
    try:
        return Configuration(**settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration:\n{exc}") from exc


def load_config(path: Optional[Path] = None, **overrides: Any) -> Configuration:
    """Defaults, then the config file, then any override that is not None."""
    settings = read_settings(path)
    settings.update({key: value for key, value in overrides.items() if value is not None})
    if not settings.get("paths"):
        settings["paths"] = DEFAULT_PATHS
    return build_config(settings)
