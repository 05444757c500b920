"""Configuration models shared by the formatting and rendering pipelines.

Configuration is built once (from defaults, an optional TOML file, and CLI
overrides) and passed explicitly to the pipeline. Models are frozen so the
same instance can be shared by every document being processed.

CommonConfig

`suffixes` (`tuple[str, ...]`)
: File extensions recognised as Markdown documents when walking a directory.
  Values are normalised to carry a leading dot.

`keep_going` (`bool`)
: Continue with the remaining documents after a per-document failure instead
  of aborting the run on the first error.

FormatConfig

`style` (`FormatStyle`)
: `wrap` keeps soft line breaks, `default` joins paragraph lines, and `none`
  leaves documents untouched.

`diff` (`bool`)
: Dry run: report a unified diff for each document that would change.

`check` (`bool`)
: Dry run: only report which documents would change.

RenderConfig

`staleness` (`StalenessPolicy`)
: `newer` skips documents whose HTML output is at least as recent as the
  source; `disable` always renders.

`output_suffix` (`str`)
: Extension substituted for the document extension to build the output path.

`css` / `template` (`Path | None`)
: Stylesheet inlined into the page and Jinja2 template used to render it.

`markdown_extensions` / `disabled_markdown_extensions` (`list[str]`)
: Extra python-markdown extensions to enable, or defaults to turn off.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
import tomllib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError


__all__ = [
    "DEFAULT_SUFFIXES",
    "CommonConfig",
    "FormatConfig",
    "FormatStyle",
    "ProjectConfig",
    "RenderConfig",
    "StalenessPolicy",
    "load_project_config",
]


DEFAULT_SUFFIXES = (".md", ".markdown")


class FormatStyle(str, Enum):
    """Line-wrap policy applied when rewriting Markdown bodies."""

    NONE = "none"
    DEFAULT = "default"
    WRAP = "wrap"

    @classmethod
    def from_string(cls, value: str) -> FormatStyle:
        """Resolve a style name, accepting the ``disable``/``enable`` aliases."""
        candidate = value.strip().lower()
        aliases = {"": cls.NONE, "disable": cls.NONE, "enable": cls.DEFAULT}
        if candidate in aliases:
            return aliases[candidate]
        try:
            return cls(candidate)
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise ValueError(f"Unsupported style '{value}' (expected one of: {choices}).") from None

    @property
    def wrap(self) -> str:
        """Return the matching mdformat ``wrap`` option."""
        return "no" if self is FormatStyle.DEFAULT else "keep"


class StalenessPolicy(str, Enum):
    """Policy deciding whether an existing output must be regenerated."""

    NEWER = "newer"
    DISABLE = "disable"


class CommonConfig(BaseModel):
    """Settings shared by every command."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    suffixes: tuple[str, ...] = DEFAULT_SUFFIXES
    keep_going: bool = False

    @field_validator("suffixes", mode="before")
    @classmethod
    def _normalise_suffixes(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        suffixes: list[str] = []
        for entry in value or ():
            candidate = str(entry).strip()
            if not candidate:
                continue
            if not candidate.startswith("."):
                candidate = f".{candidate}"
            if candidate not in suffixes:
                suffixes.append(candidate)
        if not suffixes:
            raise ValueError("At least one document suffix is required.")
        return tuple(suffixes)


class FormatConfig(CommonConfig):
    """Settings for the `fmt` command."""

    style: FormatStyle = FormatStyle.WRAP
    diff: bool = False
    check: bool = False

    @field_validator("style", mode="before")
    @classmethod
    def _coerce_style(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, FormatStyle):
            return FormatStyle.from_string(value)
        return value


class RenderConfig(CommonConfig):
    """Settings for the `convert` command."""

    staleness: StalenessPolicy = StalenessPolicy.NEWER
    output_suffix: str = ".html"
    css: Path | None = None
    template: Path | None = None
    markdown_extensions: list[str] = Field(default_factory=list)
    disabled_markdown_extensions: list[str] = Field(default_factory=list)

    @field_validator("output_suffix")
    @classmethod
    def _normalise_output_suffix(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate:
            raise ValueError("Output suffix cannot be empty.")
        return candidate if candidate.startswith(".") else f".{candidate}"


class ProjectConfig(BaseModel):
    """Top-level configuration file layout."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: FormatConfig = Field(default_factory=FormatConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


def load_project_config(path: Path) -> ProjectConfig:
    """Load settings from a TOML file.

    Both a dedicated file with top-level ``[format]``/``[render]`` tables and a
    ``pyproject.toml`` carrying them under ``[tool.mdsmith]`` are accepted.
    Relative ``css``/``template`` paths are resolved against the file location.
    """
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{path}': {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in '{path}': {exc}") from exc

    section = payload.get("tool", {}).get("mdsmith")
    if section is None and path.name == "pyproject.toml":
        section = {}
    elif section is None:
        section = {key: value for key, value in payload.items() if key != "tool"}

    render = section.get("render")
    if isinstance(render, dict):
        base_dir = path.parent
        for key in ("css", "template"):
            value = render.get(key)
            if isinstance(value, str) and value and not Path(value).is_absolute():
                render[key] = str(base_dir / value)

    try:
        return ProjectConfig.model_validate(section)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in '{path}':\n{exc}") from exc
