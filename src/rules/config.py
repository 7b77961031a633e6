from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from collect.collector import DEFAULT_MARKER_NAMES
from contract.artifacts import CALLSITES_JSONL, INTERCEPTOR_SOURCE

CONFIG_FILENAME = "praefixum.toml"

_DOTTED_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PraefixumConfig(BaseModel):
    """Configuration for interceptor generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".praefixum",
        description="Output directory for the generated source and manifest",
    )
    descriptors: str = Field(
        default=CALLSITES_JSONL,
        description="Call-site descriptor JSONL written by the compiler host",
    )
    marker_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MARKER_NAMES),
        description="Attribute names treated as the unique-id marker",
    )
    namespace: str = Field(
        default="Praefixum",
        description="Namespace of the generated interceptor class",
    )
    class_name: str = Field(
        default="PraefixumInterceptor",
        description="Name of the generated interceptor class",
    )
    source_name: str = Field(
        default=INTERCEPTOR_SOURCE,
        description="File name of the generated source inside output_dir",
    )
    emit_attribute_polyfill: bool = Field(
        default=True,
        description="Declare a file-local InterceptsLocationAttribute in the output",
    )

    @field_validator("marker_names")
    @classmethod
    def validate_marker_names(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "marker_names must name at least one attribute"
            raise ValueError(msg)
        return v

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        if not _DOTTED_IDENTIFIER.match(v):
            msg = f"namespace '{v}' is not a valid dotted identifier"
            raise ValueError(msg)
        return v

    @field_validator("class_name")
    @classmethod
    def validate_class_name(cls, v: str) -> str:
        if not _IDENTIFIER.match(v):
            msg = f"class_name '{v}' is not a valid identifier"
            raise ValueError(msg)
        return v

    @field_validator("source_name")
    @classmethod
    def validate_source_name(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            msg = "source_name must be a plain file name"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the project root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def resolve_descriptors_path(root: Path, descriptors: str) -> Path:
    """Resolve the descriptor file; relative paths are taken from the root."""
    path = Path(descriptors).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def load_config(root: Path) -> PraefixumConfig:
    """Load configuration from praefixum.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return PraefixumConfig()

    try:
        with config_path.open("rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return PraefixumConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
