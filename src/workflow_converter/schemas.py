"""Pydantic schemas for runtime validation of conversion inputs."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from workflow_converter.application.planner import MARKUP_SUFFIXES


class ToolSpec(BaseModel):
    """Pip requirement of an external tool and its executable inside the install dir."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    requirement: str = Field(min_length=1)
    binary: str = Field(min_length=1)

    @field_validator("requirement")
    @classmethod
    def _validate_requirement(cls, value: str) -> str:
        value = value.strip()
        if not value or any(char.isspace() for char in value):
            raise ValueError("requirement must be a single pip requirement string.")
        return value

    @field_validator("binary")
    @classmethod
    def _validate_binary(cls, value: str) -> str:
        path = PurePosixPath(value)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError("binary must be a path relative to the install directory.")
        return value


class ConversionTaskConfig(BaseModel):
    """Validated source/output pair for one conversion."""

    model_config = ConfigDict(extra="forbid")

    source_path: Path
    output_path: Path

    @field_validator("source_path")
    @classmethod
    def _validate_source(cls, value: Path) -> Path:
        if not value.name.endswith(MARKUP_SUFFIXES):
            raise ValueError(f"source_path must end with one of {', '.join(MARKUP_SUFFIXES)}.")
        return value

    @model_validator(mode="after")
    def _validate_distinct(self) -> ConversionTaskConfig:
        if self.source_path == self.output_path:
            raise ValueError("output_path must differ from source_path.")
        return self


DEFAULT_FORMATTER = ToolSpec(requirement="ruff==0.8.6", binary="bin/ruff")
