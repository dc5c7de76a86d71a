"""Pydantic model for the staging configuration.

A parent project declares which sub-project it embeds, which build variant
to take, and where the staged copy lands.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_NAME_PATTERN = re.compile(r"^:?[a-zA-Z0-9_.\-]+(:[a-zA-Z0-9_.\-]+)*$")
VARIANT_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*$")


def capitalize_first(value: str) -> str:
    """Uppercase the first character only ('debug' -> 'Debug')."""
    return value[:1].upper() + value[1:]


class StageConfig(BaseModel):
    """Schema for a parent project's staging configuration.

    Attributes:
        sub_project: Identifier of the producing sub-project (':app_skin').
        variant: Build variant of the sub-project to embed.
        assets_dir: Staging directory, relative to the parent project.
        target_apk_name: Fixed file name of the staged copy.
        build_dir_name: Build directory name inside the sub-project.
        host_variant: Variant of the parent whose packaging consumes the copy.
    """

    model_config = ConfigDict(extra="forbid")

    sub_project: str = Field(
        default="app_skin", description="Producing sub-project identifier"
    )
    variant: str = Field(default="debug", description="Sub-project build variant")
    assets_dir: str = Field(
        default="src/main/assets",
        description="Staging directory relative to the parent project",
    )
    target_apk_name: str = Field(
        default="skin.apk", description="File name of the staged copy"
    )
    build_dir_name: str = Field(
        default="build", description="Build directory inside the sub-project"
    )
    host_variant: str = Field(
        default="release", description="Parent variant that packages the copy"
    )

    @field_validator("sub_project")
    @classmethod
    def validate_sub_project(cls, v: str) -> str:
        """Validate the identifier and strip a single leading ':'."""
        if not PROJECT_NAME_PATTERN.match(v):
            raise ValueError(f"invalid sub-project identifier '{v}'")
        if any(part in {".", ".."} for part in v.lstrip(":").split(":")):
            raise ValueError(
                f"sub-project path segments cannot be '.' or '..': '{v}'"
            )
        return v[1:] if v.startswith(":") else v

    @field_validator("variant", "host_variant")
    @classmethod
    def validate_variant(cls, v: str) -> str:
        """Validate a variant name is a plain identifier."""
        if not VARIANT_PATTERN.match(v):
            raise ValueError(f"variant must be alphanumeric, got '{v}'")
        return v

    @field_validator("target_apk_name")
    @classmethod
    def validate_target_apk_name(cls, v: str) -> str:
        """Validate the staged file name has no directory part."""
        if not v or "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError("target_apk_name must be a plain file name")
        return v

    @property
    def cap_variant(self) -> str:
        return capitalize_first(self.variant)

    @property
    def cap_host_variant(self) -> str:
        return capitalize_first(self.host_variant)

    @property
    def stage_task_name(self) -> str:
        """Name of the staging task, e.g. 'stageDebugApk'."""
        return f"stage{self.cap_variant}Apk"

    @property
    def upstream_task_path(self) -> str:
        """Path of the sub-project's assemble task, e.g. ':app_skin:assembleDebug'."""
        return f":{self.sub_project}:assemble{self.cap_variant}"


__all__ = ["StageConfig", "capitalize_first"]
