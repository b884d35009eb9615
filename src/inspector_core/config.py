from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

GITHUB_API_BASE = "https://api.github.com"
RUBYGEMS_API_BASE = "https://rubygems.org/api/v1/gems"
LOCKFILE_OUTPUT_DIR = Path("input")
DEFAULT_AUTHOR_PATTERN = "acme"

_TRUTHY_VALUES = {"1", "true", "yes", "on"}


class CrawlerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    access_token: str = Field(repr=False)
    organization: str
    filename: str
    public_only: bool = False
    output_dir: Path = LOCKFILE_OUTPUT_DIR
    page_size: int = Field(default=30, ge=1, le=100)
    api_base_url: str = GITHUB_API_BASE
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    @field_validator("access_token", "organization")
    @classmethod
    def validate_required_env(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("must not be empty")
        return normalized

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("target filename must not be empty")
        return normalized

    @classmethod
    def from_env(
        cls,
        filename: str | None,
        *,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> CrawlerConfig:
        env = os.environ if environ is None else environ
        access_token = env.get("PAT", "").strip()
        organization = env.get("ORG", "").strip()
        if not access_token or not organization:
            raise ValueError("Please set the PAT and ORG environment variables.")
        if filename is None or not filename.strip():
            raise ValueError("Please pass the name of the file to fetch, e.g. Gemfile.lock.")

        try:
            return cls(
                access_token=access_token,
                organization=organization,
                filename=filename,
                public_only=parse_bool_env(env.get("PUBLIC_REPO")),
                **overrides,
            )
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc


class AuditorConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    registry_path: Path = Path("registry.json")
    author_pattern: str = DEFAULT_AUTHOR_PATTERN
    api_base_url: str = RUBYGEMS_API_BASE
    timeout_seconds: float = Field(default=10.0, gt=0.0)

    @field_validator("author_pattern")
    @classmethod
    def validate_author_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("author_pattern must not be empty")
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid author pattern: {value}") from exc
        return value


class PrivateRegistry(BaseModel):
    """Dependencies published on the organization's private registry."""

    model_config = ConfigDict(extra="ignore")

    url: str = ""
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("dependencies", mode="before")
    @classmethod
    def coerce_dependency_mapping(cls, value: Any) -> Any:
        # {"name": "version"} manifests only contribute their keys
        if isinstance(value, dict):
            return list(value.keys())
        return value


def parse_bool_env(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_VALUES


def load_registry(path: str | Path) -> PrivateRegistry:
    raw = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Registry file is not valid JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Registry root must be an object.")
    if "dependencies" not in payload:
        raise ValueError("Registry file has no 'dependencies' member.")

    try:
        return PrivateRegistry.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid registry: {exc}") from exc
