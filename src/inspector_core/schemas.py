from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class RepositoryRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    full_name: str
    archived: bool = False

    @property
    def cache_key(self) -> str:
        return self.name.replace("-", "_")


class LookupStatus(StrEnum):
    OK = "ok"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"


class RegistryLookup(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    status: LookupStatus
    name: str
    authors: str | None = None

    @model_validator(mode="after")
    def validate_authors(self) -> RegistryLookup:
        if self.status is not LookupStatus.OK and self.authors is not None:
            raise ValueError("authors is only set for successful lookups")
        return self
