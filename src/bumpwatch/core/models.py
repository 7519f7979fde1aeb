"""Core data models for bumpwatch."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class CheckStatus(str, Enum):
    """Outcome of checking a single dependency."""

    BREAKING = "breaking"
    UP_TO_DATE = "up_to_date"
    NOT_IN_REGISTRY = "not_in_registry"
    NO_REPOSITORY = "no_repository"
    NOT_ON_FORGE = "not_on_forge"


class Dependency(BaseModel):
    """A dependency declared in package.json."""

    name: str = Field(..., description="Package name")
    version_range: str = Field(..., description="Declared version range, e.g. ^1.2.0")
    is_dev: bool = Field(default=False, description="Declared under devDependencies")


class RegistryInfo(BaseModel):
    """Latest published metadata for a package."""

    name: str
    version: str = Field(..., description="Latest published version")
    repository_url: str | None = Field(
        default=None,
        description="Raw repository.url as published, e.g. git+ssh://git@github.com/o/r.git",
    )


class CheckResult(BaseModel):
    """Result of checking one dependency against the registry."""

    dependency: Dependency
    status: CheckStatus
    current_version: str = Field(..., description="Declared version with range operators stripped")
    latest_version: str | None = None
    repository_url: str | None = None
    changelog_url: str | None = None

    @property
    def is_skipped(self) -> bool:
        """Whether the dependency was skipped with a notice."""
        return self.status in (
            CheckStatus.NOT_IN_REGISTRY,
            CheckStatus.NO_REPOSITORY,
            CheckStatus.NOT_ON_FORGE,
        )


class CheckReport(BaseModel):
    """All results from one run over a manifest."""

    manifest_path: str
    checked_at: datetime = Field(default_factory=datetime.utcnow)
    results: list[CheckResult] = Field(default_factory=list)

    @property
    def breaking_count(self) -> int:
        return sum(1 for r in self.results if r.status == CheckStatus.BREAKING)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.is_skipped)
