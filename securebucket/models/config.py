"""Construct configuration models — raw (as supplied) and normalized."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RawConfiguration(BaseModel):
    """Configuration exactly as supplied by the caller.

    Every field except ``project_id`` may be omitted (``None``).  Accepts
    both snake_case and camelCase keys (``identityRepo`` etc.).
    Downstream code never reads this model directly; it is normalized first.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    project_id: str
    environment: str | None = None
    enable_versioning: bool | None = None
    enable_encryption: bool | None = None
    identity_repo: str | None = None  # "owner/repo"
    additional_identity_repos: list[str] | None = None


class Configuration(BaseModel):
    """Fully-populated configuration; every optional field has a concrete value."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    project_id: str
    environment: str = "dev"
    enable_versioning: bool = False
    enable_encryption: bool = False
    identity_repo: str | None = None
    additional_identity_repos: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def identity_repos(self) -> list[str]:
        """Trusted repositories in trust order, ``identity_repo`` first.

        Empty when no ``identity_repo`` is set.  Duplicates are kept.
        """
        if not self.identity_repo:
            return []
        return [self.identity_repo, *self.additional_identity_repos]
