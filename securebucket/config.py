"""Environment-driven settings for the construct's callers.

Reads ``SECUREBUCKET_*`` environment variables and an optional ``.env``
file.  These are the values an external configuration loader supplies;
the construct itself only ever sees a ``RawConfiguration``.

Examples
--------
::

    export SECUREBUCKET_PROJECT_ID=acme
    export SECUREBUCKET_ENVIRONMENT=prod
    export SECUREBUCKET_IDENTITY_REPO=acme/infra
    export SECUREBUCKET_ADDITIONAL_IDENTITY_REPOS='["acme/app"]'
    export SECUREBUCKET_ACCOUNT=123456789012
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from securebucket.models.config import RawConfiguration


class ProvisionerSettings(BaseSettings):
    """Settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SECUREBUCKET_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Construct configuration (None = not supplied)
    project_id: str = ""
    environment: str | None = None
    identity_repo: str | None = None
    additional_identity_repos: list[str] | None = None
    enable_versioning: bool | None = None
    enable_encryption: bool | None = None

    # Deployment environment and trust anchor
    account: str | None = None
    region: str | None = None
    oidc_provider_arn: str | None = None

    log_level: str = "INFO"

    def to_raw_configuration(self) -> RawConfiguration:
        return RawConfiguration(
            project_id=self.project_id,
            environment=self.environment,
            identity_repo=self.identity_repo,
            additional_identity_repos=self.additional_identity_repos,
            enable_versioning=self.enable_versioning,
            enable_encryption=self.enable_encryption,
        )
