"""Tests for environment-driven settings."""

from __future__ import annotations

from securebucket.config import ProvisionerSettings


class TestProvisionerSettings:
    def test_defaults(self):
        settings = ProvisionerSettings()
        assert settings.project_id == ""
        assert settings.environment is None
        assert settings.account is None
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SECUREBUCKET_PROJECT_ID", "acme")
        monkeypatch.setenv("SECUREBUCKET_ENVIRONMENT", "prod")
        monkeypatch.setenv("SECUREBUCKET_ENABLE_ENCRYPTION", "true")
        monkeypatch.setenv("SECUREBUCKET_ADDITIONAL_IDENTITY_REPOS", '["org/b", "org/c"]')
        settings = ProvisionerSettings()
        assert settings.project_id == "acme"
        assert settings.environment == "prod"
        assert settings.enable_encryption is True
        assert settings.additional_identity_repos == ["org/b", "org/c"]

    def test_reads_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("SECUREBUCKET_ACCOUNT=123456789012\n")
        monkeypatch.chdir(tmp_path)
        assert ProvisionerSettings().account == "123456789012"

    def test_to_raw_configuration(self):
        settings = ProvisionerSettings(
            project_id="acme", identity_repo="org/a", enable_versioning=True
        )
        raw = settings.to_raw_configuration()
        assert raw.project_id == "acme"
        assert raw.identity_repo == "org/a"
        assert raw.enable_versioning is True
        assert raw.enable_encryption is None

    def test_oidc_provider_arn_from_env(self, monkeypatch):
        arn = "arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com"
        monkeypatch.setenv("SECUREBUCKET_OIDC_PROVIDER_ARN", arn)
        assert ProvisionerSettings().oidc_provider_arn == arn
