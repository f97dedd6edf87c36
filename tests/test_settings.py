"""
Tests for deployment settings.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from dappdeploy.config import DeploySettings, build_settings, get_settings


class TestGetSettings:
    """Tests for environment-driven settings."""

    def test_default_petname(self, monkeypatch):
        monkeypatch.delenv("TIP_ISSUER_PETNAME", raising=False)

        assert get_settings().tip_issuer_petname == "moola"

    def test_petname_from_environment(self, monkeypatch):
        monkeypatch.setenv("TIP_ISSUER_PETNAME", "simolean")

        assert get_settings().tip_issuer_petname == "simolean"

    def test_empty_petname_uses_default(self, monkeypatch):
        monkeypatch.setenv("TIP_ISSUER_PETNAME", "")

        assert get_settings().tip_issuer_petname == "moola"

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()


class TestBuildSettings:
    """Tests for layering overrides."""

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv("TIP_ISSUER_PETNAME", "simolean")

        settings = build_settings(contract_name=None, bridge_url=None)

        assert settings is get_settings()

    def test_overrides_keep_environment_petname(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TIP_ISSUER_PETNAME", "simolean")

        settings = build_settings(contract_name="escrow", project_dir=tmp_path)

        assert settings.contract_name == "escrow"
        assert settings.tip_issuer_petname == "simolean"
        assert settings.installation_base_name == "escrowinstallation"

    def test_invalid_override_rejected(self):
        with pytest.raises(ValidationError):
            build_settings(config_format="yaml")


class TestDeploySettings:
    """Tests for DeploySettings paths and validation."""

    def test_paths_resolve_against_project_dir(self, tmp_path):
        settings = DeploySettings(project_dir=tmp_path / "contract")

        assert settings.contract_file == (tmp_path / "contract/src/contracts/proxy.js").resolve()
        assert settings.config_file == (tmp_path / "ui/public/conf/defaults.js").resolve()

    def test_urls_lose_trailing_slash(self):
        settings = DeploySettings(bridge_url="http://localhost:8000/")

        assert settings.bridge_url == "http://localhost:8000"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            DeploySettings(contract="proxy.js")

    def test_default_project_dir_is_cwd(self):
        assert DeploySettings().project_dir == Path.cwd()
