"""Tests for configuration loading."""

import json

import pytest

from ynab_sync.config import ConfigError, get_api_key, load_config
from ynab_sync.models import SyncConfig


class TestLoadConfig:
    """Test the JSON config file."""

    def test_load(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"budget_id": "b1", "accounts": {"1234": "a1"}}))

        config = load_config(path)

        assert config.budget_id == "b1"
        assert config.accounts == {"1234": "a1"}
        assert config.ingest_username == "ingest"
        assert config.api_base_url == "https://api.ynab.com/v1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_missing_budget_id(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"accounts": {}}))
        with pytest.raises(ConfigError, match="budget_id"):
            load_config(path)


class TestResolveAccount:
    """Test account suffix mapping."""

    def test_mapped(self):
        config = SyncConfig(budget_id="b", accounts={"1234": "a1"}, default_account_id="d")
        assert config.resolve_account("1234") == "a1"

    def test_default(self):
        config = SyncConfig(budget_id="b", default_account_id="d")
        assert config.resolve_account("9999") == "d"

    def test_unmapped(self):
        assert SyncConfig(budget_id="b").resolve_account("9999") is None


class TestGetApiKey:
    """Test API key lookup."""

    def test_explicit(self, monkeypatch):
        monkeypatch.setenv("YNAB_API_KEY", "from-env")
        assert get_api_key("explicit") == "explicit"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("YNAB_API_KEY", "from-env")
        assert get_api_key() == "from-env"

    def test_legacy_env(self, monkeypatch):
        monkeypatch.delenv("YNAB_API_KEY", raising=False)
        monkeypatch.setenv("YNAB_KEY", "legacy")
        assert get_api_key() == "legacy"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("YNAB_API_KEY", raising=False)
        monkeypatch.delenv("YNAB_KEY", raising=False)
        with pytest.raises(ConfigError, match="YNAB_API_KEY"):
            get_api_key()
