import os
from unittest.mock import patch

import pytest
from fetch_request_spec.config_loader import (
    ENV_BASE_URL,
    ENV_FOLLOW_REDIRECTS,
    ENV_TIMEOUT_MS,
    load_defaults_from_env,
    load_defaults_from_yaml,
    parse_flag,
    parse_timeout,
)
from fetch_request_spec.defaults import DefaultsStore, get_default_store

@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in (ENV_BASE_URL, ENV_TIMEOUT_MS, ENV_FOLLOW_REDIRECTS):
        monkeypatch.delenv(key, raising=False)

class TestParsers:
    @pytest.mark.parametrize("raw, expected", [("5000", 5000), (4500, 4500), (" 12 ", 12)])
    def test_timeout(self, raw, expected):
        assert parse_timeout(raw, "test") == expected

    @pytest.mark.parametrize("raw", ["abc", "", True, None])
    def test_unusable_timeout(self, raw):
        assert parse_timeout(raw, "test") is None

    @pytest.mark.parametrize("raw", ["true", "YES", "1", "on", True])
    def test_flag_true(self, raw):
        assert parse_flag(raw, "test") is True

    @pytest.mark.parametrize("raw", ["false", "No", "0", "off", False])
    def test_flag_false(self, raw):
        assert parse_flag(raw, "test") is False

    def test_unusable_flag(self):
        assert parse_flag("maybe", "test") is None

class TestLoadDefaultsFromEnv:
    def test_env_vars_applied(self, monkeypatch):
        monkeypatch.setenv(ENV_BASE_URL, "http://localhost:3000/")
        monkeypatch.setenv(ENV_TIMEOUT_MS, "5000")
        monkeypatch.setenv(ENV_FOLLOW_REDIRECTS, "false")
        store = load_defaults_from_env(DefaultsStore())
        assert store.base_url == "http://localhost:3000"
        assert store.timeout_ms == 5000
        assert store.follow_redirects is False

    def test_nothing_set_keeps_defaults(self):
        store = load_defaults_from_env(DefaultsStore())
        assert store.base_url is None
        assert store.timeout_ms == 3000
        assert store.follow_redirects is True

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"{ENV_BASE_URL}=http://from-dotenv:8080\n")
        with patch.dict(os.environ):
            store = load_defaults_from_env(DefaultsStore(), env_file=str(env_file))
        assert store.base_url == "http://from-dotenv:8080"
        assert ENV_BASE_URL not in os.environ

    def test_defaults_to_process_store(self, monkeypatch):
        monkeypatch.setenv(ENV_TIMEOUT_MS, "900")
        assert load_defaults_from_env() is get_default_store()
        assert get_default_store().timeout_ms == 900

class TestLoadDefaultsFromYaml:
    def test_nested_section(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text(
            "request_defaults:\n"
            "  base_url: http://localhost:3000\n"
            "  timeout_ms: 4500\n"
            "  follow_redirects: false\n"
            "  headers:\n"
            "    Accept: application/json\n"
        )
        store = load_defaults_from_yaml(str(path), DefaultsStore())
        assert store.base_url == "http://localhost:3000"
        assert store.timeout_ms == 4500
        assert store.follow_redirects is False
        assert store.headers["accept"] == "application/json"

    def test_top_level_values(self, tmp_path):
        path = tmp_path / "defaults.yaml"
        path.write_text("base_url: https://api.example.com\n")
        store = load_defaults_from_yaml(str(path), DefaultsStore())
        assert store.base_url == "https://api.example.com"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_defaults_from_yaml(str(tmp_path / "nope.yaml"), DefaultsStore())

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_defaults_from_yaml(str(path), DefaultsStore())

    def test_bad_values_keep_current_defaults(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("request_defaults:\n  timeout_ms: soon\n  follow_redirects: maybe\n")
        store = load_defaults_from_yaml(str(path), DefaultsStore())
        assert store.timeout_ms == 3000
        assert store.follow_redirects is True
