"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path

import pytest

from docwright.services.settings import (
    ConfigurationError,
    SecretVault,
    Settings,
    SettingsStore,
    redact_secret,
)


def test_load_returns_defaults_when_file_missing(settings_store: SettingsStore) -> None:
    assert settings_store.load() == Settings()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    original = Settings(
        base_url="https://example.com/v1",
        api_key="super-secret",
        model="gpt-4.1-mini",
        system_prompt="Be terse.",
        allow_edits=False,
    )

    SettingsStore(path).save(original)
    reloaded = SettingsStore(path).load()

    assert reloaded == original


def test_api_key_is_encrypted_on_disk(settings_store: SettingsStore) -> None:
    settings_store.save(Settings(api_key="super-secret"))

    payload = json.loads(settings_store.path.read_text(encoding="utf-8"))

    assert "api_key" not in payload
    assert payload["api_key_ciphertext"].startswith("fernet:")
    assert "super-secret" not in settings_store.path.read_text(encoding="utf-8")
    assert payload["version"] == 1


def test_update_merges_partial(settings_store: SettingsStore) -> None:
    settings_store.save(Settings(api_key="abc", model="first"))

    updated = settings_store.update(model="second", allow_edits=False)

    assert updated.api_key == "abc"
    assert updated.model == "second"
    assert settings_store.load() == updated


def test_update_rejects_unknown_fields(settings_store: SettingsStore) -> None:
    with pytest.raises(TypeError):
        settings_store.update(theme="dark")


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps({"model": "m", "window_geometry": "1x1"}), encoding="utf-8")

    assert SettingsStore(target).load().model == "m"


def test_temperature_is_not_configurable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps({"model": "m", "temperature": 1.5}), encoding="utf-8")
    monkeypatch.setenv("DOCWRIGHT_TEMPERATURE", "0.9")

    loaded = SettingsStore(target).load()

    assert loaded == Settings(model="m")
    assert "temperature" not in {field.name for field in fields(Settings)}
    with pytest.raises(TypeError):
        SettingsStore(target).update(temperature=0.9)


def test_invalid_json_falls_back_to_defaults(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text("{not json", encoding="utf-8")

    assert SettingsStore(target).load() == Settings()


def test_load_legacy_plaintext_api_key(tmp_path: Path) -> None:
    target = tmp_path / "settings.json"
    target.write_text(json.dumps({"base_url": "https://old", "api_key": "plain-key"}), encoding="utf-8")

    loaded = SettingsStore(target).load()

    assert loaded.api_key == "plain-key"
    assert loaded.base_url == "https://old"


def test_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, settings_store: SettingsStore) -> None:
    settings_store.save(Settings(base_url="https://local", api_key="abc"))
    monkeypatch.setenv("DOCWRIGHT_BASE_URL", "https://env-base")
    monkeypatch.setenv("DOCWRIGHT_API_KEY", "env-key")
    monkeypatch.setenv("DOCWRIGHT_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("DOCWRIGHT_REQUEST_TIMEOUT", "not-a-number")

    overridden = settings_store.load()

    assert overridden.base_url == "https://env-base"
    assert overridden.api_key == "env-key"
    assert overridden.debug_logging is True
    assert overridden.request_timeout == 90.0


def test_vault_rejects_foreign_tokens(tmp_path: Path) -> None:
    vault = SecretVault(key_path=tmp_path / "settings.key")
    token = vault.encrypt("secret")

    assert vault.decrypt(token) == "secret"
    with pytest.raises(ValueError):
        vault.decrypt("dpapi:abc")


class TestClientSettings:
    def test_complete_settings_convert(self) -> None:
        client_settings = Settings(api_key=" sk ", model="m", max_retries=2).to_client_settings()

        assert client_settings.api_key == "sk"
        assert client_settings.model == "m"
        assert client_settings.max_retries == 2
        assert not hasattr(client_settings, "temperature")

    def test_missing_credentials_raise(self) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            Settings(base_url="", api_key="", model="m").to_client_settings()

        assert excinfo.value.missing == ("base_url", "api_key")


def test_redact_secret() -> None:
    assert redact_secret("sk-abcdef") == "sk*****ef"
    assert redact_secret("abc") == "***"
    assert redact_secret("") == ""
