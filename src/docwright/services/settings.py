"""Settings dataclass and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from cryptography.fernet import Fernet, InvalidToken

from ..ai.client import ClientSettings

__all__ = [
    "ConfigurationError",
    "Settings",
    "SettingsStore",
    "SecretVault",
    "redact_secret",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".docwright"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "DOCWRIGHT_API_KEY": "api_key",
    "DOCWRIGHT_BASE_URL": "base_url",
    "DOCWRIGHT_MODEL": "model",
    "DOCWRIGHT_SYSTEM_PROMPT": "system_prompt",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "DOCWRIGHT_DEBUG_LOGGING": "debug_logging",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "DOCWRIGHT_REQUEST_TIMEOUT": "request_timeout",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_API_KEY_FIELD = "api_key_ciphertext"
_REQUIRED_FIELDS = ("base_url", "api_key", "model")


class ConfigurationError(RuntimeError):
    """Raised when the settings are not complete enough to reach the model."""

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-4o-mini"
    system_prompt: str = ""
    request_timeout: float = 90.0
    max_retries: int = 1
    allow_edits: bool = True
    debug_logging: bool = False

    def to_client_settings(self) -> ClientSettings:
        """Build :class:`ClientSettings`, refusing incomplete configuration."""

        missing = tuple(name for name in _REQUIRED_FIELDS if not str(getattr(self, name) or "").strip())
        if missing:
            raise ConfigurationError(
                f"Missing required setting(s): {', '.join(missing)}",
                missing=missing,
            )
        return ClientSettings(
            base_url=self.base_url.strip(),
            api_key=self.api_key.strip(),
            model=self.model.strip(),
            request_timeout=self.request_timeout,
            max_retries=self.max_retries,
            debug_logging=self.debug_logging,
        )


class SecretVault:
    """Encrypts and decrypts the API key with a Fernet key stored on disk."""

    name = "fernet"

    def __init__(self, *, key_path: Path | None = None) -> None:
        self._key_path = key_path or (_SETTINGS_DIR / "settings.key")
        self._fernet: Fernet | None = None

    @property
    def key_path(self) -> Path:
        return self._key_path

    def encrypt(self, secret: str) -> str:
        if not secret:
            return ""
        token = self._get_fernet().encrypt(secret.encode("utf-8"))
        return f"{self.name}:{token.decode('ascii')}"

    def decrypt(self, token: str | None) -> str:
        if not token:
            return ""
        prefix, _, payload = token.partition(":")
        if not payload:
            prefix, payload = self.name, token
        if prefix != self.name:
            raise ValueError(f"Unknown secret token prefix {prefix!r}")
        try:
            return self._get_fernet().decrypt(payload.encode("ascii")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError("Invalid Fernet token") from exc

    def _get_fernet(self) -> Fernet:
        if self._fernet is None:
            self._fernet = Fernet(self._load_or_create_key())
        return self._fernet

    def _load_or_create_key(self) -> bytes:
        path = self._key_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            return path.read_bytes().strip()
        key = Fernet.generate_key()
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(key)
        if os.name != "nt":  # pragma: no cover - depends on OS
            os.chmod(tmp_path, 0o600)
        tmp_path.replace(path)
        return key


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None, *, vault: SecretVault | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH
        self._vault = vault or SecretVault(key_path=self._path.with_suffix(".key"))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def vault(self) -> SecretVault:
        return self._vault

    def load(self) -> Settings:
        """Load settings from disk and apply environment overrides."""

        settings = self._load_from_disk()
        LOGGER.debug(
            "Settings loaded from %s: model=%s, api_key=%s",
            self._path,
            settings.model,
            redact_secret(settings.api_key),
        )
        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        body = json.dumps(self._serialize(settings), indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def update(self, **partial: Any) -> Settings:
        """Merge ``partial`` into the stored settings, persist, and return the result.

        Environment overrides are not written back; the merge starts from the
        file contents alone.
        """

        unknown = set(partial) - {field.name for field in fields(Settings)}
        if unknown:
            raise TypeError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        current = self._load_from_disk()
        merged = replace(current, **partial)
        self.save(merged)
        return self._apply_env_overrides(merged)

    def _load_from_disk(self) -> Settings:
        payload = self._read_payload()
        if not payload:
            return Settings()
        api_key = self._decrypt_api_key(payload.pop(_API_KEY_FIELD, None))
        legacy_key = payload.pop("api_key", None)
        if not api_key and isinstance(legacy_key, str) and legacy_key:
            LOGGER.info("Found plaintext API key in %s; it will be encrypted on next save", self._path)
            api_key = legacy_key
        try:
            settings = Settings(**_filter_fields(payload))
        except TypeError as exc:
            LOGGER.warning("Settings payload contained unexpected data: %s", exc)
            settings = Settings()
        return replace(settings, api_key=api_key) if api_key else settings

    def _serialize(self, settings: Settings) -> Dict[str, Any]:
        data = asdict(settings)
        api_key = data.pop("api_key", "") or ""
        if api_key:
            data[_API_KEY_FIELD] = self._vault.encrypt(api_key)
        data["version"] = _SETTINGS_VERSION
        return data

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _decrypt_api_key(self, ciphertext: str | None) -> str:
        if not ciphertext:
            return ""
        try:
            return self._vault.decrypt(ciphertext)
        except ValueError as exc:
            LOGGER.warning("Unable to decrypt API key: %s", exc)
            return ""

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            LOGGER.debug("Applying environment settings overrides: %s", sorted(overrides))
            settings = replace(settings, **overrides)
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)} - {"api_key"}
    return {key: value for key, value in payload.items() if key in allowed}


def redact_secret(value: str) -> str:
    stripped = (value or "").strip()
    if not stripped:
        return ""
    if len(stripped) <= 4:
        return "*" * len(stripped)
    return f"{stripped[:2]}{'*' * (len(stripped) - 4)}{stripped[-2:]}"
