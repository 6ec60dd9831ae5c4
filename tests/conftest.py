"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from docwright.ai.orchestration.tool_dispatcher import ToolDispatcher
from docwright.ai.tools.tool_registry import ToolRegistry
from docwright.ai.tools.tool_wiring import create_default_registry
from docwright.services.settings import SecretVault, Settings, SettingsStore
from tests.helpers import RecordingSurface

_ENV_VARS = (
    "DOCWRIGHT_API_KEY",
    "DOCWRIGHT_BASE_URL",
    "DOCWRIGHT_MODEL",
    "DOCWRIGHT_SYSTEM_PROMPT",
    "DOCWRIGHT_REQUEST_TIMEOUT",
    "DOCWRIGHT_DEBUG_LOGGING",
    "DOCWRIGHT_LOG_DIR",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry() -> ToolRegistry:
    return create_default_registry()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface(["Hello world", "foo and foobar"])


@pytest.fixture
def dispatcher(registry: ToolRegistry, surface: RecordingSurface) -> ToolDispatcher:
    return ToolDispatcher(registry=registry, surface=surface)


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json", vault=SecretVault(key_path=tmp_path / "settings.key"))


@pytest.fixture
def configured_store(settings_store: SettingsStore) -> SettingsStore:
    settings_store.save(
        Settings(base_url="https://llm.example/v1", api_key="sk-test", model="test-model")
    )
    return settings_store
