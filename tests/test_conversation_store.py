"""Tests for conversation history persistence."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from docwright.ai.orchestration.types import Message, ToolCall
from docwright.services.conversation_store import (
    ConversationStore,
    FileConversationStore,
    InMemoryConversationStore,
)


def _sample_history() -> list[Message]:
    call = ToolCall(id="call_0", name="insert_heading", arguments='{"text": "Intro"}')
    return [
        Message.user("Add a heading"),
        Message.assistant(None, tool_calls=[call]),
        Message.tool('{"ok": true, "inserted": "heading"}', tool_call_id="call_0", name="insert_heading"),
        Message.assistant("Done."),
    ]


@pytest.fixture(params=["file", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> ConversationStore:
    if request.param == "file":
        return FileConversationStore(tmp_path / "conversations")
    return InMemoryConversationStore()


def test_stores_conform_to_protocol(store: ConversationStore) -> None:
    assert isinstance(store, ConversationStore)


def test_save_then_load_returns_equal_history(store: ConversationStore) -> None:
    history = _sample_history()

    store.save_history("doc-1", history)

    assert store.load_history("doc-1") == history


def test_histories_are_isolated_per_document(store: ConversationStore) -> None:
    store.save_history("doc-1", _sample_history())

    assert store.load_history("doc-2") == []


def test_reset_clears_history(store: ConversationStore) -> None:
    store.save_history("doc-1", _sample_history())

    store.reset_history("doc-1")
    store.reset_history("never-saved")

    assert store.load_history("doc-1") == []


def test_file_layout(tmp_path: Path) -> None:
    store = FileConversationStore(tmp_path)
    store.save_history("C:/docs/report.docx", [Message.user("hi")])

    expected = tmp_path / f"{hashlib.sha1('C:/docs/report.docx'.encode()).hexdigest()}.json"
    assert store.path_for("C:/docs/report.docx") == expected
    payload = json.loads(expected.read_text(encoding="utf-8"))
    assert payload == {
        "version": 1,
        "document_id": "C:/docs/report.docx",
        "messages": [{"role": "user", "content": "hi"}],
    }


def test_corrupt_file_loads_empty(tmp_path: Path) -> None:
    store = FileConversationStore(tmp_path)
    store.path_for("doc").write_text("{broken", encoding="utf-8")

    assert store.load_history("doc") == []


def test_malformed_entries_are_skipped(tmp_path: Path) -> None:
    store = FileConversationStore(tmp_path)
    store.path_for("doc").write_text(
        json.dumps({"messages": ["junk", {"role": "user", "content": "kept"}]}),
        encoding="utf-8",
    )

    assert store.load_history("doc") == [Message.user("kept")]
