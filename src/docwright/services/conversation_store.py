"""Per-document conversation history persistence.

Histories are stored in the OpenAI chat-param shape so a saved transcript can
be replayed to the model verbatim.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Protocol, Sequence, runtime_checkable

from ..ai.orchestration.types import Message
from .settings import _SETTINGS_DIR

__all__ = ["ConversationStore", "FileConversationStore", "InMemoryConversationStore"]

LOGGER = logging.getLogger(__name__)
_HISTORY_DIRNAME = "conversations"
_HISTORY_VERSION = 1


def _default_root() -> Path:
    return _SETTINGS_DIR / _HISTORY_DIRNAME


@runtime_checkable
class ConversationStore(Protocol):
    """Load, save and reset the message history of one document."""

    def load_history(self, document_id: str) -> list[Message]:
        ...

    def save_history(self, document_id: str, messages: Sequence[Message]) -> None:
        ...

    def reset_history(self, document_id: str) -> None:
        ...


class FileConversationStore:
    """One JSON file per document under ``root``."""

    def __init__(self, root: Path | None = None) -> None:
        self._root = root or _default_root()

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, document_id: str) -> Path:
        digest = hashlib.sha1(document_id.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"

    def load_history(self, document_id: str) -> list[Message]:
        payload = self._read_payload(self.path_for(document_id))
        raw_messages = payload.get("messages")
        if not isinstance(raw_messages, list):
            return []
        messages: list[Message] = []
        for entry in raw_messages:
            if not isinstance(entry, dict):
                LOGGER.debug("Skipping malformed history entry for %s", document_id)
                continue
            messages.append(Message.from_chat_param(entry))
        return messages

    def save_history(self, document_id: str, messages: Sequence[Message]) -> None:
        path = self.path_for(document_id)
        payload = {
            "version": _HISTORY_VERSION,
            "document_id": document_id,
            "messages": [dict(message.to_chat_param()) for message in messages],
        }
        body = json.dumps(payload, indent=2, ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(path)
        LOGGER.debug("Saved %d message(s) for %s to %s", len(messages), document_id, path)

    def reset_history(self, document_id: str) -> None:
        path = self.path_for(document_id)
        path.unlink(missing_ok=True)
        LOGGER.debug("Reset history for %s", document_id)

    def _read_payload(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            LOGGER.warning("History file %s is corrupt; starting fresh: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("History file %s does not contain an object; starting fresh", path)
            return {}
        return data


class InMemoryConversationStore:
    """Process-local store, mainly for tests and embedding hosts."""

    def __init__(self) -> None:
        self._histories: dict[str, tuple[Message, ...]] = {}

    def load_history(self, document_id: str) -> list[Message]:
        return list(self._histories.get(document_id, ()))

    def save_history(self, document_id: str, messages: Sequence[Message]) -> None:
        self._histories[document_id] = tuple(messages)

    def reset_history(self, document_id: str) -> None:
        self._histories.pop(document_id, None)
