"""Top-level "send message" entry point for one document."""

from __future__ import annotations

import logging
from typing import Any

from ..ai.client import AIClient, ClientSettings
from ..ai.orchestration.orchestrator import ChatOrchestrator, ModelClient
from ..ai.orchestration.tool_dispatcher import DispatchListener, ToolDispatcher
from ..ai.orchestration.types import Message, RunResult
from ..ai.prompts import system_prompt
from ..ai.tools.base import DocumentSurface
from ..ai.tools.tool_registry import ToolRegistry
from ..ai.tools.tool_wiring import create_default_registry
from ..services.conversation_store import ConversationStore
from ..services.settings import SettingsStore

__all__ = ["DocumentAssistant"]

LOGGER = logging.getLogger(__name__)


class DocumentAssistant:
    """Binds one document to its settings, history, model client and tools.

    Configuration and model endpoint failures propagate out of
    :meth:`send_message`; tool failures are fed back to the model and never
    reach the caller.

    Example:
        >>> assistant = DocumentAssistant(
        ...     "report.docx",
        ...     DocxDocumentSurface("report.docx"),
        ...     settings_store=SettingsStore(),
        ...     conversation_store=FileConversationStore(),
        ... )
        >>> result = await assistant.send_message("Add a summary heading at the top")
    """

    def __init__(
        self,
        document_id: str,
        surface: DocumentSurface,
        *,
        settings_store: SettingsStore,
        conversation_store: ConversationStore,
        client: ModelClient | None = None,
        registry: ToolRegistry | None = None,
        listener: DispatchListener | None = None,
    ) -> None:
        if not document_id:
            raise ValueError("document_id must not be empty")
        self._document_id = document_id
        self._surface = surface
        self._settings_store = settings_store
        self._conversation_store = conversation_store
        self._client = client
        self._owns_client = False
        self._client_settings: ClientSettings | None = None
        self._registry = registry or create_default_registry()
        self._dispatcher = ToolDispatcher(registry=self._registry, surface=surface, listener=listener)

    @property
    def document_id(self) -> str:
        return self._document_id

    @property
    def surface(self) -> DocumentSurface:
        return self._surface

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def history(self) -> list[Message]:
        return self._conversation_store.load_history(self._document_id)

    async def send_message(self, text: str, *, edits_allowed: bool | None = None) -> RunResult:
        """Run one user message through the model and the document tools.

        Args:
            text: The user's message.
            edits_allowed: Overrides ``Settings.allow_edits`` for this message.

        Raises:
            ConfigurationError: When the endpoint, key or model is missing.
            ModelEndpointError: When the model endpoint fails.
            ValueError: When ``text`` is blank.
        """
        settings = self._settings_store.load()
        client_settings = settings.to_client_settings()
        if self._owns_client and client_settings != self._client_settings:
            LOGGER.info("Client settings changed; rebuilding the model client")
            await self.aclose()
        if self._client is None:
            self._client = AIClient(client_settings)
            self._client_settings = client_settings
            self._owns_client = True

        allowed = settings.allow_edits if edits_allowed is None else edits_allowed
        prior = self._conversation_store.load_history(self._document_id)
        prompt = settings.system_prompt.strip() or system_prompt(tool_names=self._registry.list_tools())
        orchestrator = ChatOrchestrator(self._client, self._dispatcher, system_prompt=prompt)
        LOGGER.info(
            "Sending message for %s (history=%d, edits_allowed=%s)",
            self._document_id,
            len(prior),
            allowed,
        )
        result = await orchestrator.run(
            prior,
            text,
            self._registry.to_openai_tools(),
            edits_allowed=allowed,
        )
        self._conversation_store.save_history(self._document_id, result.history)
        return result

    def reset_conversation(self) -> None:
        self._conversation_store.reset_history(self._document_id)
        LOGGER.info("Conversation reset for %s", self._document_id)

    async def aclose(self) -> None:
        """Close the model client if this assistant created it."""
        if not self._owns_client:
            return
        if isinstance(self._client, AIClient):
            await self._client.aclose()
        self._client = None
        self._client_settings = None
        self._owns_client = False

    async def __aenter__(self) -> DocumentAssistant:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
