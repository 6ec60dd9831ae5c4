"""Settings and conversation persistence."""

from .conversation_store import ConversationStore, FileConversationStore, InMemoryConversationStore
from .settings import ConfigurationError, Settings, SettingsStore

__all__ = [
    "ConfigurationError",
    "ConversationStore",
    "FileConversationStore",
    "InMemoryConversationStore",
    "Settings",
    "SettingsStore",
]
