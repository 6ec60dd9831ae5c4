"""docwright: a chat assistant that edits word-processing documents through tools."""

__version__ = "0.1.0"

from .chat.assistant import DocumentAssistant
from .documents.docx_surface import DocxDocumentSurface
from .services.conversation_store import FileConversationStore, InMemoryConversationStore
from .services.settings import ConfigurationError, Settings, SettingsStore

__all__ = [
    "ConfigurationError",
    "DocumentAssistant",
    "DocxDocumentSurface",
    "FileConversationStore",
    "InMemoryConversationStore",
    "Settings",
    "SettingsStore",
]
