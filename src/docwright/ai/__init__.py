"""AI client, orchestration loop, and document tool wiring."""

from .client import AIClient, ClientSettings, ModelEndpointError

__all__ = ["AIClient", "ClientSettings", "ModelEndpointError"]
