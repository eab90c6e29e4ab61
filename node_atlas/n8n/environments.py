"""Named n8n environments (development, staging, production)."""
from typing import Optional

import structlog

from node_atlas.config import Settings, get_settings
from node_atlas.n8n.client import N8NClient

logger = structlog.get_logger()


class UnknownEnvironmentError(Exception):
    """Requested environment is not configured."""

    def __init__(self, environment: str, available: Optional[list[str]] = None):
        available = available or []
        super().__init__(
            f"Environment '{environment}' not found "
            f"(configured: {', '.join(available) or 'none'})"
        )
        self.environment = environment
        self.available = available


class EnvironmentRegistry:
    """Maps environment names to n8n API clients.

    Only environments that have an API key are registered.
    """

    def __init__(self, clients: Optional[dict[str, N8NClient]] = None):
        self._clients: dict[str, N8NClient] = dict(clients or {})

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EnvironmentRegistry":
        settings = settings or get_settings()
        clients = {}
        for name, (url, api_key) in settings.get_environment_credentials().items():
            if not api_key:
                continue
            clients[name] = N8NClient(base_url=url, api_key=api_key, name=name)

        logger.info("environments_registered", environments=sorted(clients))
        return cls(clients)

    def names(self) -> list[str]:
        return sorted(self._clients)

    def register(self, name: str, client: N8NClient) -> None:
        self._clients[name] = client

    def client_for(self, name: str) -> N8NClient:
        try:
            return self._clients[name]
        except KeyError:
            raise UnknownEnvironmentError(name, self.names()) from None

    def __contains__(self, name: str) -> bool:
        return name in self._clients
