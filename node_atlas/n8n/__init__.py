"""n8n integration modules."""
from node_atlas.n8n.client import N8NClient, N8NClientError
from node_atlas.n8n.environments import EnvironmentRegistry, UnknownEnvironmentError

__all__ = ["N8NClient", "N8NClientError", "EnvironmentRegistry", "UnknownEnvironmentError"]
