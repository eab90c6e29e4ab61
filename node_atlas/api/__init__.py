"""API route modules."""
from node_atlas.api import catalog, workflows

__all__ = ["catalog", "workflows"]
