"""n8n node catalog discovery, search and workflow tooling."""

__version__ = "0.1.0"
