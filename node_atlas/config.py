"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App settings
    app_name: str = "n8n Node Atlas"
    debug: bool = False
    log_level: str = "INFO"
    log_renderer: Literal["json", "console"] = "json"

    # Default n8n instance (used by the push endpoint)
    n8n_base_url: str = "http://localhost:5678/api/v1"
    n8n_api_key: str = ""
    n8n_timeout: float = 30.0

    # ==========================================================================
    # N8N ENVIRONMENTS
    # Only environments with an API key are registered for deploy/sync tools
    # ==========================================================================

    n8n_dev_api_url: str = "http://localhost:5678/api/v1"
    n8n_dev_api_key: str = ""

    n8n_staging_api_url: str = "https://staging-n8n.example.com/api/v1"
    n8n_staging_api_key: str = ""

    n8n_prod_api_url: str = "https://n8n.example.com/api/v1"
    n8n_prod_api_key: str = ""

    # ==========================================================================
    # CATALOG REFRESH
    # Node definitions are pulled from the n8n repository on GitHub
    # ==========================================================================

    github_api_base: str = "https://api.github.com/repos/n8n-io/n8n"
    github_nodes_path: str = "packages/nodes-base/nodes"
    github_branch: str = "master"
    # Optional; raises the GitHub rate limit from 60 to 5000 requests/hour
    github_token: Optional[str] = None

    # Minimum delay between two requests to the remote source (seconds)
    refresh_min_interval: float = 1.0
    refresh_timeout: float = 30.0

    # Where the last good snapshot is persisted (disabled when unset)
    snapshot_path: Optional[str] = None

    # ==========================================================================
    # DISCOVERY
    # ==========================================================================

    load_builtin_catalog: bool = True
    search_max_results: int = 50
    chain_miss_policy: Literal["flag", "drop", "raise"] = "flag"

    def get_environment_credentials(self) -> dict[str, tuple[str, str]]:
        """Get (url, api_key) per environment name."""
        return {
            "development": (self.n8n_dev_api_url, self.n8n_dev_api_key),
            "staging": (self.n8n_staging_api_url, self.n8n_staging_api_key),
            "production": (self.n8n_prod_api_url, self.n8n_prod_api_key),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
