"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables**: e.g. GOOGLE_KNOWLEDGE_GRAPH_API_KEY=AIza...
#   2. **.env file**: key=value lines in the project root .env file
#
# Field `google_knowledge_graph_api_key` maps to env var
# `GOOGLE_KNOWLEDGE_GRAPH_API_KEY` (pydantic-settings uppercases and matches).
#
# Defaults apply when neither an env var nor a .env entry exists.
# Copy .env.example to .env for local development.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PLACEHOLDER_IMAGE_URL = "/placeholder.svg?height=400&width=400"


class Settings(BaseSettings):
    """reco-enricher application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # === Google Knowledge Graph ===
    # Empty string = "not configured": searches raise ConfigurationError and
    # the recommendation service falls back to Wikipedia in auto mode.
    google_knowledge_graph_api_key: str = ""
    knowledge_graph_api_url: str = "https://kgsearch.googleapis.com/v1/entities:search"
    knowledge_graph_languages: str = "ja,en"
    # 0 = entries never expire / cache is unbounded.
    knowledge_graph_cache_ttl: int = 0
    knowledge_graph_cache_max_size: int = 0

    # === Wikipedia ===
    wikipedia_api_url: str = "https://ja.wikipedia.org/w/api.php"
    wikipedia_user_agent: str = "MyApp/1.0 (https://myapp.example; myapp@example.com)"
    wikipedia_cache_ttl: int = 24 * 60 * 60
    wikipedia_cache_max_size: int = 1000

    # === Images ===
    image_proxy_path: str = "/api/image-proxy"
    placeholder_image_url: str = DEFAULT_PLACEHOLDER_IMAGE_URL
    image_url_cache_max_size: int = 100

    # === HTTP ===
    http_timeout: float = 30.0

    # === Recommendations ===
    default_limit: int = 5

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def has_knowledge_graph_key(self) -> bool:
        """Return ``True`` when a Knowledge Graph API key is configured."""
        return bool(self.google_knowledge_graph_api_key.strip())
