"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : Static defaults checked into the repo
#   2. .env file          : Local developer overrides (not committed)
#   3. Environment vars   : Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the
# Settings-derived values on top:
#   base = {"recommendations": {"fallback_to_wikipedia": True}}
#   overrides = {"recommendations": {"default_limit": 5}}
#   result = {"recommendations": {"fallback_to_wikipedia": True, "default_limit": 5}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from reco_enricher.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to merge in. A fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "knowledge_graph": {
            "configured": settings.has_knowledge_graph_key(),
            "languages": settings.knowledge_graph_languages,
            "cache_ttl": settings.knowledge_graph_cache_ttl,
        },
        "wikipedia": {
            "api_url": settings.wikipedia_api_url,
            "cache_ttl": settings.wikipedia_cache_ttl,
        },
        "images": {
            "proxy_path": settings.image_proxy_path,
            "cache_max_size": settings.image_url_cache_max_size,
        },
        "recommendations": {
            "default_limit": settings.default_limit,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
