"""Image URL construction for recommendation cards.

Maps raw image references from each upstream (an arbitrary remote URL, a TMDb
poster path, a Spotify image array, a Wikidata entity id) to a URL the
front-end can display.  Remote URLs are routed through the same-origin image
proxy, ``<proxy_path>?url=<percent-encoded url>``, so the browser never loads
cross-origin images directly.  Spotify URLs are the exception and are
returned as-is.

Every builder returns the placeholder for absent input and never raises.
Built URLs are memoised in one insertion-ordered map owned by the builder;
it only shrinks when :meth:`ImageUrlBuilder.limit_cache_size` is called.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

from reco_enricher.config.settings import DEFAULT_PLACEHOLDER_IMAGE_URL
from reco_enricher.utils.logging import get_logger

_logger = get_logger(__name__)

_TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"
_COMMONS_FILE_PATH_URL = "https://commons.wikimedia.org/wiki/Special:FilePath/{entity_id}?width=800"
_DEFAULT_PROXY_PATH = "/api/image-proxy"

# Characters JavaScript's encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode *value* with ``encodeURIComponent`` semantics."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


class ImageUrlBuilder:
    """Builds and memoises displayable image URLs.

    Parameters
    ----------
    proxy_path:
        Path of the image proxy endpoint (served by the front-end).
    placeholder_url:
        Returned for any absent image reference.
    """

    def __init__(
        self,
        proxy_path: str = _DEFAULT_PROXY_PATH,
        placeholder_url: str = DEFAULT_PLACEHOLDER_IMAGE_URL,
    ) -> None:
        self._proxy_path = proxy_path
        self._placeholder_url = placeholder_url
        # Plain dict: iteration order is insertion order, which
        # limit_cache_size relies on to find the oldest entry.
        self._url_cache: dict[str, str] = {}

    @property
    def placeholder_url(self) -> str:
        return self._placeholder_url

    @property
    def cache_size(self) -> int:
        return len(self._url_cache)

    def cached_keys(self) -> list[str]:
        """Return the cache keys, oldest first."""
        return list(self._url_cache)

    def clear_cache(self) -> None:
        self._url_cache.clear()

    def _proxy(self, url: str) -> str:
        return f"{self._proxy_path}?url={encode_uri_component(url)}"

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def get_proxied_image_url(self, original_url: str | None) -> str:
        """Rewrite *original_url* through the image proxy."""
        if not original_url:
            return self._placeholder_url

        cache_key = f"proxy_{original_url}"
        cached = self._url_cache.get(cache_key)
        if cached is not None:
            return cached

        proxied_url = self._proxy(original_url)
        self._url_cache[cache_key] = proxied_url
        return proxied_url

    def get_tmdb_image_url(self, path: str | None, size: str = "w500") -> str:
        """Build a TMDb image URL for *path* (e.g. ``"/abc.jpg"``) at *size*."""
        if not path:
            return self._placeholder_url

        cache_key = f"tmdb_{path}_{size}"
        cached = self._url_cache.get(cache_key)
        if cached is not None:
            return cached

        tmdb_url = f"{_TMDB_IMAGE_BASE_URL}{size}{path}"
        self._url_cache[cache_key] = tmdb_url
        return tmdb_url

    def get_spotify_image_url(self, images: Sequence[Mapping[str, Any]] | None) -> str:
        """Return the first Spotify image URL unmodified (not proxied)."""
        if not images:
            return self._placeholder_url
        first = images[0]
        image_url = first.get("url") if isinstance(first, Mapping) else None
        if not image_url:
            return self._placeholder_url

        cache_key = f"spotify_{image_url}"
        cached = self._url_cache.get(cache_key)
        if cached is not None:
            return cached

        self._url_cache[cache_key] = image_url
        return image_url

    def get_wikipedia_image_url(self, entity_id: str | None) -> str:
        """Build a proxied Wikimedia Commons file-path URL for *entity_id*."""
        if not entity_id:
            return self._placeholder_url

        cache_key = f"wiki_{entity_id}"
        cached = self._url_cache.get(cache_key)
        if cached is not None:
            return cached

        commons_url = _COMMONS_FILE_PATH_URL.format(entity_id=entity_id)
        proxied_url = self._proxy(commons_url)
        self._url_cache[cache_key] = proxied_url
        return proxied_url

    # ------------------------------------------------------------------
    # Size control
    # ------------------------------------------------------------------

    def limit_cache_size(self, max_size: int = 100) -> int:
        """Evict oldest entries until at most *max_size* remain.

        Returns the number of entries removed.
        """
        removed = 0
        while len(self._url_cache) > max(max_size, 0):
            oldest_key = next(iter(self._url_cache))
            del self._url_cache[oldest_key]
            removed += 1
        if removed:
            _logger.debug(
                "image_url_cache_trimmed",
                removed=removed,
                remaining=len(self._url_cache),
            )
        return removed
