"""Shared JSON-over-HTTP helper for the upstream API providers.

Converts every transport or decoding problem into the application's error
hierarchy so providers only have to handle :class:`UpstreamError` and
:class:`DataShapeError` at their public boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from reco_enricher.utils.errors import DataShapeError, UpstreamError


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Mapping[str, Any],
    provider_name: str,
    headers: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """GET *url* with *params* and return the decoded JSON object.

    Raises
    ------
    UpstreamError
        On a non-2xx status (``status_code`` set) or a transport failure.
    DataShapeError
        If the body is not a JSON object.
    """
    try:
        response = await client.get(url, params=dict(params), headers=dict(headers or {}))
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise UpstreamError(
            message=f"HTTP {exc.response.status_code} from {url}",
            provider_name=provider_name,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise UpstreamError(
            message=f"Request to {url} failed: {type(exc).__name__}: {exc}",
            provider_name=provider_name,
        ) from exc

    try:
        data = response.json()
    except ValueError as exc:
        raise DataShapeError(
            message=f"Response from {url} is not valid JSON",
            provider_name=provider_name,
        ) from exc

    if not isinstance(data, dict):
        raise DataShapeError(
            message=f"Response from {url} is not a JSON object",
            provider_name=provider_name,
        )
    return data
