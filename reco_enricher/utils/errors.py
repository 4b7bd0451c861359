"""Custom exception hierarchy for reco-enricher.

All application exceptions inherit from :class:`RecoEnricherError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream service (e.g. "knowledge_graph", "wikipedia") caused the failure.

    RecoEnricherError  (base -- catch-all for any reco-enricher error)
    +-- ConfigurationError  (missing API key / invalid settings)
    +-- UpstreamError       (non-2xx response or network failure)
    +-- DataShapeError      (upstream JSON missing expected fields)

Only :class:`ConfigurationError` escapes the provider boundary.  The other
two are raised by the low-level fetch helpers and converted into an empty
:class:`~reco_enricher.models.results.LookupResult` by each provider's
public methods, so a caller always receives a well-typed result.
"""

from __future__ import annotations


class RecoEnricherError(Exception):
    """Base exception for all reco-enricher errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for log
    output, e.g. ``[wikipedia] HTTP 503 from search endpoint``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(RecoEnricherError):
    """Raised when configuration is invalid or missing (e.g. no API key)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpstreamError(RecoEnricherError):
    """Raised when an upstream API answers non-2xx or cannot be reached.

    ``status_code`` is set for HTTP status failures and ``None`` for
    transport-level failures (DNS, connect, timeout).
    """

    def __init__(
        self,
        message: str = "Upstream service request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


class DataShapeError(RecoEnricherError):
    """Raised when an upstream response body lacks the expected structure."""

    def __init__(
        self,
        message: str = "Unexpected upstream response shape",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
