"""Explicit success / empty-with-reason result type for provider calls.

Provider methods never raise for upstream failures.  Instead of returning a
bare ``[]`` or ``None`` and leaving the reason in a log line, they return a
:class:`LookupResult` whose ``reason`` says why the value is empty, so
callers and tests can branch on the failure path directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from reco_enricher.utils.errors import DataShapeError, RecoEnricherError, UpstreamError

_T = TypeVar("_T")


class FailureReason(str, Enum):
    """Why a lookup produced an empty value."""

    HTTP_STATUS = "http_status"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    NO_RESULTS = "no_results"


# A plain generic dataclass rather than a Pydantic model: this is an
# internal value wrapper, never serialised directly.
@dataclass(frozen=True)
class LookupResult(Generic[_T]):
    """The outcome of a provider lookup.

    Attributes
    ----------
    value:
        The looked-up value.  On failure this is the "empty" value for the
        operation (``[]`` or ``None``).
    reason:
        ``None`` on success; otherwise the failure category.
    detail:
        Optional human-readable failure detail (status code, exception text).
    from_cache:
        ``True`` when the value was served from a cache.
    """

    value: _T
    reason: FailureReason | None = None
    detail: str | None = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: _T, *, from_cache: bool = False) -> LookupResult[_T]:
        return cls(value=value, from_cache=from_cache)

    @classmethod
    def failure(
        cls,
        empty: _T,
        reason: FailureReason,
        detail: str | None = None,
    ) -> LookupResult[_T]:
        return cls(value=empty, reason=reason, detail=detail)


def failure_reason_for(exc: RecoEnricherError) -> FailureReason:
    """Map a caught provider error onto a :class:`FailureReason`."""
    if isinstance(exc, UpstreamError):
        if exc.status_code is not None:
            return FailureReason.HTTP_STATUS
        return FailureReason.NETWORK
    if isinstance(exc, DataShapeError):
        return FailureReason.MALFORMED_RESPONSE
    return FailureReason.NETWORK
