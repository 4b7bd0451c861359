"""Pydantic models for MediaWiki Action API responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WikipediaSearchHit(BaseModel):
    """One entry of ``query.search`` from ``list=search``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pageid: int
    title: str
    snippet: str | None = None
    wordcount: int | None = None
    timestamp: str | None = None


class WikipediaThumbnail(BaseModel):
    """``pageimages`` thumbnail block."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: str
    width: int | None = None
    height: int | None = None


class WikipediaPage(BaseModel):
    """One entry of ``query.pages`` from ``prop=extracts|pageimages``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    pageid: int
    title: str
    extract: str | None = None
    thumbnail: WikipediaThumbnail | None = None
