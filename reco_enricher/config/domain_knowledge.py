"""Static keyword maps used to classify Knowledge Graph entities.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# Knowledge Graph entities carry schema.org-style type tags such as
# "MusicGroup", "Person" or "TVSeries".  The recommendation UI groups
# suggestions into four shelves (artists, celebrities, media, fashion), so
# each entity is mapped onto one shelf by substring-matching its lower-cased
# type tags against the keyword groups below.
#
# Group ORDER is significant: the first group with a match wins.  Music is
# tested before celebrity so that a "MusicGroup"+"Person" entity lands on the
# artists shelf; celebrity before media; media before fashion.
#
# Everything here is pure data built once at import time.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from enum import Enum


class EntityCategory(str, Enum):
    """Recommendation shelf an entity is displayed on."""

    ARTISTS = "artists"
    CELEBRITIES = "celebrities"
    MEDIA = "media"
    FASHION = "fashion"


# Ordered: first matching group wins.
CATEGORY_KEYWORDS: tuple[tuple[EntityCategory, tuple[str, ...]], ...] = (
    (
        EntityCategory.ARTISTS,
        ("musician", "artist", "musicgroup", "band", "music"),
    ),
    (
        EntityCategory.CELEBRITIES,
        ("actor", "actress", "celebrity", "person", "director", "athlete"),
    ),
    (
        EntityCategory.MEDIA,
        ("movie", "tvshow", "tvseries", "book", "game", "videogame", "anime"),
    ),
    (
        EntityCategory.FASHION,
        ("brand", "clothing", "fashion", "organization", "company", "corporation"),
    ),
)

DEFAULT_CATEGORY = EntityCategory.CELEBRITIES


def classify_type_tags(types: list[str] | tuple[str, ...]) -> EntityCategory:
    """Map a list of entity type tags onto an :class:`EntityCategory`.

    Tags are joined with spaces and lower-cased, so a keyword may match
    inside a longer tag ("MusicRecording" matches "music").  Empty input
    yields :data:`DEFAULT_CATEGORY`.
    """
    haystack = " ".join(types).lower()
    if not haystack:
        return DEFAULT_CATEGORY
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
