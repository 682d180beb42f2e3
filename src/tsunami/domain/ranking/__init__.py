"""Ranked views over the deduplicated catalog."""

from __future__ import annotations

from .featured import FeaturedArtist, FeaturedSettings, select_featured_artists
from .trending import (
    TrendingEntry,
    TrendingSettings,
    TrendingWeights,
    composite_score,
    rank_trending,
    recency_score,
)

__all__ = [
    "FeaturedArtist",
    "FeaturedSettings",
    "TrendingEntry",
    "TrendingSettings",
    "TrendingWeights",
    "composite_score",
    "rank_trending",
    "recency_score",
    "select_featured_artists",
]
