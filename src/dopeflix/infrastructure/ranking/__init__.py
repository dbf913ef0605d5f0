from __future__ import annotations

from .preference_ranker import (
    PreferenceRanker,
    rank_by_preference,
    rank_subtitles,
    rank_videos,
)

__all__ = ["PreferenceRanker", "rank_by_preference", "rank_subtitles", "rank_videos"]
