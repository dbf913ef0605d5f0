"""Preference-driven ordering of video variants and subtitle tracks.

Both orderings use the same two steps: a stable ascending sort on
"label contains the preferred value" (False before True), then a
reversal of the whole list.  Matching items end up first; within each
group the original relative order is reversed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from dopeflix.domain.entities.media import Preferences, SubtitleTrack, VideoVariant

T = TypeVar("T")


def rank_by_preference(
    items: Sequence[T],
    label: Callable[[T], str],
    preferred: str,
) -> list[T]:
    """Sort *items* so labels containing *preferred* come first."""
    ordered = sorted(items, key=lambda item: preferred in label(item))
    ordered.reverse()
    return ordered


def rank_videos(
    variants: Sequence[VideoVariant],
    preferences: Preferences,
) -> list[VideoVariant]:
    return rank_by_preference(variants, lambda v: v.quality, preferences.quality)


def rank_subtitles(
    tracks: Sequence[SubtitleTrack],
    preferences: Preferences,
) -> list[SubtitleTrack]:
    return rank_by_preference(tracks, lambda t: t.language, preferences.sub_language)


class PreferenceRanker:
    """Final ordering of an episode's aggregated variant list."""

    def sort(
        self,
        variants: Sequence[VideoVariant],
        preferences: Preferences,
    ) -> list[VideoVariant]:
        return rank_videos(variants, preferences)
