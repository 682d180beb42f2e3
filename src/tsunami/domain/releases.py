"""Resolve playlists into display releases and select subsets of them."""

from __future__ import annotations

import mimetypes
from typing import TYPE_CHECKING

from tsunami.domain.model import Release, ReleaseTrack

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from tsunami.domain.context import ProfileCache
    from tsunami.domain.ingest.engagement import EngagementTallies
    from tsunami.domain.model import Playlist, Track

DEFAULT_AUDIO_TYPE = "audio/mpeg"


def audio_type_for(audio_format: str | None) -> str:
    if not audio_format:
        return DEFAULT_AUDIO_TYPE
    guessed, _ = mimetypes.guess_type(f"track.{audio_format.lower().lstrip('.')}")
    return guessed or DEFAULT_AUDIO_TYPE


def index_tracks(tracks: Iterable[Track]) -> dict[str, Track]:
    """Map ``author:identifier`` keys to tracks."""

    return {track.key: track for track in tracks}


def _release_track(track: Track) -> ReleaseTrack:
    return ReleaseTrack(
        title=track.title,
        audio_url=track.audio_url,
        identifier=track.identifier,
        author_id=track.author_id,
        global_id=track.global_id,
        duration=track.duration,
        explicit=track.explicit,
        language=track.language,
        image_url=track.image_url,
        audio_type=audio_type_for(track.audio_format),
    )


def playlist_to_release(
    playlist: Playlist,
    tracks: Mapping[str, Track],
    *,
    tallies: EngagementTallies | None = None,
    profiles: ProfileCache | None = None,
) -> Release:
    """Project ``playlist`` for display.

    References missing from ``tracks`` become placeholder entries titled
    ``Track <n>`` with an empty audio URL so the release keeps its shape.
    """

    entries: list[ReleaseTrack] = []
    for position, reference in enumerate(playlist.tracks, start=1):
        track = tracks.get(reference.key)
        if track is not None:
            entries.append(_release_track(track))
            continue
        entries.append(
            ReleaseTrack(
                title=f"Track {position}",
                audio_url="",
                identifier=reference.identifier,
                author_id=reference.author_id,
            )
        )

    total_duration = sum(entry.duration or 0 for entry in entries)
    tally = (
        tallies.for_record(playlist.global_id, playlist.coordinate)
        if tallies is not None
        else None
    )
    profile = profiles.get(playlist.author_id) if profiles is not None else None
    return Release(
        global_id=playlist.global_id,
        author_id=playlist.author_id,
        identifier=playlist.identifier,
        title=playlist.title,
        created_at=playlist.created_at,
        tracks=tuple(entries),
        description=playlist.description,
        image_url=playlist.image_url,
        tags=playlist.categories,
        total_duration=total_duration or None,
        zap_count=tally.zap_count if tally else 0,
        total_sats=tally.zap_amount if tally else 0,
        comment_count=tally.comment_count if tally else 0,
        artist_name=profile.display if profile else None,
        artist_image=profile.picture if profile else None,
    )


def sort_releases(releases: Iterable[Release]) -> list[Release]:
    """Newest first."""

    return sorted(releases, key=lambda release: release.created_at, reverse=True)


def build_releases(
    playlists: Iterable[Playlist],
    tracks: Iterable[Track],
    *,
    tallies: EngagementTallies | None = None,
    profiles: ProfileCache | None = None,
) -> list[Release]:
    index = index_tracks(tracks)
    return sort_releases(
        playlist_to_release(playlist, index, tallies=tallies, profiles=profiles)
        for playlist in playlists
    )


def latest_release(releases: Sequence[Release], *, require_image: bool = False) -> Release | None:
    candidates = [release for release in releases if release.image_url or not require_image]
    if not candidates:
        return None
    latest = candidates[0]
    for release in candidates[1:]:
        if release.created_at > latest.created_at:
            latest = release
    return latest

