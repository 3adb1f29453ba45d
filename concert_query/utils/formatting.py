from typing import List, Optional

from concert_query.models.music import (
    Concert, LiveRecording, Track,
    NOT_AVAILABLE, LYRICS_PLACEHOLDER, PREVIEW_PLACEHOLDER,
)


def format_duration(duration_ms: Optional[float]) -> str:
    """
    将毫秒转换为 分:秒，秒数补零

    例如 61000 -> "1:01"
    """
    if not duration_ms or duration_ms < 0:
        return "0:00"
    duration_ms = int(duration_ms)
    minutes = duration_ms // 60000
    seconds = (duration_ms % 60000) // 1000
    return f"{minutes}:{seconds:02d}"


def format_number(value: int) -> str:
    return f"{value:,}"


def render_track(track: Track, index: int) -> List[str]:
    title = f"{index}. {track.title}"
    if track.explicit:
        title += " [Explicit]"
    lines = [title, f"   Duration: {track.duration}"]

    if track.artists:
        lines.append(f"   Artists: {', '.join(track.artists)}")
    if track.album:
        lines.append(f"   Album: {track.album}")
    if track.spotify_url:
        lines.append(f"   Spotify: {track.spotify_url}")
    lines.append(f"   Preview: {track.audio_url or PREVIEW_PLACEHOLDER}")
    if track.isrc:
        lines.append(f"   ISRC: {track.isrc}")

    if track.audio_features:
        features = track.audio_features
        lines.append(
            "   Features: "
            f"energy={features.energy} danceability={features.danceability} "
            f"valence={features.valence} tempo={features.tempo}"
        )
    if track.release:
        release = track.release
        details = ", ".join(p for p in (release.date, release.country, release.label) if p)
        lines.append(f"   Release: {release.title}" + (f" ({details})" if details else ""))
    if track.credits:
        lines.append(f"   Writers: {', '.join(track.credits.writers) or NOT_AVAILABLE}")
        lines.append(f"   Publishers: {', '.join(track.credits.publishers) or NOT_AVAILABLE}")
    if track.lyrics is not None:
        lyrics = track.lyrics or LYRICS_PLACEHOLDER
        first_line = lyrics.strip().splitlines()[0] if lyrics.strip() else LYRICS_PLACEHOLDER
        lines.append(f"   Lyrics: {first_line}")
    return lines


def render_tracks(tracks: List[Track]) -> str:
    lines = []
    for i, track in enumerate(tracks, start=1):
        lines.extend(render_track(track, i))
    return "\n".join(lines)


def render_live(recordings: List[LiveRecording]) -> str:
    lines = []
    for recording in recordings:
        where = recording.venue or recording.coverage or "Unknown venue"
        lines.append(f"- {recording.date or 'Unknown date'} - {where}: {recording.title}")
        lines.append(f"  {recording.url}")
        if recording.audio_url:
            lines.append(f"  Stream: {recording.audio_url}")
    return "\n".join(lines)


def render_concert(concert: Concert) -> str:
    """把一个演出视图渲染成文本列表"""
    info = concert.artist_info
    lines = [
        info.name,
        f"Genres: {', '.join(info.genres) or NOT_AVAILABLE}",
        f"Followers: {format_number(info.followers)}",
        f"Popularity: {info.popularity}/100",
    ]
    if info.spotify_url:
        lines.append(f"Open on Spotify: {info.spotify_url}")
    if info.musicbrainz:
        mb = info.musicbrainz
        origin = ", ".join(p for p in (mb.type, mb.country, mb.begin) if p)
        lines.append(f"MusicBrainz: {mb.mbid}" + (f" ({origin})" if origin else ""))
    if info.related_artists:
        lines.append(f"Related: {', '.join(a.name for a in info.related_artists)}")

    lines.append("")
    lines.append(f"{concert.date} - {concert.venue}")
    if concert.setlist:
        lines.append(render_tracks(concert.setlist))

    if concert.live_recordings:
        lines.append("")
        lines.append("Archived live recordings:")
        lines.append(render_live(concert.live_recordings))
    return "\n".join(lines)
