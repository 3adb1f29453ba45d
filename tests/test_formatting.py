import pytest

from concert_query.models.music import (
    ArtistInfo, Concert, Credits, LiveRecording, Track,
    LYRICS_PLACEHOLDER, PREVIEW_PLACEHOLDER,
)
from concert_query.utils.formatting import (
    format_duration, render_concert, render_live, render_tracks,
)


@pytest.mark.parametrize(
    ("duration_ms", "expected"),
    [
        (61000, "1:01"),
        (0, "0:00"),
        (None, "0:00"),
        (59999, "0:59"),
        (60000, "1:00"),
        (245000, "4:05"),
        (3600000, "60:00"),
        (61000.0, "1:01"),
        (245999.9, "4:05"),
    ],
)
def test_format_duration(duration_ms, expected):
    assert format_duration(duration_ms) == expected


def test_render_track_without_preview_uses_placeholder():
    track = Track(title="Creep", duration="3:58")
    output = render_tracks([track])

    assert "1. Creep" in output
    assert f"Preview: {PREVIEW_PLACEHOLDER}" in output


def test_render_track_marks_explicit_and_lyrics_placeholder():
    track = Track(title="Song", duration="1:01", explicit=True, lyrics="")
    output = render_tracks([track])

    assert "[Explicit]" in output
    assert f"Lyrics: {LYRICS_PLACEHOLDER}" in output


def test_render_credits_without_names_shows_na():
    track = Track(title="Song", duration="1:01", credits=Credits(writers=["Thom Yorke"]))
    output = render_tracks([track])

    assert "Writers: Thom Yorke" in output
    assert "Publishers: N/A" in output


def test_render_concert_lists_every_track():
    setlist = [Track(title=f"Song {i}", duration="1:00") for i in range(5)]
    concert = Concert(
        date="2024-01-01",
        venue="Radiohead Top Tracks",
        setlist=setlist,
        artist_info=ArtistInfo(name="Radiohead", followers=1234567, popularity=80),
    )
    output = render_concert(concert)

    assert "Genres: N/A" in output
    assert "Followers: 1,234,567" in output
    assert "Popularity: 80/100" in output
    assert "2024-01-01 - Radiohead Top Tracks" in output
    for i in range(5):
        assert f"{i + 1}. Song {i}" in output
    assert "6. " not in output


def test_render_live_falls_back_to_coverage():
    recording = LiveRecording(
        identifier="rh1997-05-01",
        title="Radiohead Live",
        date="1997-05-01",
        coverage="Boston, MA",
        url="https://archive.org/details/rh1997-05-01",
    )
    output = render_live([recording])

    assert "1997-05-01 - Boston, MA: Radiohead Live" in output
    assert "Stream:" not in output
