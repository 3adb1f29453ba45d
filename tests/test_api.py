from unittest.mock import AsyncMock, MagicMock

import pytest

from concert_query.core.deps import get_search_service
from concert_query.core.exceptions import MissingTokenError
from concert_query.core.overrides import override_with, setup_dependency_overrides
from concert_query.models.music import Credits, SearchResults, Track, TrackCredits


@pytest.fixture
def search_service(app) -> MagicMock:
    service = MagicMock()
    service.search = AsyncMock(return_value=SearchResults(
        query="creep",
        mode="track",
        tracks=[Track(title=f"Song {i}", duration="1:01") for i in range(5)],
    ))
    service.lookup_credits = AsyncMock(return_value=None)
    service.fetch_lyrics = AsyncMock(return_value=None)
    setup_dependency_overrides(app, {get_search_service: override_with(service)})
    return service


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_search_returns_tracks(client, search_service):
    response = client.get("/api/v1/search", params={"q": "creep", "mode": "track", "lyrics": "false"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    body = response.json()
    assert len(body["tracks"]) == 5
    assert body["tracks"][0]["audio_url"] == ""

    kwargs = search_service.search.await_args.kwargs
    assert kwargs["mode"] == "track"
    assert kwargs["options"].lyrics is False
    assert kwargs["options"].credits is True


def test_search_without_token_is_unauthorized(client, search_service):
    search_service.search.side_effect = MissingTokenError(
        "Spotify token not loaded. Call /api/spotify-token first."
    )

    response = client.get("/api/v1/search", params={"q": "radiohead"})

    assert response.status_code == 401
    assert "Spotify token not loaded" in response.json()["detail"]


def test_search_rejects_unknown_mode(client, search_service):
    response = client.get("/api/v1/search", params={"q": "radiohead", "mode": "album"})

    assert response.status_code == 422
    search_service.search.assert_not_called()


def test_search_requires_query(client, search_service):
    response = client.get("/api/v1/search", params={"q": ""})

    assert response.status_code == 422


def test_artist_search_without_bearer_header(client):
    """使用真实依赖时，artist 模式缺少令牌直接返回 401，不会发出外部请求"""
    response = client.get("/api/v1/search", params={"q": "radiohead", "mode": "artist"})

    assert response.status_code == 401


def test_lyrics_not_found_placeholder(client, search_service):
    response = client.get("/api/v1/lyrics", params={"artist": "Radiohead", "title": "Creep"})

    assert response.status_code == 200
    assert response.json() == {
        "artist": "Radiohead",
        "title": "Creep",
        "lyrics": "Lyrics not found",
        "found": False,
    }


def test_credits_not_found(client, search_service):
    response = client.get("/api/v1/tracks/XX0000000000/credits")

    assert response.status_code == 404


def test_credits_found(client, search_service):
    search_service.lookup_credits.return_value = TrackCredits(
        isrc="GBAYE9200070",
        credits=Credits(writers=["Thom Yorke"], publishers=["Warner Chappell"]),
    )

    response = client.get("/api/v1/tracks/GBAYE9200070/credits")

    assert response.status_code == 200
    assert response.json()["credits"]["writers"] == ["Thom Yorke"]
