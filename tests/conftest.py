"""测试公共夹具：测试配置、假的 HTTP 会话与 Spotify 数据"""
import os

os.environ["APP_ENV"] = "testing"

from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
import requests
from fastapi.testclient import TestClient

from concert_query.core.environment import TestingSettings


class FakeResponse:
    """模拟 requests.Response"""

    def __init__(self, status_code: int = 200, json_data: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """
    模拟 requests.Session，按调用顺序记录请求

    handler 接收 (method, url, kwargs) 返回 FakeResponse 或抛出异常
    """

    def __init__(self, handler: Callable[[str, str, Dict[str, Any]], FakeResponse]):
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return self.handler(method, url, kwargs)

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self.request("POST", url, **kwargs)


@pytest.fixture
def settings() -> TestingSettings:
    return TestingSettings(
        SPOTIFY_CLIENT_ID="client-id",
        SPOTIFY_CLIENT_SECRET="client-secret",
        LOG_FILE=None,
    )


def make_track(index: int, **overrides: Any) -> Dict[str, Any]:
    """构造一个 Spotify 曲目对象"""
    track = {
        "id": f"track{index}",
        "name": f"Song {index}",
        "duration_ms": 61000 + index * 1000,
        "explicit": index % 2 == 0,
        "preview_url": f"https://p.scdn.co/mp3-preview/{index}",
        "album": {
            "name": f"Album {index}",
            "images": [{"url": f"https://i.scdn.co/image/{index}", "height": 640, "width": 640}],
        },
        "artists": [{"id": "artist1", "name": "Radiohead"}],
        "external_urls": {"spotify": f"https://open.spotify.com/track/track{index}"},
        "external_ids": {"isrc": f"GBAYE970000{index}"},
    }
    track.update(overrides)
    return track


ARTIST = {
    "id": "artist1",
    "name": "Radiohead",
    "images": [{"url": "https://i.scdn.co/image/artist", "height": 640, "width": 640}],
    "genres": ["alternative rock", "art rock"],
    "followers": {"total": 9000000},
    "popularity": 80,
    "external_urls": {"spotify": "https://open.spotify.com/artist/artist1"},
}


@pytest.fixture
def spotify_client() -> MagicMock:
    """模拟 spotipy.Spotify 客户端，热门曲目返回 7 首"""
    client = MagicMock()
    client.search.side_effect = lambda q, type, limit: (
        {"artists": {"items": [ARTIST]}}
        if type == "artist"
        else {"tracks": {"items": [make_track(i) for i in range(limit)]}}
    )
    client.artist_top_tracks.return_value = {"tracks": [make_track(i) for i in range(7)]}
    client.audio_features.side_effect = lambda ids: [
        {"id": track_id, "energy": 0.5, "danceability": 0.6, "valence": 0.3, "tempo": 120.0, "key": 5, "mode": 1}
        for track_id in ids
    ]
    client.artist_related_artists.return_value = {
        "artists": [
            {"name": "Thom Yorke", "images": [], "external_urls": {"spotify": "https://open.spotify.com/artist/ty"}},
        ]
    }
    return client


@pytest.fixture
def app():
    from concert_query.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
