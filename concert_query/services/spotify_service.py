import logging
from typing import Any, Dict, List, Optional

from spotipy import Spotify
from spotipy.exceptions import SpotifyException

from concert_query.core.config import Settings
from concert_query.core.exceptions import MissingTokenError, UpstreamError
from concert_query.models.music import ArtistInfo, AudioFeatures, RelatedArtist, Track
from concert_query.utils.formatting import format_duration


def first_image_url(images: Optional[List[Dict[str, Any]]]) -> str:
    if images:
        return images[0].get("url") or ""
    return ""


class SpotifyService:
    """
    Spotify 曲库查询，使用调用方提供的访问令牌
    """

    def __init__(self, access_token: Optional[str], settings: Settings, client: Optional[Spotify] = None):
        """
        初始化 Spotify 服务

        参数:
            access_token: 通过令牌中转接口获得的 Bearer 令牌
            settings: 应用配置
            client: 可选的 spotipy 客户端（测试时可替换）
        """
        if client is None:
            if not access_token:
                raise MissingTokenError("Spotify token not loaded. Call /api/spotify-token first.")
            client = Spotify(auth=access_token, requests_timeout=settings.HTTP_TIMEOUT, retries=0)
        self.client = client
        self.access_token = access_token
        self.market = settings.SPOTIFY_MARKET
        self.limit = settings.RESULT_LIMIT

    def _call(self, method: str, *args, **kwargs) -> Any:
        try:
            return getattr(self.client, method)(*args, **kwargs)
        except SpotifyException as e:
            raise UpstreamError("spotify", e.msg, status_code=e.http_status) from e

    def search_artist(self, query: str) -> Optional[Dict[str, Any]]:
        """按名称搜索艺术家，只取第一个结果"""
        logging.info(f"搜索Spotify艺术家: {query}")
        results = self._call("search", q=query, type="artist", limit=1)
        items = (results or {}).get("artists", {}).get("items") or []
        return items[0] if items else None

    def artist_top_tracks(self, artist_id: str) -> List[Dict[str, Any]]:
        results = self._call("artist_top_tracks", artist_id, country=self.market)
        return ((results or {}).get("tracks") or [])[:self.limit]

    def search_tracks(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        limit = min(limit or self.limit, self.limit)
        logging.info(f"搜索Spotify曲目: {query}")
        results = self._call("search", q=query, type="track", limit=limit)
        return ((results or {}).get("tracks", {}).get("items") or [])[:limit]

    def audio_features(self, track_ids: List[str]) -> Dict[str, AudioFeatures]:
        """
        批量获取音频特征

        返回:
            Dict: 曲目ID -> 音频特征，没有特征的曲目不在结果中
        """
        if not track_ids:
            return {}
        features = self._call("audio_features", track_ids) or []
        return {
            item["id"]: AudioFeatures.model_validate(item)
            for item in features
            if item and item.get("id")
        }

    def related_artists(self, artist_id: str) -> List[RelatedArtist]:
        results = self._call("artist_related_artists", artist_id)
        return [
            RelatedArtist(
                name=item.get("name") or "",
                image=first_image_url(item.get("images")),
                spotify_url=(item.get("external_urls") or {}).get("spotify") or "",
            )
            for item in ((results or {}).get("artists") or [])[:self.limit]
        ]

    @staticmethod
    def to_track(item: Dict[str, Any]) -> Track:
        """把 Spotify 曲目对象转换成展示模型，缺失字段使用占位值"""
        album = item.get("album") or {}
        return Track(
            title=item.get("name") or "",
            duration=format_duration(item.get("duration_ms")),
            explicit=bool(item.get("explicit")),
            audio_url=item.get("preview_url") or "",
            album_art=first_image_url(album.get("images")),
            album=album.get("name"),
            artists=[a.get("name") for a in item.get("artists") or [] if a.get("name")],
            spotify_id=item.get("id"),
            spotify_url=(item.get("external_urls") or {}).get("spotify") or "",
            isrc=(item.get("external_ids") or {}).get("isrc"),
        )

    @staticmethod
    def to_artist_info(item: Dict[str, Any]) -> ArtistInfo:
        return ArtistInfo(
            name=item.get("name") or "",
            image=first_image_url(item.get("images")),
            genres=item.get("genres") or [],
            followers=(item.get("followers") or {}).get("total") or 0,
            popularity=item.get("popularity") or 0,
            spotify_url=(item.get("external_urls") or {}).get("spotify") or "",
        )
