from functools import lru_cache
from typing import Optional

from cachetools import TTLCache
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from concert_query.core.config import Settings
from concert_query.core.environment import get_settings
from concert_query.core.rate_limit import RateLimiter
from concert_query.services.archive_service import ArchiveService
from concert_query.services.lyrics_service import LyricsService
from concert_query.services.musicbrainz_service import MusicBrainzService
from concert_query.services.search_service import SearchService
from concert_query.services.spotify_service import SpotifyService
from concert_query.services.token_service import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_app_settings() -> Settings:
    return get_settings()


@lru_cache()
def get_search_cache() -> Optional[TTLCache]:
    """
    进程内共享的搜索结果缓存，SEARCH_CACHE_TTL 为 0 时不缓存
    """
    settings = get_settings()
    if settings.SEARCH_CACHE_TTL <= 0:
        return None
    return TTLCache(maxsize=settings.SEARCH_CACHE_SIZE, ttl=settings.SEARCH_CACHE_TTL)


@lru_cache()
def get_musicbrainz_rate_limiter() -> RateLimiter:
    # 所有请求共享同一个限速器
    return RateLimiter(get_settings().MUSICBRAINZ_MIN_INTERVAL)


async def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """
    从 Authorization: Bearer 头中读取 Spotify 访问令牌
    """
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


async def get_token_service(
    settings: Settings = Depends(get_app_settings)
) -> TokenService:
    """
    获取令牌中转服务实例
    """
    return TokenService(settings)


async def get_search_service(
    access_token: Optional[str] = Depends(get_access_token),
    settings: Settings = Depends(get_app_settings)
) -> SearchService:
    """
    获取搜索服务实例

    Spotify 服务延迟创建，只有需要调用 Spotify 的搜索模式才要求提供令牌
    """
    return SearchService(
        settings=settings,
        spotify_factory=lambda: SpotifyService(access_token, settings),
        musicbrainz=MusicBrainzService(settings),
        musicbrainz_limiter=get_musicbrainz_rate_limiter(),
        archive=ArchiveService(settings),
        lyrics=LyricsService(settings),
        cache=get_search_cache(),
    )
