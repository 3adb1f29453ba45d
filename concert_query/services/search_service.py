import asyncio
import hashlib
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from cachetools import TTLCache

from concert_query.core.config import Settings
from concert_query.core.rate_limit import RateLimiter
from concert_query.models.music import (
    Concert, EnrichmentOptions, LiveRecording, ReleaseInfo, SearchResults, Track, TrackCredits,
    LYRICS_PLACEHOLDER,
)
from concert_query.services.archive_service import ArchiveService
from concert_query.services.lyrics_service import LyricsService
from concert_query.services.musicbrainz_service import MusicBrainzService
from concert_query.services.spotify_service import SpotifyService

SEARCH_MODES = ("artist", "track", "recording", "live")
SPOTIFY_MODES = ("artist", "track")


class SearchService:
    """
    搜索与补充查询

    一次搜索先按顺序调用主接口，再并发执行各项补充查询。
    每个补充分支自行捕获异常、记录日志并以空值代替，保证其余结果照常返回。
    """

    def __init__(self, settings: Settings,
                 spotify_factory: Callable[[], SpotifyService],
                 musicbrainz: MusicBrainzService,
                 archive: ArchiveService,
                 lyrics: LyricsService,
                 cache: Optional[TTLCache] = None,
                 musicbrainz_limiter: Optional[RateLimiter] = None):
        """
        初始化搜索服务

        参数:
            settings: 应用配置
            spotify_factory: 创建 Spotify 服务的函数，只在需要时调用（缺少令牌时会抛出 MissingTokenError）
            musicbrainz: MusicBrainz 服务
            archive: Internet Archive 服务
            lyrics: 歌词服务
            cache: 可选的内存缓存，用于减少 API 调用
            musicbrainz_limiter: MusicBrainz 请求间隔控制，多个请求共享同一个实例
        """
        self.settings = settings
        self.spotify_factory = spotify_factory
        self.musicbrainz = musicbrainz
        self.archive = archive
        self.lyrics = lyrics
        self.search_cache = cache
        self.musicbrainz_limiter = musicbrainz_limiter or RateLimiter(settings.MUSICBRAINZ_MIN_INTERVAL)
        self.limit = settings.RESULT_LIMIT

    async def _safe(self, label: str, func: Callable, *args: Any, default: Any = None) -> Any:
        """在线程中执行阻塞调用，失败时记录日志并返回默认值"""
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            logging.error(f"{label}失败: {e}")
            return default

    async def _musicbrainz(self, label: str, func: Callable, *args: Any, default: Any = None) -> Any:
        """先在事件循环中等待请求间隔，再把 MusicBrainz 调用交给线程执行"""
        await self.musicbrainz_limiter.wait()
        return await self._safe(label, func, *args, default=default)

    async def search(self, query: str, mode: str = "artist", limit: Optional[int] = None,
                     options: Optional[EnrichmentOptions] = None) -> SearchResults:
        """
        执行一次搜索

        参数:
            query: 搜索关键词
            mode: 搜索模式 artist / track / recording / live
            limit: 结果数量上限，不超过 RESULT_LIMIT
            options: 补充查询开关

        返回:
            SearchResults: 搜索结果
        """
        if mode not in SEARCH_MODES:
            raise ValueError(f"不支持的搜索模式: {mode}")
        limit = min(limit or self.limit, self.limit)
        options = options or EnrichmentOptions()

        # 需要 Spotify 的模式先创建客户端，缺少令牌时不能被缓存绕过
        spotify = self.spotify_factory() if mode in SPOTIFY_MODES else None

        cache_key = (mode, query.strip().lower(), limit, options.cache_key(), self._token_digest(spotify))
        if self.search_cache is not None and cache_key in self.search_cache:
            logging.info(f"使用缓存的搜索结果: {query}")
            return self.search_cache[cache_key]

        if mode == "artist":
            results = await self.search_artist(spotify, query, limit, options)
        elif mode == "track":
            results = await self.search_tracks(spotify, query, limit, options)
        elif mode == "recording":
            results = await self.search_recordings(query, limit, options)
        else:
            results = await self.search_live(query, limit)

        # 只缓存完整成功的结果
        if self.search_cache is not None and not results.message and not results.partial:
            self.search_cache[cache_key] = results
        return results

    @staticmethod
    def _token_digest(spotify: Optional[SpotifyService]) -> Optional[str]:
        token = getattr(spotify, "access_token", None)
        if not token:
            return None
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    async def search_artist(self, spotify: SpotifyService, query: str, limit: int,
                            options: EnrichmentOptions) -> SearchResults:
        """艺术家模式：找到艺术家后以其热门曲目组成一场演出"""
        results = SearchResults(query=query, mode="artist")

        artist = await self._safe("Spotify艺术家搜索", spotify.search_artist, query, default=False)
        if artist is False:
            results.message = "Artist search failed"
            return results
        if not artist:
            logging.error(f"Spotify上未找到艺术家: {query}")
            results.message = "Artist not found on Spotify"
            return results

        artist_id = artist.get("id")
        top_tracks = await self._safe("获取热门曲目", spotify.artist_top_tracks, artist_id)
        if top_tracks is None:
            # 仍然返回艺术家信息，但曲目不完整的结果不进缓存
            results.partial = True
            top_tracks = []

        artist_info = SpotifyService.to_artist_info(artist)
        setlist, related, mb_artist, live = await asyncio.gather(
            self.enrich_tracks(spotify, top_tracks[:limit], options),
            self._optional(options.related, "获取相关艺术家", spotify.related_artists, artist_id, default=[]),
            self._musicbrainz("MusicBrainz艺术家搜索", self.musicbrainz.search_artist, artist_info.name),
            self._optional(options.live, "搜索现场录音", self.fetch_live, artist_info.name, limit, default=[]),
        )
        artist_info.related_artists = related
        artist_info.musicbrainz = mb_artist

        results.concerts = [Concert(
            date=date.today().isoformat(),
            venue=f"{artist_info.name} Top Tracks",
            setlist=setlist,
            artist_info=artist_info,
            live_recordings=live,
        )]
        return results

    async def search_tracks(self, spotify: SpotifyService, query: str, limit: int,
                            options: EnrichmentOptions) -> SearchResults:
        results = SearchResults(query=query, mode="track")

        items = await self._safe("Spotify曲目搜索", spotify.search_tracks, query, limit)
        if items is None:
            results.message = "Track search failed"
            return results

        results.tracks = await self.enrich_tracks(spotify, items[:limit], options)
        if not results.tracks:
            results.message = "No tracks found"
        return results

    async def search_recordings(self, query: str, limit: int, options: EnrichmentOptions) -> SearchResults:
        """录音模式：只查询 MusicBrainz，不需要 Spotify 令牌"""
        results = SearchResults(query=query, mode="recording")

        recordings = await self._musicbrainz("MusicBrainz录音搜索", self.musicbrainz.search_recordings, query, limit)
        if recordings is None:
            results.message = "Recording search failed"
            return results

        tracks = []
        for recording in recordings[:limit]:
            track = MusicBrainzService.recording_to_track(recording)
            tracks.append((track, recording.get("id")))

        await asyncio.gather(*(
            self._enrich_recording(track, recording_id, options) for track, recording_id in tracks
        ))
        results.tracks = [track for track, _ in tracks]
        if not results.tracks:
            results.message = "No recordings found"
        return results

    async def search_live(self, query: str, limit: int) -> SearchResults:
        results = SearchResults(query=query, mode="live")
        recordings = await self._safe("搜索现场录音", self.fetch_live, query, limit)
        if recordings is None:
            results.message = "Live recording search failed"
            return results
        results.live_recordings = recordings
        if not recordings:
            results.message = "No live recordings found"
        return results

    def fetch_live(self, artist: str, limit: int) -> List[LiveRecording]:
        """查询现场录音并为每条录音找到可播放的音频文件"""
        recordings = self.archive.search_live_recordings(artist, limit)
        for recording in recordings:
            try:
                recording.audio_url = self.archive.first_audio_file(recording.identifier)
            except Exception as e:
                logging.warning(f"获取录音文件列表失败 {recording.identifier}: {e}")
        return recordings

    async def _optional(self, enabled: bool, label: str, func: Callable, *args: Any, default: Any = None) -> Any:
        if not enabled:
            return default
        return await self._safe(label, func, *args, default=default)

    async def enrich_tracks(self, spotify: SpotifyService, items: List[Dict[str, Any]],
                            options: EnrichmentOptions) -> List[Track]:
        """
        把 Spotify 曲目转换为展示模型，并并发执行补充查询

        参数:
            spotify: Spotify 服务
            items: Spotify 原始曲目对象
            options: 补充查询开关
        """
        tracks = [SpotifyService.to_track(item) for item in items]
        track_ids = [t.spotify_id for t in tracks if t.spotify_id]

        features, _ = await asyncio.gather(
            self._optional(options.audio_features, "获取音频特征", spotify.audio_features, track_ids, default={}),
            asyncio.gather(*(self._enrich_track(track, options) for track in tracks)),
        )
        for track in tracks:
            track.audio_features = (features or {}).get(track.spotify_id)
        return tracks

    async def _enrich_track(self, track: Track, options: EnrichmentOptions) -> None:
        await asyncio.gather(
            self._attach_credits(track, options),
            self._attach_lyrics(track, options),
        )

    async def _enrich_recording(self, track: Track, recording_id: Optional[str],
                                options: EnrichmentOptions) -> None:
        jobs = [self._attach_lyrics(track, options)]
        if options.credits and recording_id:
            jobs.append(self._attach_recording_credits(track, recording_id))
        await asyncio.gather(*jobs)

    async def _attach_recording_credits(self, track: Track, recording_id: str) -> None:
        track.credits = await self._musicbrainz("获取词曲版权信息", self.musicbrainz.lookup_credits, recording_id)

    async def _attach_credits(self, track: Track, options: EnrichmentOptions) -> None:
        if not options.credits or not track.isrc:
            return
        details = await self.lookup_credits(track.isrc)
        if details:
            track.credits = details.credits
            track.release = details.release

    async def _attach_lyrics(self, track: Track, options: EnrichmentOptions) -> None:
        if not options.lyrics:
            return
        artist = track.artists[0] if track.artists else ""
        lyrics = await self._safe("获取歌词", self.lyrics.fetch_lyrics, artist, track.title)
        track.lyrics = lyrics or LYRICS_PLACEHOLDER

    async def lookup_credits(self, isrc: str) -> Optional[TrackCredits]:
        """
        按 ISRC 查询录音，再并发查询作品关系和发行信息

        返回:
            TrackCredits: 未找到录音时返回 None
        """
        recording = await self._musicbrainz("ISRC查询", self.musicbrainz.lookup_isrc, isrc)
        if not recording or not recording.get("id"):
            return None

        releases = recording.get("releases") or []
        release_id = releases[0].get("id") if releases else None

        credits, release = await asyncio.gather(
            self._musicbrainz("获取词曲版权信息", self.musicbrainz.lookup_credits, recording["id"]),
            self._lookup_release(release_id),
        )
        if credits is None:
            return None
        return TrackCredits(isrc=isrc, credits=credits, release=release)

    async def _lookup_release(self, release_id: Optional[str]) -> Optional[ReleaseInfo]:
        if not release_id:
            return None
        return await self._musicbrainz("获取发行信息", self.musicbrainz.lookup_release, release_id)

    async def fetch_lyrics(self, artist: str, title: str) -> Optional[str]:
        return await self._safe("获取歌词", self.lyrics.fetch_lyrics, artist, title)
