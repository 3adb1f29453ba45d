from typing import List, Optional
from pydantic import BaseModel

PREVIEW_PLACEHOLDER = "No preview available"
NOT_AVAILABLE = "N/A"
LYRICS_PLACEHOLDER = "Lyrics not found"


class AudioFeatures(BaseModel):
    """Spotify 音频特征"""
    danceability: Optional[float] = None
    energy: Optional[float] = None
    valence: Optional[float] = None
    tempo: Optional[float] = None
    acousticness: Optional[float] = None
    instrumentalness: Optional[float] = None
    liveness: Optional[float] = None
    speechiness: Optional[float] = None
    loudness: Optional[float] = None
    key: Optional[int] = None
    mode: Optional[int] = None


class ReleaseInfo(BaseModel):
    """MusicBrainz 发行信息"""
    mbid: str
    title: str
    date: Optional[str] = None
    country: Optional[str] = None
    status: Optional[str] = None
    label: Optional[str] = None


class Credits(BaseModel):
    """词曲作者与版权商（来自 MusicBrainz 作品关系）"""
    recording_mbid: Optional[str] = None
    writers: List[str] = []
    publishers: List[str] = []


class LiveRecording(BaseModel):
    """Internet Archive 现场录音"""
    identifier: str
    title: str
    date: Optional[str] = None
    venue: Optional[str] = None
    coverage: Optional[str] = None
    url: str
    audio_url: Optional[str] = None


class RelatedArtist(BaseModel):
    """相关艺术家"""
    name: str
    image: str = ""
    spotify_url: str = ""


class MusicBrainzArtist(BaseModel):
    """MusicBrainz 艺术家资料"""
    mbid: str
    name: str
    country: Optional[str] = None
    type: Optional[str] = None
    disambiguation: Optional[str] = None
    begin: Optional[str] = None
    end: Optional[str] = None


class Track(BaseModel):
    """展示用的曲目"""
    title: str
    duration: str
    explicit: bool = False
    audio_url: str = ""
    album_art: str = ""
    album: Optional[str] = None
    artists: List[str] = []
    spotify_id: Optional[str] = None
    spotify_url: str = ""
    isrc: Optional[str] = None

    # 以下字段仅在对应的补充查询成功时存在
    audio_features: Optional[AudioFeatures] = None
    release: Optional[ReleaseInfo] = None
    credits: Optional[Credits] = None
    lyrics: Optional[str] = None


class ArtistInfo(BaseModel):
    """展示用的艺术家信息"""
    name: str
    image: str = ""
    genres: List[str] = []
    followers: int = 0
    popularity: int = 0
    spotify_url: str = ""
    musicbrainz: Optional[MusicBrainzArtist] = None
    related_artists: List[RelatedArtist] = []


class Concert(BaseModel):
    """以热门曲目组成的"演出"视图"""
    date: str
    venue: str
    setlist: List[Track] = []
    artist_info: ArtistInfo
    live_recordings: List[LiveRecording] = []


class SearchResults(BaseModel):
    """搜索结果"""
    query: str
    mode: str
    message: Optional[str] = None
    # 部分补充失败时为 True，这类结果不会被缓存
    partial: bool = False
    concerts: List[Concert] = []
    tracks: List[Track] = []
    live_recordings: List[LiveRecording] = []


class TrackCredits(BaseModel):
    """按 ISRC 查询的版权信息"""
    isrc: str
    credits: Credits
    release: Optional[ReleaseInfo] = None


class LyricsResult(BaseModel):
    """歌词查询结果"""
    artist: str
    title: str
    lyrics: str
    found: bool


class EnrichmentOptions(BaseModel):
    """补充查询开关"""
    audio_features: bool = True
    credits: bool = True
    lyrics: bool = True
    live: bool = True
    related: bool = True

    def cache_key(self) -> tuple:
        return tuple(sorted(self.model_dump().items()))
