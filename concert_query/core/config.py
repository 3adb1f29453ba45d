from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    应用配置，从环境变量和 .env 文件加载
    """
    # API 配置
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "concert-query-server"
    PORT: int = 8000
    HOST: str = "0.0.0.0"

    # CORS 配置（浏览器端需要直接调用令牌中转接口）
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Spotify API 配置
    SPOTIFY_CLIENT_ID: Optional[str] = None
    SPOTIFY_CLIENT_SECRET: Optional[str] = None
    SPOTIFY_TOKEN_URL: str = "https://accounts.spotify.com/api/token"
    SPOTIFY_MARKET: str = "US"

    # 每种结果的数量上限
    RESULT_LIMIT: int = 5

    # MusicBrainz 配置
    MUSICBRAINZ_BASE_URL: str = "https://musicbrainz.org/ws/2"
    MUSICBRAINZ_USER_AGENT: str = "concert-query-server/0.1 ( concert-query@example.com )"
    MUSICBRAINZ_MIN_INTERVAL: float = 1.0

    # Internet Archive 配置
    ARCHIVE_BASE_URL: str = "https://archive.org"
    ARCHIVE_COLLECTION: str = "etree"

    # 歌词接口
    LYRICS_BASE_URL: str = "https://api.lyrics.ovh/v1"

    # 外部请求超时（秒）
    HTTP_TIMEOUT: float = 10.0

    # 内存搜索缓存
    SEARCH_CACHE_TTL: int = 600
    SEARCH_CACHE_SIZE: int = 100

    @field_validator("RESULT_LIMIT", "SEARCH_CACHE_SIZE")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"{v} 必须大于 0")
        return v

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/concert-query-server.log"

    class Config:
        case_sensitive = True
        env_file = ".env"
