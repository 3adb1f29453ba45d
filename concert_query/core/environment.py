import os
from enum import Enum
from functools import lru_cache
from pydantic import field_validator
from typing import Dict, Any, Optional

from concert_query.core.config import Settings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class DevelopmentSettings(Settings):
    """开发环境配置"""
    LOG_LEVEL: str = "DEBUG"

    # 开发环境特定配置
    DEBUG: bool = True


class TestingSettings(Settings):
    """测试环境配置"""
    # 测试时不写日志文件，也不缓存搜索结果
    LOG_FILE: Optional[str] = None
    SEARCH_CACHE_TTL: int = 0
    MUSICBRAINZ_MIN_INTERVAL: float = 0.0

    TESTING: bool = True


class ProductionSettings(Settings):
    """生产环境配置"""
    DEBUG: bool = False

    @field_validator("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET")
    @classmethod
    def spotify_credentials_must_be_set(cls, v: Optional[str]) -> str:
        if not v:
            raise ValueError("Spotify credentials must be set in production")
        return v


def get_environment() -> Environment:
    """读取 APP_ENV，未知的取值按开发环境处理"""
    try:
        return Environment(os.getenv("APP_ENV", Environment.DEVELOPMENT.value))
    except ValueError:
        return Environment.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    """
    获取当前环境的配置
    使用 APP_ENV 环境变量确定环境，默认为开发环境
    """
    environment = get_environment()

    settings_map: Dict[Environment, Any] = {
        Environment.DEVELOPMENT: DevelopmentSettings,
        Environment.TESTING: TestingSettings,
        Environment.PRODUCTION: ProductionSettings,
    }

    settings_class = settings_map[environment]
    return settings_class()
