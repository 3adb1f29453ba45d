import logging
from typing import Optional

import requests

from concert_query.core.config import Settings
from concert_query.core.http import BaseHttpClient


class LyricsService(BaseHttpClient):
    """歌词查询（lyrics.ovh，无需认证）"""
    SERVICE_NAME = "lyrics"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        super().__init__(settings.LYRICS_BASE_URL, timeout=settings.HTTP_TIMEOUT, session=session)

    def fetch_lyrics(self, artist: str, title: str) -> Optional[str]:
        if not artist or not title:
            return None
        logging.debug(f"查询歌词: {artist} - {title}")
        data = self.get_json(f"{self.quote_segment(artist)}/{self.quote_segment(title)}") or {}
        lyrics = (data.get("lyrics") or "").strip()
        return lyrics or None
