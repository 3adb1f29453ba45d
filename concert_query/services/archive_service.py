import logging
from typing import Any, Dict, List, Optional

import requests

from concert_query.core.config import Settings
from concert_query.core.http import BaseHttpClient
from concert_query.models.music import LiveRecording

AUDIO_FORMATS = ("VBR MP3", "MP3", "64Kbps MP3", "Ogg Vorbis", "Flac", "24bit Flac")
SEARCH_FIELDS = ("identifier", "title", "date", "venue", "coverage")


def _first(value: Any) -> Optional[str]:
    # advancedsearch 的字段可能是字符串也可能是列表
    if isinstance(value, list):
        value = value[0] if value else None
    return str(value) if value else None


class ArchiveService(BaseHttpClient):
    """
    Internet Archive 现场录音查询（无需认证）
    """
    SERVICE_NAME = "archive"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        super().__init__(settings.ARCHIVE_BASE_URL, timeout=settings.HTTP_TIMEOUT, session=session)
        self.collection = settings.ARCHIVE_COLLECTION
        self.limit = settings.RESULT_LIMIT

    def details_url(self, identifier: str) -> str:
        return self.build_url(f"details/{self.quote_segment(identifier)}")

    def download_url(self, identifier: str, file_name: str) -> str:
        return self.build_url(
            f"download/{self.quote_segment(identifier)}/{self.quote_segment(file_name)}"
        )

    def search_live_recordings(self, artist: str, limit: Optional[int] = None) -> List[LiveRecording]:
        """
        按艺术家搜索现场录音，按日期倒序

        参数:
            artist: 艺术家名称
            limit: 结果数量上限
        """
        limit = min(limit or self.limit, self.limit)
        escaped = artist.replace('"', '\\"')
        params = [
            ("q", f'creator:"{escaped}" AND mediatype:{self.collection}'),
            *[("fl[]", field) for field in SEARCH_FIELDS],
            ("sort[]", "date desc"),
            ("rows", limit),
            ("page", 1),
            ("output", "json"),
        ]
        logging.info(f"搜索Internet Archive现场录音: {artist}")
        data = self.get_json("advancedsearch.php", params=params) or {}
        docs = (data.get("response") or {}).get("docs") or []

        recordings = []
        for doc in docs[:limit]:
            identifier = _first(doc.get("identifier"))
            if not identifier:
                continue
            recordings.append(LiveRecording(
                identifier=identifier,
                title=_first(doc.get("title")) or identifier,
                date=(_first(doc.get("date")) or "")[:10] or None,
                venue=_first(doc.get("venue")),
                coverage=_first(doc.get("coverage")),
                url=self.details_url(identifier),
            ))
        return recordings

    def first_audio_file(self, identifier: str) -> Optional[str]:
        """返回条目中第一个可播放音频文件的下载地址"""
        data = self.get_json(f"metadata/{self.quote_segment(identifier)}") or {}
        for item in data.get("files") or []:
            if item.get("format") in AUDIO_FORMATS and item.get("name"):
                return self.download_url(identifier, item["name"])
        return None
