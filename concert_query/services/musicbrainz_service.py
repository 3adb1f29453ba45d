import logging
from typing import Any, Dict, List, Optional

import requests

from concert_query.core.config import Settings
from concert_query.core.http import BaseHttpClient
from concert_query.models.music import Credits, MusicBrainzArtist, ReleaseInfo, Track
from concert_query.utils.formatting import format_duration

# 作品关系中视为词曲作者的类型
WRITER_RELATION_TYPES = ("composer", "lyricist", "writer")
PUBLISHER_RELATION_TYPES = ("publishing",)


def _append_unique(names: List[str], name: Optional[str]) -> None:
    if name and name not in names:
        names.append(name)


def parse_credits(recording: Dict[str, Any]) -> Credits:
    """
    从录音的作品关系中提取词曲作者和版权商

    参数:
        recording: 带有 work-level-rels 的 MusicBrainz 录音对象

    返回:
        Credits: 去重后按出现顺序排列
    """
    credits = Credits(recording_mbid=recording.get("id"))
    for relation in recording.get("relations") or []:
        if relation.get("target-type") != "work":
            continue
        work = relation.get("work") or {}
        for work_rel in work.get("relations") or []:
            rel_type = work_rel.get("type")
            if work_rel.get("target-type") == "artist" and rel_type in WRITER_RELATION_TYPES:
                _append_unique(credits.writers, (work_rel.get("artist") or {}).get("name"))
            elif work_rel.get("target-type") == "label" and rel_type in PUBLISHER_RELATION_TYPES:
                _append_unique(credits.publishers, (work_rel.get("label") or {}).get("name"))
    return credits


def parse_release(release: Dict[str, Any]) -> ReleaseInfo:
    label = None
    for info in release.get("label-info") or []:
        label = (info.get("label") or {}).get("name")
        if label:
            break
    return ReleaseInfo(
        mbid=release.get("id") or "",
        title=release.get("title") or "",
        date=release.get("date") or None,
        country=release.get("country") or None,
        status=release.get("status") or None,
        label=label,
    )


class MusicBrainzService(BaseHttpClient):
    """
    MusicBrainz WS/2 查询，每个请求都带上标识身份的 User-Agent
    """
    SERVICE_NAME = "musicbrainz"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        super().__init__(
            settings.MUSICBRAINZ_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
            session=session,
            headers={"User-Agent": settings.MUSICBRAINZ_USER_AGENT},
        )
        self.limit = settings.RESULT_LIMIT

    def _get(self, endpoint: str, **params: Any) -> Dict[str, Any]:
        params["fmt"] = "json"
        return self.get_json(endpoint, params=params) or {}

    def search_recordings(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        limit = min(limit or self.limit, self.limit)
        logging.info(f"搜索MusicBrainz录音: {query}")
        data = self._get("recording", query=query, limit=limit)
        return (data.get("recordings") or [])[:limit]

    def search_artist(self, query: str) -> Optional[MusicBrainzArtist]:
        data = self._get("artist", query=query, limit=1)
        artists = data.get("artists") or []
        if not artists:
            return None
        artist = artists[0]
        life_span = artist.get("life-span") or {}
        return MusicBrainzArtist(
            mbid=artist.get("id") or "",
            name=artist.get("name") or "",
            country=artist.get("country"),
            type=artist.get("type"),
            disambiguation=artist.get("disambiguation") or None,
            begin=life_span.get("begin"),
            end=life_span.get("end"),
        )

    def lookup_isrc(self, isrc: str) -> Optional[Dict[str, Any]]:
        """按 ISRC 查找录音，返回第一个录音"""
        data = self._get(f"isrc/{self.quote_segment(isrc)}", inc="releases")
        recordings = data.get("recordings") or []
        return recordings[0] if recordings else None

    def lookup_release(self, release_mbid: str) -> ReleaseInfo:
        data = self._get(f"release/{self.quote_segment(release_mbid)}", inc="labels")
        return parse_release(data)

    def lookup_credits(self, recording_mbid: str) -> Credits:
        data = self._get(
            f"recording/{self.quote_segment(recording_mbid)}",
            inc="work-rels+work-level-rels+artist-rels+label-rels",
        )
        return parse_credits(data)

    @staticmethod
    def recording_to_track(recording: Dict[str, Any]) -> Track:
        """把 MusicBrainz 录音转换成展示模型"""
        releases = recording.get("releases") or []
        isrcs = recording.get("isrcs") or []
        artists = [
            credit.get("name") or (credit.get("artist") or {}).get("name")
            for credit in recording.get("artist-credit") or []
            if isinstance(credit, dict)
        ]
        return Track(
            title=recording.get("title") or "",
            duration=format_duration(recording.get("length")),
            artists=[a for a in artists if a],
            album=releases[0].get("title") if releases else None,
            isrc=isrcs[0] if isrcs else None,
            release=parse_release(releases[0]) if releases else None,
        )
