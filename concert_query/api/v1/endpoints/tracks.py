from fastapi import APIRouter, Depends, HTTPException, Query, status

from concert_query.core.deps import get_search_service
from concert_query.models.music import LyricsResult, TrackCredits, LYRICS_PLACEHOLDER
from concert_query.services.search_service import SearchService

router = APIRouter()


@router.get("/tracks/{isrc}/credits", response_model=TrackCredits)
async def get_track_credits(
    isrc: str,
    search_service: SearchService = Depends(get_search_service)
):
    """
    按 ISRC 查询词曲作者、版权商和发行信息
    """
    details = await search_service.lookup_credits(isrc)
    if not details:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="未找到该ISRC的版权信息"
        )
    return details


@router.get("/lyrics", response_model=LyricsResult)
async def get_lyrics(
    artist: str = Query(..., min_length=1),
    title: str = Query(..., min_length=1),
    search_service: SearchService = Depends(get_search_service)
):
    """
    查询歌词，找不到时返回占位文本
    """
    lyrics = await search_service.fetch_lyrics(artist, title)
    return LyricsResult(
        artist=artist,
        title=title,
        lyrics=lyrics or LYRICS_PLACEHOLDER,
        found=bool(lyrics),
    )
