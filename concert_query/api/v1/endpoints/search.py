from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from concert_query.core.deps import get_search_service
from concert_query.core.exceptions import MissingTokenError
from concert_query.models.music import EnrichmentOptions, SearchResults
from concert_query.services.search_service import SearchService

router = APIRouter()


@router.get("", response_model=SearchResults)
async def search(
    q: str = Query(..., min_length=1, description="搜索关键词"),
    mode: str = Query("artist", pattern="^(artist|track|recording|live)$", description="搜索模式"),
    limit: Optional[int] = Query(None, ge=1, le=50, description="结果数量上限"),
    audio_features: bool = Query(True, description="查询音频特征"),
    credits: bool = Query(True, description="查询词曲作者与版权商"),
    lyrics: bool = Query(True, description="查询歌词"),
    live: bool = Query(True, description="查询现场录音"),
    related: bool = Query(True, description="查询相关艺术家"),
    search_service: SearchService = Depends(get_search_service)
):
    """
    搜索艺术家、曲目、录音或现场录音，并合并各来源的补充信息
    """
    options = EnrichmentOptions(
        audio_features=audio_features,
        credits=credits,
        lyrics=lyrics,
        live=live,
        related=related,
    )
    try:
        return await search_service.search(query=q, mode=mode, limit=limit, options=options)
    except MissingTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )
