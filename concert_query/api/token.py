import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from concert_query.core.deps import get_token_service
from concert_query.core.exceptions import TokenRelayError
from concert_query.services.token_service import TokenService

router = APIRouter()

TOKEN_ERROR = {"error": "Failed to fetch token"}


@router.get("/spotify-token")
async def spotify_token(
    token_service: TokenService = Depends(get_token_service)
):
    """
    用服务端保存的凭证换取 Spotify 访问令牌

    成功时原样返回 Spotify 的 JSON，失败时返回固定的错误 JSON 和 500 状态码
    """
    try:
        data = await asyncio.to_thread(token_service.fetch_token)
    except TokenRelayError as e:
        logging.error(f"Error fetching Spotify token: {e}")
        return JSONResponse(status_code=500, content=TOKEN_ERROR)
    return JSONResponse(status_code=200, content=data)
