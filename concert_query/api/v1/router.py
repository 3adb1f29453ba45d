from fastapi import APIRouter
from concert_query.api.v1.endpoints import search, tracks

api_router = APIRouter()

# 搜索相关路由
api_router.include_router(search.router, prefix="/search", tags=["search"])

# 单曲补充信息
api_router.include_router(tracks.router, tags=["tracks"])
