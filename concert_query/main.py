from fastapi import FastAPI

from concert_query.api import token
from concert_query.api.v1.router import api_router
from concert_query.core.environment import get_settings
from concert_query.core.init_app import init_app

settings = get_settings()

# 创建FastAPI应用
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# 日志与CORS
init_app(app)

# 令牌中转接口保持 /api/spotify-token 路径，浏览器端直接调用
app.include_router(token.router, prefix="/api", tags=["token"])

# 注册API路由
app.include_router(api_router, prefix=settings.API_V1_STR)

@app.middleware("http")
async def add_utf8_charset(request, call_next):
    response = await call_next(request)

    # 只为JSON响应添加charset，不修改其他类型的响应
    content_type = response.headers.get("Content-Type", "")
    if "application/json" in content_type and "charset" not in content_type:
        response.headers["Content-Type"] = "application/json; charset=utf-8"

    return response


# 根路径
@app.get("/")
async def root():
    return {"message": f"欢迎使用 {settings.PROJECT_NAME} API"}

# 健康检查端点
@app.get("/health")
async def health_check():
    return {"status": "healthy"}

def run():
    import uvicorn

    uvicorn.run(
        "concert_query.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=getattr(settings, "DEBUG", False),
    )

if __name__ == "__main__":
    run()
