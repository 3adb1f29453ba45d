import base64
import logging
from typing import Any, Dict, Optional

import requests

from concert_query.core.config import Settings
from concert_query.core.exceptions import TokenRelayError


class TokenService:
    """
    Spotify 令牌中转服务

    使用服务端保存的 client credentials 向 Spotify 换取访问令牌，
    不做缓存也不做重试，每次请求都直接转发。
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """
        初始化令牌服务

        参数:
            settings: 应用配置
            session: 可选的 requests 会话（测试时可替换）
        """
        self.client_id = settings.SPOTIFY_CLIENT_ID
        self.client_secret = settings.SPOTIFY_CLIENT_SECRET
        self.token_url = settings.SPOTIFY_TOKEN_URL
        self.timeout = settings.HTTP_TIMEOUT
        self.session = session or requests.Session()

    def build_token_request_headers(self) -> Dict[str, str]:
        basic = base64.b64encode(
            f"{self.client_id}:{self.client_secret}".encode()
        ).decode()
        return {
            "Authorization": f"Basic {basic}",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def fetch_token(self) -> Dict[str, Any]:
        """
        用 client credentials 换取访问令牌

        返回:
            Dict: Spotify 返回的原始 JSON

        异常:
            TokenRelayError: 凭证缺失、网络错误、上游返回错误或非 JSON 响应
        """
        if not self.client_id or not self.client_secret:
            raise TokenRelayError("未配置 Spotify client credentials")

        try:
            response = self.session.post(
                self.token_url,
                headers=self.build_token_request_headers(),
                data={"grant_type": "client_credentials"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TokenRelayError(f"连接 Spotify 令牌接口失败: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise TokenRelayError("令牌接口返回了非 JSON 内容", status_code=response.status_code) from e

        if not response.ok:
            raise TokenRelayError(
                "令牌接口返回错误",
                status_code=response.status_code,
                details=data if isinstance(data, dict) else {"error": data},
            )

        logging.info("已获取 Spotify 访问令牌")
        return data
