from typing import Any, Dict, Optional


class UpstreamError(Exception):
    """
    外部接口调用失败

    参数:
        service: 外部服务名称，例如 spotify、musicbrainz
        status_code: 上游返回的 HTTP 状态码，连接失败时为 None
        details: 上游返回的错误内容
    """

    def __init__(self, service: str, message: str,
                 status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.service = service
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.service}] {self.message} (status={self.status_code})"
        return f"[{self.service}] {self.message}"


class TokenRelayError(UpstreamError):
    """令牌交换失败"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__("spotify-accounts", message, status_code, details)


class MissingTokenError(Exception):
    """调用 Spotify 接口前没有提供访问令牌"""
