from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from concert_query.core.exceptions import UpstreamError


class BaseHttpClient:
    """
    外部 REST 接口的公共请求逻辑

    所有请求失败（连接错误、非 2xx 状态、非 JSON 响应）统一抛出 UpstreamError，
    由调用方决定记录日志并降级为空值。
    """
    SERVICE_NAME = "http"

    def __init__(self, base_url: str, timeout: float = 10.0,
                 session: Optional[requests.Session] = None,
                 headers: Optional[Dict[str, str]] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.default_headers = {"Accept": "application/json"}
        if headers:
            self.default_headers.update(headers)

    def build_url(self, endpoint: str) -> str:
        if endpoint.startswith("http://") or endpoint.startswith("https://"):
            return endpoint
        return f"{self.base_url}{endpoint.lstrip('/')}"

    @staticmethod
    def quote_segment(value: str) -> str:
        """对路径片段做 URL 编码（包括 /）"""
        return quote(value, safe="")

    def handle_request(self, method: str, endpoint: str, headers: Optional[Dict[str, str]] = None,
                       params: Any = None, data: Any = None,
                       **kwargs) -> requests.Response:
        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        try:
            response = self.session.request(
                method=method,
                url=self.build_url(endpoint),
                headers=request_headers,
                params=params,
                data=data,
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            self.handle_error(e, getattr(e, "response", None))

    def handle_error(self, exception: Exception, response: Optional[requests.Response] = None):
        if response is not None:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {
                    "error": "invalid_response",
                    "details": response.text[:500],
                }
            if not isinstance(error_data, dict):
                error_data = {"error": error_data}
            raise UpstreamError(
                self.SERVICE_NAME,
                f"请求失败: {exception}",
                status_code=response.status_code,
                details=error_data,
            ) from exception

        raise UpstreamError(
            self.SERVICE_NAME,
            f"连接失败: {exception}",
            details={"error": "connection_error", "details": str(exception)},
        ) from exception

    def get_json(self, endpoint: str, params: Any = None,
                 headers: Optional[Dict[str, str]] = None) -> Any:
        response = self.handle_request("GET", endpoint, headers=headers, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                self.SERVICE_NAME,
                "响应不是有效的 JSON",
                status_code=response.status_code,
            ) from e
