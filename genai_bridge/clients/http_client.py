"""
HTTP 传输客户端

每个 Client 持有一个 ApiClient，内部复用单个 httpx.AsyncClient：
1. Keep-alive 连接复用，减少 TCP/TLS 握手
2. 超时与连接池参数来自全局配置，可被单次请求的 HttpOptions 覆盖
3. 非 2xx 响应统一转换为 ClientError / ServerError

本模块不做重试。
"""

from __future__ import annotations

import ssl
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import certifi
import httpx

from genai_bridge.config import config
from genai_bridge.core.backend import BackendContext
from genai_bridge.core.exceptions import APIError
from genai_bridge.core.logger import logger
from genai_bridge.models.types import HttpOptions

_SSL_CONTEXT = ssl.create_default_context(cafile=certifi.where())

# 请求头中需要脱敏的 key（小写）
_SENSITIVE_HEADERS = frozenset({"x-goog-api-key", "authorization"})


def redact_headers_for_log(headers: Dict[str, str]) -> Dict[str, str]:
    """对认证类请求头脱敏，用于日志记录"""
    return {
        name: ("***" if name.lower() in _SENSITIVE_HEADERS else value)
        for name, value in headers.items()
    }


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.http_connect_timeout,
        read=config.http_read_timeout,
        write=config.http_write_timeout,
        pool=config.http_pool_timeout,
    )


class ApiClient:
    """
    后端 HTTP 客户端

    负责:
    - 根据后端上下文拼接 base_url / api_version / 资源路径
    - 注入认证头（Gemini API: x-goog-api-key；Vertex AI: Bearer token）
    - 发送请求并把错误响应转换为 APIError 子类
    """

    def __init__(
        self,
        context: BackendContext,
        *,
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        http_options: Optional[HttpOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.context = context
        self.api_key = api_key
        self.access_token = access_token
        self.http_options = http_options or HttpOptions()
        self._client = httpx.AsyncClient(
            http2=False,
            verify=_SSL_CONTEXT,
            timeout=_default_timeout(),
            limits=httpx.Limits(
                max_connections=config.http_max_connections,
                max_keepalive_connections=config.http_keepalive_connections,
                keepalive_expiry=config.http_keepalive_expiry,
            ),
            follow_redirects=True,
            transport=transport,
        )
        logger.debug(
            "ApiClient 已初始化: backend={}, base_url={}",
            context.definition.display_name,
            self.base_url(),
        )

    @property
    def is_vertex(self) -> bool:
        return self.context.is_vertex

    def base_url(self, http_options: Optional[HttpOptions] = None) -> str:
        """服务地址（优先级：单次请求覆盖 > 客户端覆盖 > 配置 > 策略表默认值）"""
        definition = self.context.definition
        configured = config.vertex_base_url if self.is_vertex else config.gemini_base_url
        base = (
            (http_options and http_options.base_url)
            or self.http_options.base_url
            or configured
            or definition.resolve_base_url(self.context.location)
        )
        return base.rstrip("/")

    def api_version(self, http_options: Optional[HttpOptions] = None) -> str:
        return (
            (http_options and http_options.api_version)
            or self.http_options.api_version
            or self.context.definition.api_version
        )

    def resource_path(self, path: str, *, rooted: bool = True) -> str:
        """
        Vertex AI 请求路径补全 projects/{p}/locations/{l}/ 前缀

        rooted=False 用于 publishers/google/models 这类全局资源；
        已以 projects/ 开头的路径不会重复补全。
        """
        path = path.lstrip("/")
        if self.is_vertex and rooted and not path.startswith("projects/"):
            return f"{self.context.resource_root}/{path}"
        return path

    def build_url(
        self,
        path: str,
        *,
        http_options: Optional[HttpOptions] = None,
        query_params: Optional[Dict[str, Any]] = None,
        rooted: bool = True,
    ) -> str:
        url = (
            f"{self.base_url(http_options)}/{self.api_version(http_options)}/"
            f"{self.resource_path(path, rooted=rooted)}"
        )
        if query_params:
            query_string = urlencode(query_params, doseq=True)
            if query_string:
                url = f"{url}?{query_string}"
        return url

    def build_headers(self, http_options: Optional[HttpOptions] = None) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        headers.update(self.http_options.headers or {})
        if http_options and http_options.headers:
            headers.update(http_options.headers)

        # 认证头最后写入（最高优先级）
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        elif self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        *,
        http_options: Optional[HttpOptions] = None,
        query_params: Optional[Dict[str, Any]] = None,
        rooted: bool = True,
    ) -> Dict[str, Any]:
        """
        发送请求并返回 JSON 响应体

        Raises:
            ClientError: 4xx
            ServerError: 5xx
        """
        url = self.build_url(path, http_options=http_options, query_params=query_params, rooted=rooted)
        headers = self.build_headers(http_options)
        timeout = (
            httpx.Timeout(http_options.timeout)
            if http_options and http_options.timeout is not None
            else None
        )

        logger.debug(
            "发送请求: {} {} headers={}", method, url, redact_headers_for_log(headers)
        )
        request_kwargs: Dict[str, Any] = {"headers": headers, "json": body}
        if timeout is not None:
            request_kwargs["timeout"] = timeout
        response = await self._client.request(method, url, **request_kwargs)

        if response.status_code >= 400:
            try:
                error_body: Any = response.json()
            except ValueError:
                error_body = response.text
            error = APIError.from_response_json(response.status_code, error_body)
            logger.warning("上游返回错误: {} {} -> {}", method, url, error)
            raise error

        if not response.content:
            return {}
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.debug("ApiClient 已关闭")

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["ApiClient", "redact_headers_for_log"]
