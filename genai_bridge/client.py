"""
客户端入口

    client = Client(api_key="...")                                  # Gemini API
    client = Client(vertexai=True, project="p", location="us-central1", access_token="...")
    client = Client(backend="vertex", project="p", location="us-central1")  # 也可用后端名或别名

    async with client:
        response = await client.models.generate_content(
            model="gemini-2.0-flash", contents="Why is the sky blue?"
        )

未显式传入的参数从环境变量读取（见 genai_bridge.config）。
"""

from __future__ import annotations

from typing import Any, Optional, Union

import httpx

from genai_bridge.clients.http_client import ApiClient
from genai_bridge.config import config
from genai_bridge.core.backend import Backend, BackendContext, resolve_backend
from genai_bridge.models.types import HttpOptions
from genai_bridge.services.caches import Caches
from genai_bridge.services.models import Models


def _select_backend(backend: Union[str, Backend, None], vertexai: Optional[bool]) -> Backend:
    """
    选择后端

    优先级：backend 参数 > vertexai 参数 > GOOGLE_GENAI_BACKEND > GOOGLE_GENAI_USE_VERTEXAI
    """
    if backend is not None:
        selected = resolve_backend(backend)
        if selected is None:
            raise ValueError(f"未知的后端: {backend!r}")
        return selected
    if vertexai is not None:
        return Backend.VERTEX_AI if vertexai else Backend.GEMINI_API
    if config.backend:
        selected = resolve_backend(config.backend)
        if selected is None:
            raise ValueError(f"GOOGLE_GENAI_BACKEND 配置了未知的后端: {config.backend!r}")
        return selected
    return Backend.VERTEX_AI if config.use_vertexai else Backend.GEMINI_API


class Client:
    """同时支持 Gemini API 与 Vertex AI 的客户端"""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        backend: Union[str, Backend, None] = None,
        vertexai: Optional[bool] = None,
        project: Optional[str] = None,
        location: Optional[str] = None,
        access_token: Optional[str] = None,
        http_options: Optional[HttpOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        use_vertex = _select_backend(backend, vertexai) is Backend.VERTEX_AI
        if use_vertex:
            context = BackendContext(
                backend=Backend.VERTEX_AI,
                project=project or config.project,
                location=location or config.location,
            )
        else:
            context = BackendContext.gemini()

        self._api_client = ApiClient(
            context,
            api_key=api_key or config.api_key,
            access_token=(access_token or config.access_token) if use_vertex else None,
            http_options=http_options,
            transport=transport,
        )
        self.models = Models(self._api_client)
        self.caches = Caches(self._api_client)

    @property
    def context(self) -> BackendContext:
        return self._api_client.context

    @property
    def vertexai(self) -> bool:
        return self.context.is_vertex

    async def aclose(self) -> None:
        await self._api_client.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["Client"]
