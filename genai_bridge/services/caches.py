"""
Caches 服务

缓存内容（cachedContents）的创建、查询与删除。
Vertex AI 的缓存只接受 projects/ 开头的模型名，由 t_caches_model 负责改写。
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from genai_bridge.clients.http_client import ApiClient
from genai_bridge.core.backend import BackendContext
from genai_bridge.core.transformers import (
    reject_unsupported_parameters,
    t_cached_content_name,
    t_caches_model,
    t_content,
    t_contents,
    t_tools,
)
from genai_bridge.models.types import CachedContent, CreateCachedContentConfig, HttpOptions

CACHED_CONTENTS_PATH = "cachedContents"


def _dump_list(values: Any) -> Any:
    if values is None:
        return None
    return [value.to_json_dict() for value in values]


def build_create_cached_content_request(
    ctx: BackendContext,
    model: Any,
    config: Optional[CreateCachedContentConfig] = None,
) -> Tuple[str, Dict[str, Any]]:
    config = config or CreateCachedContentConfig()
    model_name = t_caches_model(ctx, model)
    if not model_name:
        raise ValueError("model 不能为空")

    payload: Dict[str, Any] = {"model": model_name}
    optional_fields = (
        ("contents", _dump_list(t_contents(config.contents))),
        ("systemInstruction", _dump_system_instruction(config.system_instruction)),
        ("tools", _dump_list(t_tools(config.tools))),
        ("toolConfig", config.tool_config),
        ("ttl", config.ttl),
        ("expireTime", config.expire_time),
        ("displayName", config.display_name),
    )
    for key, value in optional_fields:
        if value is not None:
            payload[key] = value
    if config.kms_key_name is not None:
        payload["encryptionSpec"] = {"kmsKeyName": config.kms_key_name}

    reject_unsupported_parameters(ctx, payload)
    return CACHED_CONTENTS_PATH, payload


def _dump_system_instruction(origin: Any) -> Optional[Dict[str, Any]]:
    content = t_content(origin)
    return content.to_json_dict() if content is not None else None


class Caches:
    """缓存内容接口"""

    def __init__(self, api_client: ApiClient) -> None:
        self._api_client = api_client

    @property
    def _ctx(self) -> BackendContext:
        return self._api_client.context

    def _name(self, name: Any) -> str:
        resolved = t_cached_content_name(self._ctx, name)
        if not resolved:
            raise ValueError("name 不能为空")
        return resolved

    async def create(
        self,
        *,
        model: Any,
        config: Optional[CreateCachedContentConfig] = None,
    ) -> CachedContent:
        path, payload = build_create_cached_content_request(self._ctx, model, config)
        http_options: Optional[HttpOptions] = config.http_options if config else None
        body = await self._api_client.request("POST", path, payload, http_options=http_options)
        return CachedContent.model_validate(body)

    async def get(self, *, name: Any) -> CachedContent:
        body = await self._api_client.request("GET", self._name(name))
        return CachedContent.model_validate(body)

    async def delete(self, *, name: Any) -> None:
        await self._api_client.request("DELETE", self._name(name))


__all__ = ["Caches", "CACHED_CONTENTS_PATH", "build_create_cached_content_request"]
