"""
Models 服务

generate_content / embed_content / get / list 的请求构建与发送。

请求构建流程：
1. 各宽松入参先经过 transformers 规范化
2. 组装线上格式（camelCase）请求体
3. 后端参数门禁（任何网络请求之前）
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic.alias_generators import to_camel

from genai_bridge.clients.http_client import ApiClient
from genai_bridge.core.backend import BackendContext
from genai_bridge.core.logger import logger
from genai_bridge.core.transformers import (
    reject_unsupported_parameters,
    t_cached_content_name,
    t_content,
    t_contents,
    t_contents_for_embed,
    t_model,
    t_models_url,
    t_schema,
    t_speech_config,
    t_tools,
)
from genai_bridge.models.types import (
    Content,
    ContentEmbedding,
    EmbedContentConfig,
    EmbedContentResponse,
    GenerateContentConfig,
    GenerateContentResponse,
    HttpOptions,
    Model,
)

# GenerateContentConfig 中直接映射到 generationConfig 的标量字段
_GENERATION_CONFIG_FIELDS: Tuple[str, ...] = (
    "temperature",
    "top_p",
    "top_k",
    "candidate_count",
    "max_output_tokens",
    "stop_sequences",
    "presence_penalty",
    "frequency_penalty",
    "seed",
    "response_mime_type",
    "response_modalities",
)


def _dump(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if hasattr(value, "to_json_dict"):
        return value.to_json_dict()
    return value


def _set_if_present(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def build_generate_content_request(
    ctx: BackendContext,
    model: Any,
    contents: Any,
    config: Optional[GenerateContentConfig] = None,
) -> Tuple[str, Dict[str, Any]]:
    """
    构建 generateContent 请求

    Returns:
        (path, payload)，path 为未补全 project/location 的模型路径 + action
    """
    config = config or GenerateContentConfig()
    model_name = t_model(ctx, model)
    if not model_name:
        raise ValueError("model 不能为空")

    payload: Dict[str, Any] = {"contents": _dump(t_contents(contents)) or []}
    _set_if_present(payload, "systemInstruction", _dump(t_content(config.system_instruction)))

    generation_config: Dict[str, Any] = {}
    for field_name in _GENERATION_CONFIG_FIELDS:
        value = getattr(config, field_name)
        if value is not None:
            generation_config[to_camel(field_name)] = value
    _set_if_present(generation_config, "responseSchema", _dump(t_schema(config.response_schema)))
    _set_if_present(generation_config, "speechConfig", _dump(t_speech_config(config.speech_config)))
    _set_if_present(generation_config, "thinkingConfig", _dump(config.thinking_config))
    if generation_config:
        payload["generationConfig"] = generation_config

    _set_if_present(payload, "safetySettings", _dump(config.safety_settings))
    _set_if_present(payload, "tools", _dump(t_tools(config.tools)))
    _set_if_present(payload, "toolConfig", config.tool_config)
    _set_if_present(payload, "cachedContent", t_cached_content_name(ctx, config.cached_content))
    _set_if_present(payload, "labels", config.labels)

    reject_unsupported_parameters(ctx, payload)
    return f"{model_name}:generateContent", payload


def build_embed_content_request(
    ctx: BackendContext,
    model: Any,
    contents: Any,
    config: Optional[EmbedContentConfig] = None,
) -> Tuple[str, Dict[str, Any]]:
    """
    构建 embedding 请求

    Gemini API: {model}:batchEmbedContents，requests 中每条携带完整 Content
    Vertex AI: {model}:predict，instances 中每条只携带文本
    """
    config = config or EmbedContentConfig()
    model_name = t_model(ctx, model)
    if not model_name:
        raise ValueError("model 不能为空")

    items: List[Union[Content, str]] = t_contents_for_embed(ctx, t_contents(contents)) or []

    if ctx.is_vertex:
        instances: List[Dict[str, Any]] = []
        for text in items:
            instance: Dict[str, Any] = {"content": text}
            _set_if_present(instance, "task_type", config.task_type)
            _set_if_present(instance, "title", config.title)
            instances.append(instance)
        payload: Dict[str, Any] = {"instances": instances}
        parameters: Dict[str, Any] = {}
        _set_if_present(parameters, "outputDimensionality", config.output_dimensionality)
        _set_if_present(parameters, "autoTruncate", config.auto_truncate)
        if parameters:
            payload["parameters"] = parameters
        path = f"{model_name}:predict"
    else:
        requests: List[Dict[str, Any]] = []
        for content in items:
            request: Dict[str, Any] = {"model": model_name, "content": _dump(content)}
            _set_if_present(request, "taskType", config.task_type)
            _set_if_present(request, "title", config.title)
            _set_if_present(request, "outputDimensionality", config.output_dimensionality)
            requests.append(request)
        payload = {"requests": requests}
        path = f"{model_name}:batchEmbedContents"

    reject_unsupported_parameters(ctx, payload)
    return path, payload


def parse_embed_content_response(ctx: BackendContext, body: Dict[str, Any]) -> EmbedContentResponse:
    """把两种后端的 embedding 响应统一为 EmbedContentResponse"""
    if not ctx.is_vertex:
        return EmbedContentResponse.model_validate(body)

    embeddings = [
        ContentEmbedding.model_validate(prediction.get("embeddings") or {})
        for prediction in body.get("predictions") or []
    ]
    return EmbedContentResponse(embeddings=embeddings, metadata=body.get("metadata"))


class Models:
    """模型相关接口"""

    def __init__(self, api_client: ApiClient) -> None:
        self._api_client = api_client

    @property
    def _ctx(self) -> BackendContext:
        return self._api_client.context

    async def generate_content(
        self,
        *,
        model: Any,
        contents: Any,
        config: Optional[GenerateContentConfig] = None,
    ) -> GenerateContentResponse:
        path, payload = build_generate_content_request(self._ctx, model, contents, config)
        http_options: Optional[HttpOptions] = config.http_options if config else None
        body = await self._api_client.request("POST", path, payload, http_options=http_options)
        return GenerateContentResponse.model_validate(body)

    async def embed_content(
        self,
        *,
        model: Any,
        contents: Any,
        config: Optional[EmbedContentConfig] = None,
    ) -> EmbedContentResponse:
        path, payload = build_embed_content_request(self._ctx, model, contents, config)
        http_options: Optional[HttpOptions] = config.http_options if config else None
        body = await self._api_client.request("POST", path, payload, http_options=http_options)
        return parse_embed_content_response(self._ctx, body)

    async def get(self, *, model: Any) -> Model:
        model_name = t_model(self._ctx, model)
        if not model_name:
            raise ValueError("model 不能为空")
        # Vertex AI 的 publisher 模型是全局资源
        rooted = not model_name.startswith("publishers/")
        body = await self._api_client.request("GET", model_name, rooted=rooted)
        return Model.model_validate(body)

    async def list(self, *, base_models: bool = True, page_size: Optional[int] = None) -> List[Model]:
        """列举模型（自动翻页）"""
        path = t_models_url(self._ctx, base_models)
        rooted = not path.startswith("publishers/")
        models: List[Model] = []
        page_token: Optional[str] = None
        while True:
            query: Dict[str, Any] = {}
            _set_if_present(query, "pageSize", page_size)
            _set_if_present(query, "pageToken", page_token)
            body = await self._api_client.request("GET", path, query_params=query, rooted=rooted)
            items = body.get("models") or body.get("tunedModels") or body.get("publisherModels") or []
            models.extend(Model.model_validate(item) for item in items)
            page_token = body.get("nextPageToken")
            if not page_token:
                break
        logger.debug("已列举模型: path={}, count={}", path, len(models))
        return models


__all__ = [
    "Models",
    "build_generate_content_request",
    "build_embed_content_request",
    "parse_embed_content_response",
]
