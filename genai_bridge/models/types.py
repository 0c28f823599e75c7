"""
API 数据类型（Canonical）

与上游 REST 接口一一对应的 pydantic 模型：
- 字段使用 snake_case，序列化时通过 alias 输出 camelCase
- extra="allow"：未识别字段原样保留，避免静默丢失
- bytes 字段在 JSON 形态下使用 base64（与上游线上格式一致）
"""

from __future__ import annotations

import base64
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _decode_base64(value: Any) -> Any:
    # JSON 形态下 data 为 base64 字符串；已是 bytes 时原样保留
    if isinstance(value, str):
        return base64.b64decode(value)
    return value


Base64Bytes = Annotated[
    bytes,
    BeforeValidator(_decode_base64),
    PlainSerializer(
        lambda value: base64.b64encode(value).decode("ascii"),
        return_type=str,
        when_used="json",
    ),
]


class ApiModel(BaseModel):
    """所有 API 数据类型的基类"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        protected_namespaces=(),
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """输出线上格式：camelCase、去掉 None、bytes 转 base64"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ========== Content ==========


class Blob(ApiModel):
    """内联二进制数据"""

    mime_type: Optional[str] = None
    data: Optional[Base64Bytes] = None
    display_name: Optional[str] = None


class FileData(ApiModel):
    """通过 URI 引用的文件"""

    mime_type: Optional[str] = None
    file_uri: Optional[str] = None
    display_name: Optional[str] = None


class FunctionCall(ApiModel):
    id: Optional[str] = None
    name: Optional[str] = None
    args: Optional[Dict[str, Any]] = None


class FunctionResponse(ApiModel):
    id: Optional[str] = None
    name: Optional[str] = None
    response: Optional[Dict[str, Any]] = None


class Part(ApiModel):
    """
    消息片段（判别联合）

    规范化层只关心 text；其余变体对本层是不透明的透传数据。
    """

    text: Optional[str] = None
    inline_data: Optional[Blob] = None
    file_data: Optional[FileData] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None
    thought: Optional[bool] = None

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)


class Content(ApiModel):
    """带角色的多片段消息"""

    role: Optional[str] = None
    parts: Optional[List[Part]] = None


# ========== Schema / Tool ==========


class Schema(ApiModel):
    """OpenAPI 3.0 子集"""

    type: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    nullable: Optional[bool] = None
    enum: Optional[List[str]] = None
    items: Optional[Schema] = None
    properties: Optional[Dict[str, Schema]] = None
    property_ordering: Optional[List[str]] = None
    required: Optional[List[str]] = None
    any_of: Optional[List[Schema]] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    example: Optional[Any] = None
    default: Optional[Any] = None


class FunctionDeclaration(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    parameters: Optional[Schema] = None
    response: Optional[Schema] = None


class GoogleSearch(ApiModel):
    pass


class GoogleSearchRetrieval(ApiModel):
    dynamic_retrieval_config: Optional[Dict[str, Any]] = None


class ToolCodeExecution(ApiModel):
    pass


class Retrieval(ApiModel):
    disable_attribution: Optional[bool] = None
    vertex_ai_search: Optional[Dict[str, Any]] = None
    vertex_rag_store: Optional[Dict[str, Any]] = None


class EnterpriseWebSearch(ApiModel):
    """企业网页搜索（仅 Vertex AI 支持）"""

    exclude_domains: Optional[List[str]] = None


class UrlContext(ApiModel):
    pass


class Tool(ApiModel):
    function_declarations: Optional[List[FunctionDeclaration]] = None
    google_search: Optional[GoogleSearch] = None
    google_search_retrieval: Optional[GoogleSearchRetrieval] = None
    code_execution: Optional[ToolCodeExecution] = None
    retrieval: Optional[Retrieval] = None
    enterprise_web_search: Optional[EnterpriseWebSearch] = None
    url_context: Optional[UrlContext] = None


# ========== Speech ==========


class PrebuiltVoiceConfig(ApiModel):
    voice_name: Optional[str] = None


class VoiceConfig(ApiModel):
    prebuilt_voice_config: Optional[PrebuiltVoiceConfig] = None


class SpeakerVoiceConfig(ApiModel):
    speaker: Optional[str] = None
    voice_config: Optional[VoiceConfig] = None


class MultiSpeakerVoiceConfig(ApiModel):
    speaker_voice_configs: Optional[List[SpeakerVoiceConfig]] = None


class SpeechConfig(ApiModel):
    voice_config: Optional[VoiceConfig] = None
    multi_speaker_voice_config: Optional[MultiSpeakerVoiceConfig] = None
    language_code: Optional[str] = None


# ========== Request config ==========


class HttpOptions(ApiModel):
    """单次请求的 HTTP 覆盖项（timeout 单位：秒）"""

    base_url: Optional[str] = None
    api_version: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    timeout: Optional[float] = None


class SafetySetting(ApiModel):
    category: Optional[str] = None
    threshold: Optional[str] = None
    method: Optional[str] = None


class ThinkingConfig(ApiModel):
    include_thoughts: Optional[bool] = None
    thinking_budget: Optional[int] = None


class GenerateContentConfig(ApiModel):
    """
    generate_content 可选参数

    system_instruction / response_schema / speech_config / tools 接受宽松输入
    （字符串、类型化对象或原始 JSON），在构建请求时由 transformers 规范化。
    """

    http_options: Optional[HttpOptions] = None
    system_instruction: Optional[Any] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[float] = None
    candidate_count: Optional[int] = None
    max_output_tokens: Optional[int] = None
    stop_sequences: Optional[List[str]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    seed: Optional[int] = None
    response_mime_type: Optional[str] = None
    response_schema: Optional[Any] = None
    response_modalities: Optional[List[str]] = None
    speech_config: Optional[Any] = None
    thinking_config: Optional[ThinkingConfig] = None
    safety_settings: Optional[List[SafetySetting]] = None
    tools: Optional[Any] = None
    tool_config: Optional[Dict[str, Any]] = None
    labels: Optional[Dict[str, str]] = None
    cached_content: Optional[Any] = None


class EmbedContentConfig(ApiModel):
    http_options: Optional[HttpOptions] = None
    task_type: Optional[str] = None
    title: Optional[str] = None
    output_dimensionality: Optional[int] = None
    auto_truncate: Optional[bool] = None


class CreateCachedContentConfig(ApiModel):
    http_options: Optional[HttpOptions] = None
    ttl: Optional[str] = None
    expire_time: Optional[str] = None
    display_name: Optional[str] = None
    contents: Optional[Any] = None
    system_instruction: Optional[Any] = None
    tools: Optional[Any] = None
    tool_config: Optional[Dict[str, Any]] = None
    kms_key_name: Optional[str] = None


# ========== Responses ==========


class Citation(ApiModel):
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    uri: Optional[str] = None
    title: Optional[str] = None
    license: Optional[str] = None
    publication_date: Optional[Dict[str, int]] = None


class CitationMetadata(ApiModel):
    """引用元数据；开发者 API 字段名为 citationSources，统一收敛到 citations"""

    citations: Optional[List[Citation]] = None
    citation_sources: Optional[List[Citation]] = None

    def all_citations(self) -> List[Citation]:
        return list(self.citations or []) + list(self.citation_sources or [])


class SafetyRating(ApiModel):
    category: Optional[str] = None
    probability: Optional[str] = None
    blocked: Optional[bool] = None


class Candidate(ApiModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    finish_message: Optional[str] = None
    index: Optional[int] = None
    token_count: Optional[int] = None
    avg_logprobs: Optional[float] = None
    citation_metadata: Optional[CitationMetadata] = None
    safety_ratings: Optional[List[SafetyRating]] = None
    grounding_metadata: Optional[Dict[str, Any]] = None


class UsageMetadata(ApiModel):
    prompt_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    cached_content_token_count: Optional[int] = None
    thoughts_token_count: Optional[int] = None
    total_token_count: Optional[int] = None


class GenerateContentResponse(ApiModel):
    candidates: Optional[List[Candidate]] = None
    prompt_feedback: Optional[Dict[str, Any]] = None
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None
    response_id: Optional[str] = None
    create_time: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        """首个候选中所有非 thought 文本片段的拼接；没有文本时返回 None"""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        texts = [part.text for part in content.parts if part.text is not None and not part.thought]
        if not texts:
            return None
        return "".join(texts)


class ContentEmbeddingStatistics(ApiModel):
    truncated: Optional[bool] = None
    token_count: Optional[float] = None


class ContentEmbedding(ApiModel):
    values: Optional[List[float]] = None
    statistics: Optional[ContentEmbeddingStatistics] = None


class EmbedContentResponse(ApiModel):
    embeddings: Optional[List[ContentEmbedding]] = None
    metadata: Optional[Dict[str, Any]] = None


class CachedContent(ApiModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    model: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None
    expire_time: Optional[str] = None
    usage_metadata: Optional[Dict[str, Any]] = None


class Model(ApiModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    input_token_limit: Optional[int] = None
    output_token_limit: Optional[int] = None
    supported_actions: Optional[List[str]] = None


__all__ = [
    "ApiModel",
    "Blob",
    "FileData",
    "FunctionCall",
    "FunctionResponse",
    "Part",
    "Content",
    "Schema",
    "FunctionDeclaration",
    "GoogleSearch",
    "GoogleSearchRetrieval",
    "ToolCodeExecution",
    "Retrieval",
    "EnterpriseWebSearch",
    "UrlContext",
    "Tool",
    "PrebuiltVoiceConfig",
    "VoiceConfig",
    "SpeakerVoiceConfig",
    "MultiSpeakerVoiceConfig",
    "SpeechConfig",
    "HttpOptions",
    "SafetySetting",
    "ThinkingConfig",
    "GenerateContentConfig",
    "EmbedContentConfig",
    "CreateCachedContentConfig",
    "Citation",
    "CitationMetadata",
    "SafetyRating",
    "Candidate",
    "UsageMetadata",
    "GenerateContentResponse",
    "ContentEmbeddingStatistics",
    "ContentEmbedding",
    "EmbedContentResponse",
    "CachedContent",
    "Model",
]
