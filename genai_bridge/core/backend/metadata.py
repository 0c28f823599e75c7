"""
后端元数据定义（策略表）

集中维护两种后端在规范化层的差异，避免各 transformer 重复写 if/else：
- 模型集合路径四格表（base / tuned）
- 模型名透传前缀与补全模板
- Embedding 内容是否需要压平为纯文本
- 各后端不支持的请求参数（能力门禁）

使用方式：
    from genai_bridge.core.backend import get_backend_definition
    definition = get_backend_definition(Backend.VERTEX_AI)
    definition.models_url(base_models=True)  # -> "publishers/google/models"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .enums import Backend


@dataclass(frozen=True)
class BackendDefinition:
    """
    描述一个后端在规范化层的所有差异信息。

    - display_name: 面向用户的后端名称，出现在能力门禁的错误信息中
    - aliases: 用于 resolve_backend 的别名
    - base_models_url / tuned_models_url: 列举模型时的集合路径
    - model_passthrough_prefixes: 已是规范形式、原样返回的模型名前缀
    - bare_model_template: 裸模型名的补全模板
    - publisher_model_template: "{publisher}/{model}" 形式的补全模板，None 表示不识别该形式
    - qualified_resources: 资源名是否需要 projects/{p}/locations/{l} 作用域
    - embed_text_only: Embedding 请求是否只接受纯文本列表
    - unsupported_parameters: 请求体中不允许出现的参数路径（camelCase，"*" 匹配列表元素）
    - base_url / api_version: 默认服务地址与版本（base_url 可包含 {location} 占位）
    """

    backend: Backend
    display_name: str
    aliases: Sequence[str] = field(default_factory=tuple)
    base_models_url: str = "models"
    tuned_models_url: str = "models"
    model_passthrough_prefixes: Tuple[str, ...] = ("models/",)
    bare_model_template: str = "models/{model}"
    publisher_model_template: Optional[str] = None
    qualified_resources: bool = False
    embed_text_only: bool = False
    unsupported_parameters: Tuple[Tuple[str, ...], ...] = ()
    base_url: str = ""
    global_base_url: str = ""
    api_version: str = "v1beta"

    def models_url(self, base_models: bool) -> str:
        """模型集合路径（纯查表，不依赖模型名本身）。"""
        return self.base_models_url if base_models else self.tuned_models_url

    def resolve_base_url(self, location: Optional[str] = None) -> str:
        """按 location 渲染默认服务地址；location 为 global 时使用全局地址。"""
        if location == "global" and self.global_base_url:
            return self.global_base_url
        return self.base_url.format(location=location or "")

    def iter_aliases(self) -> Iterable[str]:
        """返回大小写统一后的别名集合，包含枚举名本身。"""
        yield normalize_alias_value(self.backend.value)
        for alias in self.aliases:
            normalized = normalize_alias_value(alias)
            if normalized:
                yield normalized


_DEFINITIONS: Dict[Backend, BackendDefinition] = {
    Backend.GEMINI_API: BackendDefinition(
        backend=Backend.GEMINI_API,
        display_name="Gemini API",
        aliases=("gemini", "mldev", "google_ai", "developer"),
        base_models_url="models",
        tuned_models_url="tunedModels",
        model_passthrough_prefixes=("models/", "tunedModels/"),
        bare_model_template="models/{model}",
        publisher_model_template=None,
        qualified_resources=False,
        embed_text_only=False,
        unsupported_parameters=(
            ("labels",),
            ("tools", "*", "enterpriseWebSearch"),
            ("encryptionSpec", "kmsKeyName"),
        ),
        base_url="https://generativelanguage.googleapis.com/",
        api_version="v1beta",
    ),
    Backend.VERTEX_AI: BackendDefinition(
        backend=Backend.VERTEX_AI,
        display_name="Vertex AI",
        aliases=("vertex", "vertexai", "enterprise"),
        base_models_url="publishers/google/models",
        tuned_models_url="models",
        model_passthrough_prefixes=("publishers/", "projects/", "models/"),
        bare_model_template="publishers/google/models/{model}",
        publisher_model_template="publishers/{publisher}/models/{model}",
        qualified_resources=True,
        embed_text_only=True,
        unsupported_parameters=(
            ("generationConfig", "speechConfig", "multiSpeakerVoiceConfig"),
        ),
        base_url="https://{location}-aiplatform.googleapis.com/",
        global_base_url="https://aiplatform.googleapis.com/",
        api_version="v1beta1",
    ),
}

# 对外只暴露只读视图，避免被随意修改
BACKEND_DEFINITIONS: Mapping[Backend, BackendDefinition] = MappingProxyType(_DEFINITIONS)


def get_backend_definition(backend: Backend) -> BackendDefinition:
    """获取指定后端的定义，不存在时抛出 KeyError。"""
    return BACKEND_DEFINITIONS[backend]


@lru_cache(maxsize=1)
def _alias_lookup_cache() -> Dict[str, Backend]:
    """缓存 alias -> Backend 查找表。"""
    lookup: Dict[str, Backend] = {}
    for definition in BACKEND_DEFINITIONS.values():
        for alias in definition.iter_aliases():
            lookup.setdefault(alias, definition.backend)
    return lookup


def resolve_backend(
    value: Union[str, Backend, None],
    default: Optional[Backend] = None,
) -> Optional[Backend]:
    """
    将任意字符串/枚举值解析为 Backend。

    Args:
        value: 可以是 Backend 或任意字符串/别名
        default: 未解析成功时返回的默认值
    """
    if isinstance(value, Backend):
        return value
    if isinstance(value, str):
        normalized = normalize_alias_value(value)
        if not normalized:
            return default
        return _alias_lookup_cache().get(normalized, default)
    return default


def normalize_alias_value(value: str) -> str:
    """统一别名格式：去空白、转小写，并将非字母数字转为单个下划线。"""
    if value is None:
        return ""
    text = value.strip().lower()
    text = re.sub(r"[^a-z0-9]+", "_", text)
    return text.strip("_")


__all__ = [
    "BackendDefinition",
    "BACKEND_DEFINITIONS",
    "get_backend_definition",
    "resolve_backend",
    "normalize_alias_value",
]
