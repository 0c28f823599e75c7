"""
资源标识规范化

把模型名、缓存名等资源标识转换为当前后端要求的路径语法。
所有函数幂等：对已是规范形式的标识原样返回。

资源名改写规则是按顺序求值的前缀优先级表（首个命中者生效），
因为 projects/、locations/、{prefix}/ 这几种形态可能重叠，顺序决定改写结果。
"""

from __future__ import annotations

from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from genai_bridge.core.backend import Backend, BackendContext
from genai_bridge.core.exceptions import UnsupportedTypeError

from .inputs import InputKind, raw_json_text, resolve_input


class PrefixRule(NamedTuple):
    """资源名改写规则：match(name, prefix) 命中时执行 rewrite(ctx, name, prefix)"""

    match: Callable[[str, str], bool]
    rewrite: Callable[[BackendContext, str, str], str]


_RESOURCE_NAME_RULES: Dict[Backend, Tuple[PrefixRule, ...]] = {
    Backend.VERTEX_AI: (
        # 1. 已完全限定
        PrefixRule(
            lambda name, prefix: name.startswith("projects/"),
            lambda ctx, name, prefix: name,
        ),
        # 2. 只缺 project
        PrefixRule(
            lambda name, prefix: name.startswith("locations/"),
            lambda ctx, name, prefix: f"projects/{ctx.project}/{name}",
        ),
        # 3. 已带资源前缀，补 project/location
        PrefixRule(
            lambda name, prefix: name.startswith(f"{prefix}/"),
            lambda ctx, name, prefix: f"{ctx.resource_root}/{name}",
        ),
        # 4. 裸 id
        PrefixRule(
            lambda name, prefix: True,
            lambda ctx, name, prefix: f"{ctx.resource_root}/{prefix}/{name}",
        ),
    ),
    Backend.GEMINI_API: (
        PrefixRule(
            lambda name, prefix: name.startswith(f"{prefix}/"),
            lambda ctx, name, prefix: name,
        ),
        PrefixRule(
            lambda name, prefix: True,
            lambda ctx, name, prefix: f"{prefix}/{name}",
        ),
    ),
}


def _identifier_text(origin: Any, field: str) -> Optional[str]:
    resolved = resolve_input(origin)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is InputKind.TEXT:
        return resolved.value
    if resolved.kind is InputKind.RAW_JSON and isinstance(resolved.value, (bytes, bytearray)):
        return raw_json_text(resolved.value)
    raise UnsupportedTypeError(field, origin)


def t_model(ctx: BackendContext, origin: Any) -> Optional[str]:
    """
    规范化模型名

    Vertex AI:
        publishers/... / projects/... / models/... 原样返回
        "{publisher}/{model}" -> publishers/{publisher}/models/{model}
        裸模型名 -> publishers/google/models/{model}
    Gemini API:
        models/... / tunedModels/... 原样返回
        裸模型名 -> models/{model}

    Examples:
        >>> t_model(BackendContext.gemini(), "gemini-2.0-flash")
        'models/gemini-2.0-flash'
        >>> t_model(BackendContext.vertex("p", "us-central1"), "acme/custom-model")
        'publishers/acme/models/custom-model'
    """
    model = _identifier_text(origin, "model")
    if model is None:
        return None

    definition = ctx.definition
    if model.startswith(definition.model_passthrough_prefixes):
        return model
    if definition.publisher_model_template and "/" in model:
        publisher, name = model.split("/", 1)
        return definition.publisher_model_template.format(publisher=publisher, model=name)
    return definition.bare_model_template.format(model=model)


def t_models_url(ctx: BackendContext, base_models: bool) -> str:
    """
    列举模型时的集合路径（四格表，纯查表）

    | 后端       | base_models=True          | base_models=False |
    |------------|---------------------------|-------------------|
    | Vertex AI  | publishers/google/models  | models            |
    | Gemini API | models                    | tunedModels       |
    """
    return ctx.definition.models_url(base_models)


def t_resource_name(ctx: BackendContext, resource_name: str, resource_prefix: str) -> str:
    """按后端前缀优先级表补全资源名（如 cachedContents、files）"""
    for rule in _RESOURCE_NAME_RULES[ctx.backend]:
        if rule.match(resource_name, resource_prefix):
            return rule.rewrite(ctx, resource_name, resource_prefix)
    return resource_name


def t_caches_model(ctx: BackendContext, origin: Any) -> Optional[str]:
    """
    缓存接口使用的模型名

    Vertex AI 的缓存只接受 projects/ 开头的模型名，因此仅对 publishers/ 与 models/
    两种形态重新挂到 project/location 下；其它形态原样返回。
    """
    model = t_model(ctx, origin)
    if model is None:
        return None

    if ctx.is_vertex:
        if model.startswith("publishers/"):
            return f"{ctx.resource_root}/{model}"
        if model.startswith("models/"):
            return f"{ctx.resource_root}/publishers/google/{model}"
    return model


def t_cached_content_name(ctx: BackendContext, origin: Any) -> Optional[str]:
    """规范化缓存内容名（资源前缀 cachedContents）"""
    name = _identifier_text(origin, "cached content name")
    if name is None:
        return None
    return t_resource_name(ctx, name, "cachedContents")


def t_file_name(origin: Any) -> Optional[str]:
    """
    文件 id

    files/abc -> abc；files/abc:download -> abc

    注意：这里有意返回裸文件 id（去掉 files/ 前缀与 :download 后缀），
    而不是原样返回传入的字符串；需要资源名时由调用方拼接 files/{id}。
    """
    resolved = resolve_input(origin)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is not InputKind.TEXT:
        raise UnsupportedTypeError("file name", origin)

    name = resolved.value
    if name.startswith("files/"):
        name = name[len("files/"):]
    if name.endswith(":download"):
        name = name[: -len(":download")]
    return name


__all__ = [
    "PrefixRule",
    "t_model",
    "t_models_url",
    "t_resource_name",
    "t_caches_model",
    "t_cached_content_name",
    "t_file_name",
]
