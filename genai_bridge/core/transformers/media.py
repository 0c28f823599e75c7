"""
媒体数据规范化

Blob 接受类型化对象或原始 JSON；图片/音频接收器额外校验 MIME 类别前缀。
"""

from __future__ import annotations

from typing import Any, Dict, List

from genai_bridge.core.exceptions import MimeTypeError, UnsupportedTypeError
from genai_bridge.models.types import Blob

from .inputs import InputKind, load_raw_json, parse_as, resolve_input


def t_blob(origin: Any) -> Blob:
    resolved = resolve_input(origin, Blob)
    if resolved.kind is InputKind.TYPED:
        return resolved.value
    if resolved.kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        return parse_as(Blob, resolved.value, field="blob")
    raise UnsupportedTypeError("blob", origin)


def _t_blob_of_class(origin: Any, kind: str) -> Blob:
    blob = t_blob(origin)
    if blob.mime_type and blob.mime_type.startswith(f"{kind}/"):
        return blob
    raise MimeTypeError(kind, blob.mime_type)


def t_image_blob(origin: Any) -> Blob:
    """Blob 且 mime_type 以 image/ 开头"""
    return _t_blob_of_class(origin, "image")


def t_audio_blob(origin: Any) -> Blob:
    """Blob 且 mime_type 以 audio/ 开头"""
    return _t_blob_of_class(origin, "audio")


def t_blobs(origin: Any) -> List[Dict[str, Any]]:
    """
    实时输入的媒体块列表（线上 JSON 形态）

    列表中的每个元素（Blob 或原始 JSON 对象，可混用）都按 Blob 规范化后输出；
    其它输入按单个 Blob 规范化后包装为单元素列表。
    """
    resolved = resolve_input(origin, Blob)
    if resolved.kind is InputKind.TYPED_LIST:
        return [blob.to_json_dict() for blob in resolved.value]
    if resolved.kind is InputKind.RAW_JSON:
        data = load_raw_json(resolved.value, field="blobs")
        if isinstance(data, list):
            return [t_blob(item).to_json_dict() for item in data]
        return [t_blob(data).to_json_dict()]
    return [t_blob(origin).to_json_dict()]


__all__ = ["t_blob", "t_image_blob", "t_audio_blob", "t_blobs"]
