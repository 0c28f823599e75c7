"""
输入形态解析（Tagged Union）

调用方传入的值在边界处只解析一次，得到 InputKind 标签，
各 transformer 再对标签做一次穷举分支；OTHER 分支总是 UnsupportedTypeError。

约定：
- str 永远是文本（TEXT）
- 指定的类型化模型实例是 TYPED，全部元素为该模型的 list/tuple 是 TYPED_LIST
- dict / list / tuple 是已解析的原始 JSON；bytes / bytearray 是未解码的 JSON 文档（RAW_JSON）
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from genai_bridge.core.exceptions import SchemaViolationError
from genai_bridge.core.logger import logger

T = TypeVar("T")


class InputKind(str, Enum):
    NONE = "none"
    TEXT = "text"
    TYPED = "typed"
    TYPED_LIST = "typed_list"
    RAW_JSON = "raw_json"
    OTHER = "other"


@dataclass(frozen=True)
class ResolvedInput:
    """解析后的输入：标签 + 原始值"""

    kind: InputKind
    value: Any


def resolve_input(origin: Any, typed: Optional[Type[BaseModel]] = None) -> ResolvedInput:
    """
    解析输入形态

    Args:
        origin: 调用方原始输入
        typed: 该字段的规范类型（None 表示该字段没有类型化形态）
    """
    if origin is None:
        return ResolvedInput(InputKind.NONE, None)
    if isinstance(origin, str):
        return ResolvedInput(InputKind.TEXT, origin)
    if typed is not None:
        if isinstance(origin, typed):
            return ResolvedInput(InputKind.TYPED, origin)
        if isinstance(origin, (list, tuple)) and all(isinstance(item, typed) for item in origin):
            return ResolvedInput(InputKind.TYPED_LIST, list(origin))
    if isinstance(origin, (dict, list, tuple, bytes, bytearray)):
        return ResolvedInput(InputKind.RAW_JSON, origin)
    return ResolvedInput(InputKind.OTHER, origin)


def load_raw_json(value: Any, *, field: str) -> Any:
    """把 RAW_JSON 值统一为 Python 对象；bytes 文档先解码"""
    if isinstance(value, (bytes, bytearray)):
        try:
            return json.loads(value)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SchemaViolationError(field, e) from e
    if isinstance(value, tuple):
        return list(value)
    return value


def raw_json_text(value: Union[bytes, bytearray]) -> str:
    """单值 JSON 文档的文本形式（去掉引号），用于资源名类字段"""
    return bytes(value).decode("utf-8", errors="replace").strip().replace('"', "")


def parse_as(target: Union[Type[T], Any], value: Any, *, field: str) -> T:
    """
    按规范 schema 解析原始 JSON

    Args:
        target: pydantic 模型类或任意 TypeAdapter 可接受的类型（如 List[Content]）
        value: RAW_JSON 值
        field: 字段名，用于错误信息
    """
    data = load_raw_json(value, field=field)
    try:
        if isinstance(target, type) and issubclass(target, BaseModel):
            result = target.model_validate(data)
        else:
            result = TypeAdapter(target).validate_python(data)
    except ValidationError as e:
        raise SchemaViolationError(field, e) from e
    logger.debug("已按规范 schema 解析原始 JSON: field={}", field)
    return result


__all__ = [
    "InputKind",
    "ResolvedInput",
    "resolve_input",
    "load_raw_json",
    "raw_json_text",
    "parse_as",
]
