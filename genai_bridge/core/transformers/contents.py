"""
消息内容规范化

把纯文本、单条 Content、Content 列表或原始 JSON 统一为有序的 Content 列表。
纯文本总是变成恰好一条 role="user"、只含一个文本片段的消息。
"""

from __future__ import annotations

from typing import Any, List, Optional

from genai_bridge.core.exceptions import UnsupportedTypeError
from genai_bridge.models.types import Content, Part

from .inputs import InputKind, load_raw_json, parse_as, resolve_input

USER_ROLE = "user"


def _user_text_content(text: str) -> Content:
    return Content(role=USER_ROLE, parts=[Part.from_text(text)])


def t_contents(origin: Any) -> Optional[List[Content]]:
    """
    规范化为 Content 列表

    - None -> None
    - str -> [Content(role="user", parts=[Part(text=...)])]
    - Content -> [Content]
    - List[Content] -> 原样
    - 原始 JSON：对象按单条消息解析，数组按消息列表解析
    """
    resolved = resolve_input(origin, Content)
    kind = resolved.kind

    if kind is InputKind.NONE:
        return None
    if kind is InputKind.TEXT:
        return [_user_text_content(resolved.value)]
    if kind is InputKind.TYPED:
        return [resolved.value]
    if kind is InputKind.TYPED_LIST:
        return resolved.value
    if kind is InputKind.RAW_JSON:
        data = load_raw_json(resolved.value, field="contents")
        if isinstance(data, dict):
            return [parse_as(Content, data, field="contents")]
        if isinstance(data, list):
            return parse_as(List[Content], data, field="contents")
    raise UnsupportedTypeError("contents", origin)


def t_content(origin: Any) -> Optional[Content]:
    """
    规范化为单条 Content

    - None -> None
    - str -> Content(role="user", parts=[Part(text=...)])
    - Content -> 原样
    - 原始 JSON 对象 -> 按 Content 解析
    """
    resolved = resolve_input(origin, Content)
    kind = resolved.kind

    if kind is InputKind.NONE:
        return None
    if kind is InputKind.TEXT:
        return _user_text_content(resolved.value)
    if kind is InputKind.TYPED:
        return resolved.value
    if kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        return parse_as(Content, resolved.value, field="content")
    raise UnsupportedTypeError("content", origin)


__all__ = ["USER_ROLE", "t_contents", "t_content"]
