"""
结构化值规范化（Schema / Tool / SpeechConfig）

三者约定一致：类型化对象直接接受，原始 JSON 按规范 schema 解析，
其它形态抛出 UnsupportedTypeError。
"""

from __future__ import annotations

from typing import Any, List, Optional

from genai_bridge.core.exceptions import UnsupportedTypeError
from genai_bridge.models.types import Schema, SpeechConfig, Tool

from .inputs import InputKind, load_raw_json, parse_as, resolve_input


def t_schema(origin: Any) -> Optional[Schema]:
    resolved = resolve_input(origin, Schema)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is InputKind.TYPED:
        return resolved.value
    if resolved.kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        return parse_as(Schema, resolved.value, field="schema")
    raise UnsupportedTypeError("schema", origin)


def t_speech_config(origin: Any) -> Optional[SpeechConfig]:
    resolved = resolve_input(origin, SpeechConfig)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is InputKind.TYPED:
        return resolved.value
    if resolved.kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        return parse_as(SpeechConfig, resolved.value, field="speechConfig")
    raise UnsupportedTypeError("speechConfig", origin)


def t_tool(origin: Any) -> Optional[Tool]:
    """
    规范化单个 Tool

    类型化 Tool 也会先序列化再解析一次，而不是直接返回：
    这是工具后处理（扩展字段归一）的挂载点，不要优化掉。
    """
    resolved = resolve_input(origin, Tool)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is InputKind.TYPED:
        return Tool.model_validate_json(resolved.value.model_dump_json(by_alias=True, exclude_none=True))
    if resolved.kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        return parse_as(Tool, resolved.value, field="tool")
    raise UnsupportedTypeError("tool", origin)


def t_tools(origin: Any) -> Optional[List[Tool]]:
    """规范化 Tool 列表：类型化列表逐个走 t_tool，原始 JSON 按 List[Tool] 解析"""
    resolved = resolve_input(origin, Tool)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is InputKind.TYPED:
        return [t_tool(resolved.value)]  # type: ignore[list-item]
    if resolved.kind is InputKind.TYPED_LIST:
        return [t_tool(tool) for tool in resolved.value]  # type: ignore[misc]
    if resolved.kind is InputKind.RAW_JSON:
        data = load_raw_json(resolved.value, field="tools")
        if isinstance(data, dict):
            return [parse_as(Tool, data, field="tools")]
        if isinstance(data, list):
            return [t_tool(item) for item in data]  # type: ignore[misc]
    raise UnsupportedTypeError("tools", origin)


__all__ = ["t_schema", "t_speech_config", "t_tool", "t_tools"]
