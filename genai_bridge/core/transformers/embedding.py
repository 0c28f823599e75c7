"""
Embedding 内容压平

Gemini API 的 embedding 接口接受完整 Content；Vertex AI 只接受纯文本列表。
调用方应先用 t_contents 规范化，本函数不解析原始 JSON。
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from genai_bridge.core.backend import BackendContext
from genai_bridge.core.exceptions import UnsupportedTypeError
from genai_bridge.models.types import Content

from .inputs import InputKind, resolve_input


def t_contents_for_embed(ctx: BackendContext, origin: Any) -> Optional[List[Union[Content, str]]]:
    """
    按后端压平 embedding 内容

    - Gemini API：每条 Content 原样输出
    - Vertex AI：按消息、片段顺序输出文本，跳过无文本的片段
    """
    resolved = resolve_input(origin, Content)
    if resolved.kind is InputKind.NONE:
        return None
    if resolved.kind is not InputKind.TYPED_LIST:
        raise UnsupportedTypeError("contents", origin)

    contents: List[Content] = resolved.value
    if not ctx.definition.embed_text_only:
        return list(contents)

    texts: List[Union[Content, str]] = []
    for content in contents:
        for part in content.parts or []:
            if part.text is not None:
                texts.append(part.text)
    return texts


__all__ = ["t_contents_for_embed"]
