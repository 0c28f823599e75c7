"""
后端上下文

每个客户端构造一次、之后只读共享的后端描述：当前后端以及 Vertex AI 所需的
project/location。所有 transformer 只读取它，不会修改。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Backend
from .metadata import BackendDefinition, get_backend_definition


@dataclass(frozen=True)
class BackendContext:
    """不可变的后端上下文"""

    backend: Backend
    project: Optional[str] = None
    location: Optional[str] = None

    def __post_init__(self) -> None:
        if self.backend is Backend.VERTEX_AI:
            if not self.project:
                raise ValueError("Vertex AI 后端必须提供 project")
            if not self.location:
                raise ValueError("Vertex AI 后端必须提供 location")

    @classmethod
    def gemini(cls) -> "BackendContext":
        return cls(backend=Backend.GEMINI_API)

    @classmethod
    def vertex(cls, project: str, location: str) -> "BackendContext":
        return cls(backend=Backend.VERTEX_AI, project=project, location=location)

    @property
    def is_vertex(self) -> bool:
        return self.backend is Backend.VERTEX_AI

    @property
    def definition(self) -> BackendDefinition:
        return get_backend_definition(self.backend)

    @property
    def resource_root(self) -> str:
        """Vertex AI 资源根路径 projects/{p}/locations/{l}；开发者 API 为空串。"""
        if not self.definition.qualified_resources:
            return ""
        return f"projects/{self.project}/locations/{self.location}"


__all__ = ["BackendContext"]
