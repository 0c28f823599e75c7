"""
后端核心模块

统一管理后端枚举、策略表（元数据）和不可变上下文。

模块组成：
- enums.py: Backend 枚举定义
- metadata.py: 后端策略表（模型路径、资源作用域、能力限制等）
- context.py: BackendContext 不可变上下文
"""

from genai_bridge.core.backend.context import BackendContext
from genai_bridge.core.backend.enums import Backend
from genai_bridge.core.backend.metadata import (
    BACKEND_DEFINITIONS,
    BackendDefinition,
    get_backend_definition,
    resolve_backend,
)

__all__ = [
    # Enums
    "Backend",
    # Metadata
    "BackendDefinition",
    "BACKEND_DEFINITIONS",
    "get_backend_definition",
    "resolve_backend",
    # Context
    "BackendContext",
]
