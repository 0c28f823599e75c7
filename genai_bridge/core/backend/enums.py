"""
后端枚举定义

定义客户端可对接的两种后端接入面，决定资源路径语法与参数可用性。
"""

from enum import Enum


class Backend(Enum):
    """后端枚举 - 决定请求规范化的路径语法与能力限制"""

    GEMINI_API = "GEMINI_API"  # 开发者 API（API Key 鉴权，资源路径不带 project/location）
    VERTEX_AI = "VERTEX_AI"  # 企业托管 API（project/location 作用域）


__all__ = ["Backend"]
