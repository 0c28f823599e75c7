"""
genai-bridge

以统一的调用形态访问生成式 AI HTTP API 的两种后端（Gemini API / Vertex AI）。
核心是请求规范化层：把宽松的调用方输入转换为目标后端要求的规范结构与资源名。
"""

from genai_bridge.client import Client
from genai_bridge.core.backend import Backend, BackendContext

__version__ = "0.1.0"

__all__ = ["Backend", "BackendContext", "Client", "__version__"]
