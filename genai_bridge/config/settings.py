"""
客户端配置
从环境变量或 .env 文件加载配置
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    def __init__(self) -> None:
        # 日志级别
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # 鉴权配置
        # GOOGLE_API_KEY 优先，兼容 GEMINI_API_KEY
        self.api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
        # Vertex AI 使用的 OAuth access token（凭据获取不在本库范围内）
        self.access_token: Optional[str] = os.getenv("GOOGLE_ACCESS_TOKEN")

        # 后端选择
        # GOOGLE_GENAI_USE_VERTEXAI=true 时默认使用 Vertex AI
        # GOOGLE_GENAI_BACKEND 接受后端名或别名（gemini / vertex / mldev ...），优先于上面的开关
        self.use_vertexai = _env_bool("GOOGLE_GENAI_USE_VERTEXAI", False)
        self.backend: Optional[str] = os.getenv("GOOGLE_GENAI_BACKEND") or None
        self.project: Optional[str] = os.getenv("GOOGLE_CLOUD_PROJECT")
        self.location = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")

        # 服务地址覆盖（为空时使用后端策略表中的默认地址）
        self.gemini_base_url: Optional[str] = os.getenv("GEMINI_BASE_URL") or None
        self.vertex_base_url: Optional[str] = os.getenv("VERTEX_BASE_URL") or None

        # HTTP 请求超时配置（秒）
        self.http_connect_timeout = float(os.getenv("HTTP_CONNECT_TIMEOUT", "10.0"))
        self.http_read_timeout = float(os.getenv("HTTP_READ_TIMEOUT", "300.0"))
        self.http_write_timeout = float(os.getenv("HTTP_WRITE_TIMEOUT", "60.0"))
        self.http_pool_timeout = float(os.getenv("HTTP_POOL_TIMEOUT", "10.0"))

        # 连接池配置
        self.http_max_connections = int(os.getenv("HTTP_MAX_CONNECTIONS", "100"))
        self.http_keepalive_connections = int(os.getenv("HTTP_KEEPALIVE_CONNECTIONS", "20"))
        self.http_keepalive_expiry = float(os.getenv("HTTP_KEEPALIVE_EXPIRY", "30.0"))


config = Config()
