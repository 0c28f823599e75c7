"""
请求规范化子模块（Transformers）

纯函数、无状态、无 I/O：把宽松的调用方输入转换为目标后端要求的规范结构。

对外提供：
- names: 模型名 / 资源名规范化
- contents: 消息内容规范化
- values: Schema / Tool / SpeechConfig 规范化
- media: Blob 规范化与 MIME 类别校验
- gates: 能力门禁（后端/调用模式参数限制）
- embedding: Embedding 内容压平

t_live_speech_config 与 t_blobs 面向实时（live）会话；实时会话的连接与收发不在本包内，
这里只提供其输入的规范化。
"""

from genai_bridge.core.transformers.contents import t_content, t_contents
from genai_bridge.core.transformers.embedding import t_contents_for_embed
from genai_bridge.core.transformers.gates import (
    LIVE_MULTI_SPEAKER_MESSAGE,
    reject_unsupported_parameters,
    t_live_speech_config,
)
from genai_bridge.core.transformers.inputs import InputKind, ResolvedInput, resolve_input
from genai_bridge.core.transformers.media import t_audio_blob, t_blob, t_blobs, t_image_blob
from genai_bridge.core.transformers.names import (
    t_cached_content_name,
    t_caches_model,
    t_file_name,
    t_model,
    t_models_url,
    t_resource_name,
)
from genai_bridge.core.transformers.values import t_schema, t_speech_config, t_tool, t_tools

__all__ = [
    # Inputs
    "InputKind",
    "ResolvedInput",
    "resolve_input",
    # Names
    "t_model",
    "t_models_url",
    "t_resource_name",
    "t_caches_model",
    "t_cached_content_name",
    "t_file_name",
    # Contents
    "t_contents",
    "t_content",
    # Values
    "t_schema",
    "t_speech_config",
    "t_tool",
    "t_tools",
    # Media
    "t_blob",
    "t_blobs",
    "t_image_blob",
    "t_audio_blob",
    # Gates
    "LIVE_MULTI_SPEAKER_MESSAGE",
    "t_live_speech_config",
    "reject_unsupported_parameters",
    # Embedding
    "t_contents_for_embed",
]
