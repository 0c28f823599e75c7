"""
能力门禁

某些结构合法的值被特定后端或调用模式禁止，需要在任何网络请求之前快速失败。
约定为“先规范化，再门禁”：门禁是规范化结果上的后置条件，
与解析分支解耦，可以独立组合或扩展。

错误文案会被调用方原样展示，属于对外契约。
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Tuple

from genai_bridge.core.backend import BackendContext
from genai_bridge.core.exceptions import CapabilityNotSupportedError, UnsupportedTypeError
from genai_bridge.core.logger import logger
from genai_bridge.models.types import SpeechConfig

from .inputs import InputKind, parse_as, resolve_input

LIVE_MULTI_SPEAKER_MESSAGE = "multiSpeakerVoiceConfig parameter is not supported in the live API."


def unsupported_parameter_message(parameter: str, backend_name: str) -> str:
    return f"{parameter} parameter is not supported in {backend_name}."


def reject_live_multi_speaker(speech_config: Optional[SpeechConfig]) -> Optional[SpeechConfig]:
    """实时接口不支持多说话人配置"""
    if speech_config is not None and speech_config.multi_speaker_voice_config is not None:
        logger.warning("实时接口拒绝 multiSpeakerVoiceConfig")
        raise CapabilityNotSupportedError("multiSpeakerVoiceConfig", LIVE_MULTI_SPEAKER_MESSAGE)
    return speech_config


def t_live_speech_config(origin: Any) -> Optional[SpeechConfig]:
    """
    实时接口的语音配置

    接受 None / SpeechConfig / 原始 JSON；无论输入是哪种形态，
    解析结果带有 multi_speaker_voice_config 时都会被拒绝。
    """
    resolved = resolve_input(origin, SpeechConfig)
    if resolved.kind is InputKind.NONE:
        speech_config = None
    elif resolved.kind is InputKind.TYPED:
        speech_config = resolved.value
    elif resolved.kind is InputKind.RAW_JSON and not isinstance(resolved.value, (list, tuple)):
        speech_config = parse_as(SpeechConfig, resolved.value, field="speechConfig")
    else:
        raise UnsupportedTypeError("speechConfig", origin)

    return reject_live_multi_speaker(speech_config)


def _iter_present(payload: Any, path: Tuple[str, ...]) -> Iterator[Any]:
    """按路径遍历请求体，"*" 匹配列表中的每个元素；只产出非 None 的命中值"""
    if not path:
        if payload is not None:
            yield payload
        return

    head, rest = path[0], path[1:]
    if head == "*":
        if isinstance(payload, list):
            for item in payload:
                yield from _iter_present(item, rest)
        return
    if isinstance(payload, Mapping) and head in payload:
        yield from _iter_present(payload[head], rest)


def reject_unsupported_parameters(ctx: BackendContext, payload: Mapping[str, Any]) -> None:
    """
    后端参数门禁

    在线上格式（camelCase）请求体上检查当前后端禁止的参数，按策略表顺序
    命中第一个即失败，例如：
        labels parameter is not supported in Gemini API.
        multiSpeakerVoiceConfig parameter is not supported in Vertex AI.
    """
    definition = ctx.definition
    for path in definition.unsupported_parameters:
        for _ in _iter_present(payload, path):
            parameter = path[-1]
            logger.warning(
                "请求参数不被后端支持: parameter={}, backend={}",
                parameter,
                definition.display_name,
            )
            raise CapabilityNotSupportedError(
                parameter,
                unsupported_parameter_message(parameter, definition.display_name),
            )


__all__ = [
    "LIVE_MULTI_SPEAKER_MESSAGE",
    "unsupported_parameter_message",
    "reject_live_multi_speaker",
    "t_live_speech_config",
    "reject_unsupported_parameters",
]
