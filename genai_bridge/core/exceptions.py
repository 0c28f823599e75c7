"""
异常定义

规范化层异常（本地校验失败，尚未发出任何网络请求，不可重试）：
- UnsupportedTypeError: 输入形态不在可接受集合内
- SchemaViolationError: 原始 JSON 无法按规范 schema 解析
- CapabilityNotSupportedError: 结构合法但被后端/调用模式策略禁止
- MimeTypeError: Blob 的 MIME 类型不属于要求的类别

传输层异常（由上游 HTTP 错误响应转换而来）：
- APIError / ClientError (4xx) / ServerError (5xx)

注意：CapabilityNotSupportedError 与 MimeTypeError 的 message 会被调用方原样展示，
文案属于对外契约，不要随意修改。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class TransformerError(ValueError):
    """规范化失败的基类"""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class UnsupportedTypeError(TransformerError, TypeError):
    """
    输入形态不受支持

    message 总是包含被拒绝输入的具体运行时类型名。
    """

    def __init__(self, field: str, origin: Any) -> None:
        self.type_name = type(origin).__name__
        super().__init__(field, f"Unsupported {field} type: {self.type_name}")


class SchemaViolationError(TransformerError):
    """原始 JSON 无法按规范 schema 解析，保留底层诊断信息"""

    def __init__(self, field: str, diagnostic: Any) -> None:
        self.diagnostic = diagnostic
        super().__init__(field, f"Invalid {field} payload: {diagnostic}")


class CapabilityNotSupportedError(TransformerError):
    """结构合法的值被后端或调用模式禁止（文案固定）"""

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        super().__init__(parameter, message)


class MimeTypeError(TransformerError):
    """Blob MIME 类型不属于要求的类别，message 总是给出实际类型或字面量 null"""

    def __init__(self, kind: str, mime_type: Optional[str]) -> None:
        self.kind = kind
        self.mime_type = mime_type
        super().__init__(
            f"{kind} blob",
            f"Unsupported mime type for {kind} blob: {mime_type or 'null'}",
        )


class APIError(Exception):
    """
    上游 API 返回错误

    从响应体的 {"error": {"code", "message", "status", "details"}} 中提取信息。
    """

    def __init__(
        self,
        code: int,
        response_json: Optional[Dict[str, Any]] = None,
        *,
        status: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[List[Any]] = None,
    ) -> None:
        self.code = code
        self.response_json = response_json or {}
        self.status = status
        self.details = details or []
        self.message = message or ""
        text = f"{code} {status}." if status else f"{code}."
        if self.message:
            text = f"{text} {self.message}"
        if self.details:
            text = f"{text} Details: {self.details}"
        super().__init__(text)

    @classmethod
    def from_response_json(cls, code: int, body: Any) -> "APIError":
        """根据状态码选择子类并解析错误信封"""
        error: Dict[str, Any] = {}
        if isinstance(body, dict):
            raw_error = body.get("error", body)
            if isinstance(raw_error, dict):
                error = raw_error
            elif raw_error is not None:
                error = {"message": str(raw_error)}
        elif isinstance(body, list) and body and isinstance(body[0], dict):
            # streamGenerateContent 风格的 JSON 数组错误
            return cls.from_response_json(code, body[0])
        elif body:
            error = {"message": str(body)}

        if 400 <= code < 500:
            error_cls: type[APIError] = ClientError
        elif code >= 500:
            error_cls = ServerError
        else:
            error_cls = APIError
        return error_cls(
            code,
            body if isinstance(body, dict) else None,
            status=error.get("status"),
            message=error.get("message"),
            details=error.get("details"),
        )


class ClientError(APIError):
    """4xx 错误（请求本身有问题，不可重试）"""


class ServerError(APIError):
    """5xx 错误"""


__all__ = [
    "TransformerError",
    "UnsupportedTypeError",
    "SchemaViolationError",
    "CapabilityNotSupportedError",
    "MimeTypeError",
    "APIError",
    "ClientError",
    "ServerError",
]
