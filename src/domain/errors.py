"""
Error definitions for AskDurga.

규칙:
- 서버는 provider를 재시도하지 않고, 클라이언트는 서버를 재시도하지 않음
- 모든 실패는 종단(terminal): JSON 에러 본문 또는 사과 메시지로 표면화
"""

from typing import Any


class AskDurgaError(Exception):
    """
    AskDurga 공통 에러.

    Usage:
        raise ConfigError(ErrorCodes.INVALID_PORT, value="abc")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ConfigError(AskDurgaError):
    """시작 시 설정 검증 실패. 프로세스를 띄우지 않는다."""
    pass


class SubmissionPendingError(AskDurgaError):
    """이전 요청이 끝나기 전에 새 제출이 들어옴 (UI 경계에서 거부)."""
    pass


class ExplainRequestError(AskDurgaError):
    """
    클라이언트 측 요청 실패.

    전송 오류 또는 200이 아닌 응답. composer가 사과 메시지로 대체한다.
    """
    pass


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Config ===
    INVALID_PORT = "INVALID_PORT"
    INVALID_PROVIDER = "INVALID_PROVIDER"
    INVALID_LIMIT = "INVALID_LIMIT"
    INVALID_CONFIG_FILE = "INVALID_CONFIG_FILE"
    INVALID_TEMPERATURE = "INVALID_TEMPERATURE"
    MODEL_REQUIRED = "MODEL_REQUIRED"

    # === Provider ===
    API_KEY_MISSING = "API_KEY_MISSING"
    PROVIDER_NOT_INSTALLED = "PROVIDER_NOT_INSTALLED"
    COMPLETION_FAILED = "COMPLETION_FAILED"

    # === Client ===
    SUBMISSION_PENDING = "SUBMISSION_PENDING"
    REQUEST_FAILED = "REQUEST_FAILED"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
