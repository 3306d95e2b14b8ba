"""
Completion Provider 추상 인터페이스.

- Provider 추상화로 모델/벤더 교체 가능 (openai 호환 엔드포인트, anthropic)
- model_requested + model_used 기록
- 재시도 없음: provider 실패는 그대로 요청 실패로 이어짐
"""

import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Call Parameters
# =============================================================================

@dataclass(frozen=True)
class CompletionParams:
    """
    LLM 호출 파라미터.

    요청마다 고정값 사용 (temperature 0.3, max_tokens 800).
    """
    model: str
    temperature: float | None = None
    max_tokens: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


def compute_hash(messages: list[dict[str, str]]) -> str:
    """메시지 목록의 SHA-256 해시 (로그 검색용)."""
    content = json.dumps(messages, ensure_ascii=False, sort_keys=True)
    return f"sha256:{hashlib.sha256(content.encode()).hexdigest()[:16]}"


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class CompletionResult:
    """
    완성 결과.

    text: 첫 번째 후보의 텍스트. 추출할 텍스트가 없으면 None
    model_requested: 설정된 모델
    model_used: 실제 응답한 모델
    """
    text: str | None = None
    provider: str | None = None
    model_requested: str | None = None
    model_used: str | None = None
    request_id: str | None = None
    prompt_hash: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "text": self.text,
            "provider": self.provider,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "request_id": self.request_id,
            "prompt_hash": self.prompt_hash,
        }
        # None 값 제거
        return {k: v for k, v in result.items() if v is not None}


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """
    Provider 관련 에러.

    message는 원인 에러의 메시지를 그대로 담는다 (응답 details로 노출).
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class CompletionError(ProviderError):
    """완성 API 호출 실패."""
    pass


# =============================================================================
# Abstract Provider
# =============================================================================

class CompletionProvider(ABC):
    """
    Completion Provider 추상 인터페이스.

    역할: role 태그가 붙은 메시지 목록 → 생성 텍스트 (로직 없음, 전달만)
    """

    name: str = "base"

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        params: CompletionParams,
    ) -> CompletionResult:
        """
        채팅 완성 호출.

        Args:
            messages: [{"role": "system"|"user", "content": ...}, ...]
            params: 모델/온도/최대 토큰

        Returns:
            CompletionResult (text가 None이면 추출 실패)

        Raises:
            CompletionError: API 호출 실패
        """
        ...

    async def aclose(self) -> None:
        """보유한 SDK 클라이언트 정리. complete()가 끝날 때 호출."""
        return None
