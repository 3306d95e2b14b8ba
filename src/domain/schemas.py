"""
Data schemas for AskDurga.

규칙:
- 와이어 필드명은 기존 클라이언트와 동일 (language, code, explanation)
- ChatMessage는 생성 후 변경 불가, transcript는 append-only
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.constants import UNKNOWN_LANGUAGE

# =============================================================================
# Chat Transcript
# =============================================================================

class ChatRole(str, Enum):
    """대화 역할. 에러 전용 역할은 없음 (실패도 ai 턴으로 기록)."""
    USER = "user"
    AI = "ai"


@dataclass(frozen=True)
class ChatMessage:
    """대화 한 줄."""
    role: ChatRole
    text: str

    def to_dict(self) -> dict[str, str]:
        """JSON 직렬화용."""
        return {"role": self.role.value, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """
        dict → ChatMessage.

        Raises:
            ValueError: role이 user/ai가 아니거나 text가 문자열이 아닐 때
            KeyError: 필드 누락
        """
        text = data["text"]
        if not isinstance(text, str):
            raise ValueError(f"text must be a string, got {type(text).__name__}")
        return cls(role=ChatRole(data["role"]), text=text)


@dataclass
class ChatState:
    """
    composer 상태.

    history: 전체 transcript
    loading: 요청 진행 중 여부
    last_input: 입력창 내용 (제출 후 비움)
    """
    history: list[ChatMessage] = field(default_factory=list)
    loading: bool = False
    last_input: str = ""


@dataclass
class SaveResult:
    """
    transcript 저장 결과.

    로그 용도로만 사용. 제어 흐름에 쓰지 않는다.
    """
    success: bool
    error: str | None = None


# =============================================================================
# Wire Payloads
# =============================================================================

@dataclass
class ExplainRequest:
    """클라이언트 → 서버 요청 본문."""
    language: str
    code: str

    def to_dict(self) -> dict[str, str]:
        return {"language": self.language, "code": self.code}


@dataclass
class ExplainResponse:
    """서버 → 클라이언트 성공 응답 본문."""
    explanation: str
    language: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {
            "explanation": self.explanation,
            "language": self.language or UNKNOWN_LANGUAGE,
        }


# =============================================================================
# Prompt Templates
# =============================================================================

class TemplateKind(str, Enum):
    """
    프롬프트 템플릿 종류 (닫힌 집합).

    GRAMMAR: 영어 문장 문법 교정
    CODE: 코드 단계별 주석 설명
    """
    GRAMMAR = "grammar"
    CODE = "code"
