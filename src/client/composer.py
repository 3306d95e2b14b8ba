"""
Chat Composer: 사용자 입력 → 백엔드 호출 → transcript 추가.

규칙:
- 제출 1회 = user 1줄 + ai 1줄 (실패 시 ai 줄은 사과 메시지)
- transcript는 append-only, 저장 실패는 로그만
- 요청 진행 중에는 새 제출 거부 (SubmissionPendingError)
"""

import logging
from typing import Protocol

from src.client.transcript import TranscriptStore
from src.domain.constants import APOLOGY_MESSAGE, RECENT_HISTORY_SIZE
from src.domain.errors import ErrorCodes, ExplainRequestError, SubmissionPendingError
from src.domain.schemas import ChatMessage, ChatRole, ChatState

logger = logging.getLogger(__name__)


class ExplainBackend(Protocol):
    """explain_code만 있으면 됨 (ExplainClient 또는 테스트 대역)."""

    async def explain_code(self, language: str, code: str) -> str: ...


class ChatComposer:
    """
    대화 상태 관리.

    Usage:
        composer = ChatComposer(ExplainClient(), TranscriptStore())
        state = await composer.submit("python", "print('hi')")
    """

    def __init__(self, backend: ExplainBackend, store: TranscriptStore):
        self.backend = backend
        self.store = store
        self.state = ChatState(history=store.load())

    @property
    def pending(self) -> bool:
        return self.state.loading

    @property
    def history(self) -> list[ChatMessage]:
        return list(self.state.history)

    async def submit(self, selected_language: str, user_input: str) -> ChatState:
        """
        한 번 제출.

        빈 입력도 그대로 전달 (클라이언트 측 검증 없음).

        Raises:
            SubmissionPendingError: 이전 제출이 아직 진행 중
        """
        if self.state.loading:
            raise SubmissionPendingError(ErrorCodes.SUBMISSION_PENDING)

        self.state.loading = True
        self.state.last_input = user_input
        try:
            try:
                result = await self.backend.explain_code(selected_language, user_input)
            except ExplainRequestError as e:
                logger.warning(f"Explain request failed: {e}")
                result = APOLOGY_MESSAGE
            except Exception:
                logger.error("Unexpected error during explain request", exc_info=True)
                result = APOLOGY_MESSAGE

            history = [
                *self.state.history,
                ChatMessage(role=ChatRole.USER, text=user_input),
                ChatMessage(role=ChatRole.AI, text=result),
            ]
            self._persist(history)
            self.state = ChatState(history=history, loading=False, last_input="")
        finally:
            self.state.loading = False

        return self.state

    def clear(self) -> ChatState:
        """기록 비우기."""
        if self.state.loading:
            raise SubmissionPendingError(ErrorCodes.SUBMISSION_PENDING)
        self._persist([])
        self.state = ChatState()
        return self.state

    def recent(self, n: int = RECENT_HISTORY_SIZE) -> list[ChatMessage]:
        """사이드바용: 앞에서부터 n개."""
        return self.state.history[:n]

    def _persist(self, history: list[ChatMessage]) -> None:
        result = self.store.save(history)
        if not result.success:
            logger.info(f"History not persisted: {result.error}")
