"""
Anthropic (Claude) Provider.

AI_PROVIDER=anthropic 일 때 사용.
- system 메시지는 messages가 아니라 system 파라미터로 전달
- 응답의 첫 번째 text 블록만 사용
"""

import logging
import os
from typing import Any

from src.domain.errors import ErrorCodes

from .base import (
    CompletionError,
    CompletionParams,
    CompletionProvider,
    CompletionResult,
    ProviderError,
    compute_hash,
)

logger = logging.getLogger(__name__)

# anthropic API는 max_tokens 필수
DEFAULT_MAX_TOKENS = 800


class ClaudeProvider(CompletionProvider):
    """
    Claude API Provider.

    Usage:
        provider = ClaudeProvider(api_key=key)
        result = await provider.complete(messages, params)
    """

    name = "anthropic"

    def __init__(self, api_key: str | None = None):
        """
        Args:
            api_key: API 키 (환경변수 MY_ANTHROPIC_KEY 또는 ANTHROPIC_API_KEY 사용 가능)

        Raises:
            ProviderError: API 키가 없을 때 (fail-fast)
        """
        # API 키 결정: 인자 > MY_ANTHROPIC_KEY > ANTHROPIC_API_KEY
        self.api_key = (
            api_key
            or os.environ.get("MY_ANTHROPIC_KEY")
            or os.environ.get("ANTHROPIC_API_KEY")
        )

        if not self.api_key:
            raise ProviderError(
                ErrorCodes.API_KEY_MISSING,
                "Anthropic API key is not configured. "
                "Set MY_ANTHROPIC_KEY or ANTHROPIC_API_KEY.",
            )

        self._client: Any = None

    def _get_client(self) -> Any:
        """Anthropic 클라이언트 (lazy init)."""
        if self._client is None:
            try:
                import anthropic

                self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
            except ImportError as e:
                raise ProviderError(
                    ErrorCodes.PROVIDER_NOT_INSTALLED,
                    "anthropic package not installed. Run: pip install anthropic",
                ) from e
        return self._client

    async def aclose(self) -> None:
        """연결 풀 정리 (요청마다 생성되는 provider)."""
        client, self._client = self._client, None
        if client is not None:
            await client.close()

    async def complete(
        self,
        messages: list[dict[str, str]],
        params: CompletionParams,
    ) -> CompletionResult:
        """채팅 완성 호출 (재시도 없음)."""
        client = self._get_client()
        system, conversation = self._split_system(messages)

        api_kwargs: dict[str, Any] = {
            "model": params.model,
            "max_tokens": params.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": conversation,
        }
        if system:
            api_kwargs["system"] = system
        if params.temperature is not None:
            api_kwargs["temperature"] = params.temperature

        try:
            response = await client.messages.create(**api_kwargs)
        except Exception as e:
            logger.error(f"Claude API call failed: {e}")
            raise CompletionError(
                ErrorCodes.COMPLETION_FAILED, str(e), model=params.model
            ) from e
        finally:
            await self.aclose()

        return CompletionResult(
            text=self._extract_text(response),
            provider=self.name,
            model_requested=params.model,
            model_used=getattr(response, "model", None) or params.model,
            request_id=getattr(response, "id", None),
            prompt_hash=compute_hash(messages),
        )

    @staticmethod
    def _split_system(
        messages: list[dict[str, str]],
    ) -> tuple[str, list[dict[str, str]]]:
        """system 메시지 분리. 여러 개면 줄바꿈으로 합침."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        conversation = [m for m in messages if m["role"] != "system"]
        return "\n\n".join(system_parts), conversation

    @staticmethod
    def _extract_text(response: Any) -> str | None:
        """첫 번째 content 블록의 텍스트. 없으면 None."""
        content = getattr(response, "content", None)
        if not content:
            return None
        text = getattr(content[0], "text", None)
        return text or None
