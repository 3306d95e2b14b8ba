"""
OpenAI 호환 Provider.

기본 엔드포인트는 Nebius AI Studio (openai SDK + base_url).
응답의 첫 번째 choice의 message.content만 사용.
Provider는 요청마다 생성되므로 complete()가 끝나면 클라이언트를 닫는다.
"""

import logging
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


class OpenAICompatProvider(CompletionProvider):
    """
    OpenAI Chat Completions 호환 Provider.

    Usage:
        provider = OpenAICompatProvider(api_key=key, base_url="https://api.studio.nebius.com/v1/")
        result = await provider.complete(messages, params)
    """

    name = "openai"

    def __init__(self, api_key: str | None, base_url: str | None = None):
        """
        Args:
            api_key: API 키 (설정의 API_KEY)
            base_url: OpenAI 호환 엔드포인트 (None이면 SDK 기본값)

        Raises:
            ProviderError: API 키가 없을 때 (fail-fast)
        """
        if not api_key:
            raise ProviderError(
                ErrorCodes.API_KEY_MISSING,
                "API key is not configured. Set the API_KEY environment variable.",
            )
        self.api_key = api_key
        self.base_url = base_url
        self._client: Any = None

    def _get_client(self) -> Any:
        """AsyncOpenAI 클라이언트 (lazy init)."""
        if self._client is None:
            try:
                import openai

                self._client = openai.AsyncOpenAI(
                    api_key=self.api_key,
                    base_url=self.base_url,
                )
            except ImportError as e:
                raise ProviderError(
                    ErrorCodes.PROVIDER_NOT_INSTALLED,
                    "openai package not installed. Run: pip install openai",
                ) from e
        return self._client

    async def aclose(self) -> None:
        """연결 풀 정리. 다음 호출 시 클라이언트를 새로 만든다."""
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

        api_kwargs: dict[str, Any] = {
            "model": params.model,
            "messages": messages,
        }
        if params.temperature is not None:
            api_kwargs["temperature"] = params.temperature
        if params.max_tokens is not None:
            api_kwargs["max_tokens"] = params.max_tokens

        try:
            response = await client.chat.completions.create(**api_kwargs)
        except Exception as e:
            logger.error(f"Completion call failed: {e}")
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
    def _extract_text(response: Any) -> str | None:
        """첫 번째 choice의 텍스트. 없거나 비어 있으면 None."""
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return content or None
