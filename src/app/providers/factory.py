"""Settings → CompletionProvider."""

from typing import TYPE_CHECKING

from .anthropic import ClaudeProvider
from .base import CompletionParams, CompletionProvider
from .openai_compat import OpenAICompatProvider

if TYPE_CHECKING:
    from src.app.config import Settings


def build_provider(settings: "Settings") -> CompletionProvider:
    """
    설정된 provider 생성 (요청마다 호출).

    Raises:
        ProviderError: API 키 누락
    """
    if settings.provider == "anthropic":
        return ClaudeProvider(api_key=settings.anthropic_api_key)
    return OpenAICompatProvider(api_key=settings.api_key, base_url=settings.base_url)


def build_params(settings: "Settings") -> CompletionParams:
    """고정 호출 파라미터."""
    return CompletionParams(
        model=settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
