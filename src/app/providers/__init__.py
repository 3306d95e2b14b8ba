"""
Completion Provider Abstraction.

모델/벤더 교체 가능하게 설계. 모델명은 설정(Settings)만 SSOT.
"""

from .anthropic import ClaudeProvider
from .base import (
    CompletionError,
    CompletionParams,
    CompletionProvider,
    CompletionResult,
    ProviderError,
)
from .factory import build_provider
from .openai_compat import OpenAICompatProvider

__all__ = [
    "CompletionProvider",
    "CompletionParams",
    "CompletionResult",
    "CompletionError",
    "ProviderError",
    "ClaudeProvider",
    "OpenAICompatProvider",
    "build_provider",
]
