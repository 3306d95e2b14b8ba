"""
Explain Service: 요청 검증 → 템플릿 선택 → provider 호출 → 텍스트 전달.

상태 코드 정책:
- 400: code 또는 language 누락/falsy
- 500: provider가 텍스트를 돌려주지 않음 / 호출 중 예외
- 200: {explanation, language}

재시도/캐시 없음. 요청 간 공유 상태 없음 (provider는 요청마다 생성).
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.app.config import Settings
from src.app.providers.base import CompletionParams, CompletionProvider, ProviderError
from src.app.providers.factory import build_params, build_provider
from src.app.services.prompts import build_messages
from src.domain.constants import (
    ERROR_CODE_REQUIRED,
    ERROR_FAILED_TO_EXPLAIN,
    ERROR_SERVER,
)
from src.domain.schemas import ExplainResponse

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings], CompletionProvider]


@dataclass
class ExplainOutcome:
    """HTTP 상태 + JSON 본문."""
    status_code: int
    body: dict[str, Any]


def is_truthy(value: Any) -> bool:
    """
    JavaScript truthiness.

    None, False, 0, NaN, "" → False. 그 외(빈 list/dict 포함) → True.
    "0"과 공백 문자열은 True.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def parse_payload(body: Any) -> dict[str, Any]:
    """JSON 객체가 아닌 본문은 빈 dict로 취급."""
    return body if isinstance(body, dict) else {}


class ExplainService:
    """
    /api/explain-code 처리기.

    Usage:
        service = ExplainService(settings)
        outcome = await service.explain({"language": "python", "code": "print(1)"})
    """

    def __init__(
        self,
        settings: Settings,
        provider_factory: ProviderFactory = build_provider,
    ):
        self.settings = settings
        self.provider_factory = provider_factory

    @property
    def params(self) -> CompletionParams:
        return build_params(self.settings)

    async def explain(self, payload: dict[str, Any]) -> ExplainOutcome:
        try:
            code = payload.get("code")
            language = payload.get("language")
            logger.info(
                f"Explain request: language={language!r}, code_length={len(str(code or ''))}"
            )

            if not is_truthy(code) or not is_truthy(language):
                return ExplainOutcome(400, {"error": ERROR_CODE_REQUIRED})

            kind, messages = build_messages(language, code)

            provider = self.provider_factory(self.settings)
            result = await provider.complete(messages, self.params)
            logger.debug(f"Completion result: {result.to_dict()}")

            if not result.text:
                logger.warning(
                    f"Provider returned no text (template={kind.value}, "
                    f"model={result.model_used})"
                )
                return ExplainOutcome(500, {"error": ERROR_FAILED_TO_EXPLAIN})

            response = ExplainResponse(explanation=result.text, language=language)
            return ExplainOutcome(200, response.to_dict())

        except Exception as e:
            logger.error("askDurga AI api error", exc_info=True)
            details = e.message if isinstance(e, ProviderError) else str(e)
            return ExplainOutcome(500, {"error": ERROR_SERVER, "details": details})
