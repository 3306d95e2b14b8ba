"""
Explain API 클라이언트.

POST {base_url}api/explain-code 한 번 호출, explanation 문자열만 반환.
200이 아니거나 전송 오류면 ExplainRequestError (composer가 사과 메시지로 대체).
"""

import logging
import os
from typing import Any

import httpx

from src.domain.constants import EXPLAIN_ROUTE
from src.domain.errors import ErrorCodes, ExplainRequestError
from src.domain.schemas import ExplainRequest

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080/"


def default_api_url() -> str:
    """ASKDURGA_API_URL 환경변수 또는 로컬 기본값."""
    return os.environ.get("ASKDURGA_API_URL") or DEFAULT_API_URL


class ExplainClient:
    """
    백엔드 explain 호출기.

    Usage:
        async with ExplainClient("http://localhost:8080/") as client:
            text = await client.explain_code("python", "print('hi')")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: 서버 주소 (None이면 default_api_url())
            timeout: 요청 타임아웃 초 (None이면 httpx 기본값)
            transport: 테스트용 transport 주입
        """
        self.base_url = base_url or default_api_url()
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    @property
    def endpoint(self) -> str:
        return self.base_url.rstrip("/") + EXPLAIN_ROUTE

    async def explain_code(self, language: str, code: str) -> str:
        """
        설명 요청.

        Raises:
            ExplainRequestError: 전송 오류, 200 이외 상태, 응답 형식 오류
        """
        payload = ExplainRequest(language=language, code=code).to_dict()
        logger.debug(f"request language={language!r}, code_length={len(code)}")

        try:
            response = await self._client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise ExplainRequestError(
                ErrorCodes.REQUEST_FAILED, url=self.endpoint, error=str(e)
            ) from e

        if response.status_code != 200:
            raise ExplainRequestError(
                ErrorCodes.UNEXPECTED_STATUS,
                status=response.status_code,
                body=response.text[:200],
            )

        try:
            explanation = response.json()["explanation"]
        except (ValueError, KeyError, TypeError) as e:
            raise ExplainRequestError(
                ErrorCodes.REQUEST_FAILED, error=f"Malformed response: {e}"
            ) from e

        if not isinstance(explanation, str):
            raise ExplainRequestError(
                ErrorCodes.REQUEST_FAILED, error="explanation is not a string"
            )
        return explanation

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ExplainClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
