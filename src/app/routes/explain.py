"""
Explain Routes.

- POST /api/explain-code → 코드 설명 / 문법 교정

본문 파싱은 application/json 일 때만 수행 (그 외 본문은 빈 객체 취급).
잘못된 JSON도 빈 객체로 보고 검증 단계에서 400으로 응답한다.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.app.services.explain import ExplainService, parse_payload

logger = logging.getLogger(__name__)

api_router = APIRouter()


async def read_json_body(request: Request) -> dict[str, Any]:
    """요청 본문 → dict. 파싱 불가/비 JSON이면 빈 dict."""
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type.lower():
        return {}

    raw = await request.body()
    if not raw:
        return {}

    try:
        return parse_payload(json.loads(raw))
    except ValueError as e:
        logger.info(f"Malformed JSON body ignored: {e}")
        return {}


def get_explain_service(request: Request) -> ExplainService:
    """app.state에서 설정/provider factory를 꺼내 서비스 생성."""
    return ExplainService(
        settings=request.app.state.settings,
        provider_factory=request.app.state.provider_factory,
    )


@api_router.post("/explain-code")
async def explain_code(request: Request) -> JSONResponse:
    """
    코드 설명 또는 문법 교정.

    Request: {"language": str, "code": str}
    Response 200: {"explanation": str, "language": str}
    Response 400: {"error": "Code is required"}
    Response 500: {"error": "Failed to Explain code"} | {"error": "Server Error", "details": str}
    """
    payload = await read_json_body(request)
    outcome = await get_explain_service(request).explain(payload)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
