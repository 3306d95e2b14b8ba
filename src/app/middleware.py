"""
Request gate 미들웨어.

모든 요청이 라우트 전에 통과:
1. 보안 헤더 (helmet 기본값과 동일)
2. CORS (단일 origin 허용, credentials 헤더 없음) - fastapi CORSMiddleware
3. 고정 윈도우 rate limit (클라이언트 주소별)
4. 본문 크기 상한

install_request_gate()가 위 순서대로 바깥→안쪽에 배치한다.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.app.config import Settings
from src.domain.constants import BODY_TOO_LARGE_MESSAGE, RATE_LIMIT_MESSAGE

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

# =============================================================================
# Security Headers
# =============================================================================

SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """모든 응답에 보안 헤더 추가 (라우트가 이미 설정한 값은 유지)."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


# =============================================================================
# Rate Limit
# =============================================================================

@dataclass
class RateLimitDecision:
    """한 요청에 대한 판정."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds


class FixedWindowRateLimiter:
    """
    고정 윈도우 카운터.

    키별로 (윈도우 시작 시각, 카운트)를 보관.
    윈도우가 끝나면 카운트 리셋. 이벤트 루프 스레드에서만 호출.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> RateLimitDecision:
        """요청 1회 기록 후 허용 여부 반환."""
        now = self.clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0

        count += 1
        self._windows[key] = (start, count)
        self._prune(now)

        return RateLimitDecision(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(self.limit - count, 0),
            reset_at=start + self.window_seconds,
        )

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        """만료된 윈도우 제거 (키가 많이 쌓였을 때만)."""
        if len(self._windows) < 1024:
            return
        expired = [
            key
            for key, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """클라이언트 주소별 rate limit. 초과 시 429 + 고정 문구."""

    def __init__(self, app, limiter: FixedWindowRateLimiter):  # type: ignore[no-untyped-def]
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        client_key = request.client.host if request.client else "unknown"
        decision = self.limiter.hit(client_key)

        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(int(decision.reset_at)),
        }

        if not decision.allowed:
            retry_after = max(int(decision.reset_at - self.limiter.clock()), 0)
            logger.warning(f"Rate limit exceeded for {client_key}")
            return PlainTextResponse(
                RATE_LIMIT_MESSAGE,
                status_code=429,
                headers={**headers, "Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


# =============================================================================
# Body Size
# =============================================================================

class BodyTooLargeError(Exception):
    """수신한 본문이 상한을 넘음 (BodySizeLimitMiddleware 내부 신호)."""

    def __init__(self, received: int, limit: int):
        self.received = received
        self.limit = limit
        super().__init__(f"Request body too large: {received} > {limit}")


class BodySizeLimitMiddleware:
    """
    본문 상한 → 413.

    Content-Length가 있으면 먼저 거부하고,
    없거나(chunked) 거짓이어도 receive를 감싸 실제 수신 바이트를 센다.
    응답이 이미 시작된 뒤에는 413으로 바꿀 수 없으므로 예외를 그대로 전파.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_body_bytes:
                logger.warning(
                    f"Request body too large: {content_length} > {self.max_body_bytes}"
                )
                await self._reject(scope, receive, send)
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise BodyTooLargeError(received, self.max_body_bytes)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except BodyTooLargeError as e:
            if response_started:
                raise
            logger.warning(str(e))
            await self._reject(scope, receive, send)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send) -> None:
        response = PlainTextResponse(BODY_TOO_LARGE_MESSAGE, status_code=413)
        await response(scope, receive, send)


# =============================================================================
# Install
# =============================================================================

def install_request_gate(
    app: FastAPI,
    settings: Settings,
    limiter: FixedWindowRateLimiter | None = None,
) -> FixedWindowRateLimiter:
    """
    미들웨어 설치.

    add_middleware는 마지막에 추가한 것이 가장 바깥 → 안쪽부터 역순으로 추가.

    Returns:
        사용 중인 limiter (테스트에서 리셋용)
    """
    if limiter is None:
        limiter = FixedWindowRateLimiter(
            limit=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_seconds,
        )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    return limiter
