"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:create_app --factory --reload
- 프로덕션: uv run askdurga-server
"""

import argparse
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.app.config import Settings, load_settings
from src.app.middleware import install_request_gate
from src.app.providers.factory import build_provider
from src.app.routes import explain
from src.app.services.explain import ProviderFactory
from src.core.logging import configure_logging

logger = logging.getLogger(__name__)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    provider_factory: ProviderFactory | None = None,
) -> FastAPI:
    """
    앱 생성.

    Args:
        settings: 불변 설정 (None이면 환경변수/default.yaml에서 로드)
        provider_factory: Settings → CompletionProvider (테스트에서 교체)

    Raises:
        ConfigError: 설정 검증 실패
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            f"AskDurga API starting: provider={settings.provider}, "
            f"model={settings.model}, origin={settings.frontend_url}"
        )
        yield

    app = FastAPI(
        title="AskDurga AI",
        description="코드 설명 / 영어 문법 교정 API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # handler에서 쓰는 상태는 생성 시점에 고정
    app.state.settings = settings
    app.state.provider_factory = provider_factory or build_provider
    app.state.rate_limiter = install_request_gate(app, settings)

    app.include_router(explain.api_router, prefix="/api", tags=["Explain API"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    return app


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    """askdurga-server: uvicorn으로 API 서버 실행."""
    import uvicorn

    parser = argparse.ArgumentParser(description="AskDurga AI API server")
    parser.add_argument("--host", default="0.0.0.0", help="바인드 주소")
    parser.add_argument("--port", type=int, default=None, help="포트 (기본: PORT 환경변수)")
    parser.add_argument("--log-level", default="INFO", help="로그 레벨")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    settings = load_settings()
    port = args.port or settings.port

    logger.info(f"API server listening on {port}")
    uvicorn.run(create_app(settings), host=args.host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
