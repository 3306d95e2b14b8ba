"""
Pytest fixtures for AskDurga tests.

구성:
- 설정(Settings), 가짜 provider, 앱/TestClient
- 네트워크 호출 없음: provider는 항상 mock
"""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.config import Settings
from src.app.main import create_app
from src.app.providers.base import CompletionProvider, CompletionResult

# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """테스트용 설정 (API 키 포함)."""
    return Settings(api_key="test-api-key", frontend_url="http://localhost:3000")


# =============================================================================
# Provider Fixtures
# =============================================================================

def make_completion_result(
    text: str | None = "explained",
    model: str = "openai/gpt-oss-120b",
) -> CompletionResult:
    """CompletionResult factory."""
    return CompletionResult(
        text=text,
        provider="openai",
        model_requested=model,
        model_used=model,
        request_id="chatcmpl-test",
    )


@pytest.fixture
def fake_provider() -> MagicMock:
    """complete()가 AsyncMock인 provider."""
    provider = MagicMock(spec=CompletionProvider)
    provider.complete = AsyncMock(return_value=make_completion_result())
    return provider


@pytest.fixture
def provider_factory(fake_provider: MagicMock) -> Callable[[Settings], CompletionProvider]:
    """항상 fake_provider를 돌려주는 factory."""
    return lambda _settings: fake_provider


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app(settings: Settings, provider_factory) -> FastAPI:
    """가짜 provider가 연결된 앱."""
    return create_app(settings, provider_factory=provider_factory)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """테스트 클라이언트."""
    return TestClient(app)


# =============================================================================
# Storage Fixtures
# =============================================================================

@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """transcript 저장 파일 경로 (아직 없음)."""
    return tmp_path / "askdurga" / "storage.json"
