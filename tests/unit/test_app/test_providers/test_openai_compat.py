"""
test_openai_compat.py - OpenAI 호환 Provider 테스트

Mock 주의사항:
- MagicMock은 접근되지 않은 속성에 자동으로 새 MagicMock을 반환
- choices, message.content, model, id를 명시적으로 설정해야 함
- make_openai_response() factory 사용
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.providers.base import CompletionError, CompletionParams, ProviderError
from src.app.providers.openai_compat import OpenAICompatProvider
from src.domain.errors import ErrorCodes

# =============================================================================
# Mock Factories
# =============================================================================


def make_openai_response(
    content: str | None,
    model: str = "openai/gpt-oss-120b",
    request_id: str = "chatcmpl-test",
) -> MagicMock:
    """ChatCompletion 응답 mock."""
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    response.choices = [choice]
    response.model = model
    response.id = request_id
    return response


def make_mock_client() -> MagicMock:
    """AsyncOpenAI mock. close()는 await 가능해야 함."""
    client = MagicMock()
    client.close = AsyncMock()
    return client


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider():
    return OpenAICompatProvider(
        api_key="test-api-key",
        base_url="https://api.studio.nebius.com/v1/",
    )


@pytest.fixture
def params():
    return CompletionParams(model="openai/gpt-oss-120b", temperature=0.3, max_tokens=800)


@pytest.fixture
def messages():
    return [
        {"role": "system", "content": "system prompt"},
        {"role": "user", "content": "user prompt"},
    ]


# =============================================================================
# 초기화 테스트
# =============================================================================


class TestInit:
    """초기화."""

    def test_requires_api_key(self):
        """키 없으면 즉시 실패."""
        with pytest.raises(ProviderError) as exc_info:
            OpenAICompatProvider(api_key=None)

        assert exc_info.value.code == ErrorCodes.API_KEY_MISSING

    def test_empty_api_key_rejected(self):
        with pytest.raises(ProviderError):
            OpenAICompatProvider(api_key="")

    def test_stores_base_url(self, provider):
        assert provider.base_url == "https://api.studio.nebius.com/v1/"
        assert provider.name == "openai"


# =============================================================================
# complete 테스트
# =============================================================================


class TestComplete:
    """complete() 테스트."""

    @pytest.mark.asyncio
    async def test_returns_first_choice_text(self, provider, params, messages):
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            return_value=make_openai_response("step-1 ...")
        )
        provider._client = mock_client

        result = await provider.complete(messages, params)

        assert result.text == "step-1 ..."
        assert result.provider == "openai"
        assert result.model_requested == "openai/gpt-oss-120b"
        assert result.model_used == "openai/gpt-oss-120b"
        assert result.request_id == "chatcmpl-test"
        assert result.prompt_hash.startswith("sha256:")

    @pytest.mark.asyncio
    async def test_sends_fixed_params(self, provider, params, messages):
        """model, messages, temperature, max_tokens 전달."""
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            return_value=make_openai_response("ok")
        )
        provider._client = mock_client

        await provider.complete(messages, params)

        mock_client.chat.completions.create.assert_awaited_once_with(
            model="openai/gpt-oss-120b",
            messages=messages,
            temperature=0.3,
            max_tokens=800,
        )

    @pytest.mark.asyncio
    async def test_omits_unset_params(self, provider, messages):
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            return_value=make_openai_response("ok")
        )
        provider._client = mock_client

        await provider.complete(messages, CompletionParams(model="m"))

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert "temperature" not in kwargs
        assert "max_tokens" not in kwargs

    @pytest.mark.asyncio
    async def test_empty_choices_yields_none(self, provider, params, messages):
        response = make_openai_response("unused")
        response.choices = []
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(return_value=response)
        provider._client = mock_client

        result = await provider.complete(messages, params)

        assert result.text is None

    @pytest.mark.asyncio
    async def test_empty_content_yields_none(self, provider, params, messages):
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            return_value=make_openai_response("")
        )
        provider._client = mock_client

        result = await provider.complete(messages, params)

        assert result.text is None

    @pytest.mark.asyncio
    async def test_api_failure_wrapped_with_original_message(
        self, provider, params, messages
    ):
        """SDK 에러 메시지가 그대로 message로."""
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=RuntimeError("Connection error.")
        )
        provider._client = mock_client

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete(messages, params)

        assert exc_info.value.message == "Connection error."
        assert exc_info.value.code == ErrorCodes.COMPLETION_FAILED


# =============================================================================
# 클라이언트 정리 테스트
# =============================================================================


class TestClientLifecycle:
    """요청마다 생성되는 provider → complete() 후 클라이언트 닫힘."""

    @pytest.mark.asyncio
    async def test_client_closed_after_success(self, provider, params, messages):
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(
            return_value=make_openai_response("ok")
        )
        provider._client = mock_client

        await provider.complete(messages, params)

        mock_client.close.assert_awaited_once()
        assert provider._client is None

    @pytest.mark.asyncio
    async def test_client_closed_after_failure(self, provider, params, messages):
        mock_client = make_mock_client()
        mock_client.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
        provider._client = mock_client

        with pytest.raises(CompletionError):
            await provider.complete(messages, params)

        mock_client.close.assert_awaited_once()
        assert provider._client is None

    @pytest.mark.asyncio
    async def test_real_sdk_client_closed(self, provider, params, messages):
        """실제 AsyncOpenAI 클라이언트의 연결 풀이 닫힘."""
        client = provider._get_client()
        client.chat.completions.create = AsyncMock(return_value=make_openai_response("ok"))

        await provider.complete(messages, params)

        assert client.is_closed() is True

    @pytest.mark.asyncio
    async def test_aclose_without_client_is_noop(self, provider):
        await provider.aclose()

        assert provider._client is None
