"""
test_explain_service.py - ExplainService 유닛 테스트

검증 포인트:
1. JS truthiness 기반 검증 ("0", 공백 통과 / "" 실패)
2. provider 텍스트 없음 → 500 Failed to Explain code
3. provider 예외 → 500 Server Error + details
"""

from unittest.mock import AsyncMock

import pytest

from src.app.config import Settings
from src.app.providers.base import CompletionError, ProviderError
from src.app.services.explain import ExplainService, is_truthy, parse_payload
from src.app.services.prompts import GRAMMAR_SYSTEM_PROMPT
from tests.conftest import make_completion_result

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def service(settings, provider_factory) -> ExplainService:
    return ExplainService(settings, provider_factory=provider_factory)


# =============================================================================
# 1. truthiness
# =============================================================================


class TestIsTruthy:
    """JS truthiness 재현."""

    @pytest.mark.parametrize("value", [None, False, 0, 0.0, float("nan"), ""])
    def test_falsy(self, value):
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", ["0", " ", "false", True, 1, -1, [], {}, "a"])
    def test_truthy(self, value):
        assert is_truthy(value) is True


class TestParsePayload:
    """본문 → dict."""

    def test_dict_passthrough(self):
        assert parse_payload({"code": "x"}) == {"code": "x"}

    @pytest.mark.parametrize("body", [None, [], "text", 3])
    def test_non_object_becomes_empty(self, body):
        assert parse_payload(body) == {}


# =============================================================================
# 2. 검증
# =============================================================================


class TestValidation:
    """400 경계."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"code": "", "language": "python"},
            {"code": "print(1)", "language": ""},
            {"code": "", "language": ""},
            {"language": "english"},
            {"code": "x"},
            {"code": None, "language": "python"},
            {"code": 0, "language": "python"},
        ],
    )
    async def test_missing_field_returns_400(self, service, fake_provider, payload):
        outcome = await service.explain(payload)

        assert outcome.status_code == 400
        assert outcome.body == {"error": "Code is required"}
        fake_provider.complete.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["0", " ", "\n"])
    async def test_truthy_edge_values_pass(self, service, fake_provider, code):
        outcome = await service.explain({"code": code, "language": "python"})

        assert outcome.status_code == 200
        fake_provider.complete.assert_awaited_once()


# =============================================================================
# 3. provider 호출
# =============================================================================


class TestProviderCall:
    """provider 호출 결과 처리."""

    @pytest.mark.asyncio
    async def test_success(self, service, fake_provider):
        fake_provider.complete.return_value = make_completion_result("He goes to school.")

        outcome = await service.explain({"code": "He go to school", "language": "english"})

        assert outcome.status_code == 200
        assert outcome.body == {"explanation": "He goes to school.", "language": "english"}

    @pytest.mark.asyncio
    async def test_sends_grammar_messages_and_fixed_params(self, service, fake_provider):
        await service.explain({"code": "He go to school", "language": "English"})

        messages, params = fake_provider.complete.call_args.args
        assert messages[0]["content"] == GRAMMAR_SYSTEM_PROMPT
        assert '"He go to school"' in messages[1]["content"]
        assert params.temperature == 0.3
        assert params.max_tokens == 800

    @pytest.mark.asyncio
    async def test_language_echoed_as_sent(self, service):
        outcome = await service.explain({"code": "x", "language": "PyThOn"})

        assert outcome.body["language"] == "PyThOn"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, ""])
    async def test_no_text_returns_failed_to_explain(self, service, fake_provider, text):
        fake_provider.complete.return_value = make_completion_result(text)

        outcome = await service.explain({"code": "x", "language": "python"})

        assert outcome.status_code == 500
        assert outcome.body == {"error": "Failed to Explain code"}

    @pytest.mark.asyncio
    async def test_provider_error_returns_details(self, service, fake_provider):
        fake_provider.complete.side_effect = CompletionError(
            "COMPLETION_FAILED", "rate limited upstream"
        )

        outcome = await service.explain({"code": "x", "language": "python"})

        assert outcome.status_code == 500
        assert outcome.body == {"error": "Server Error", "details": "rate limited upstream"}

    @pytest.mark.asyncio
    async def test_unexpected_exception_returns_details(self, service, fake_provider):
        fake_provider.complete.side_effect = RuntimeError("boom")

        outcome = await service.explain({"code": "x", "language": "python"})

        assert outcome.body == {"error": "Server Error", "details": "boom"}

    @pytest.mark.asyncio
    async def test_non_string_language_is_server_error(self, service, fake_provider):
        outcome = await service.explain({"code": "x", "language": 42})

        assert outcome.status_code == 500
        assert outcome.body["error"] == "Server Error"
        fake_provider.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_api_key_is_server_error(self):
        """기본 factory: 키 없으면 provider 생성 단계에서 실패 → 500."""
        service = ExplainService(Settings(api_key=None))

        outcome = await service.explain({"code": "x", "language": "python"})

        assert outcome.status_code == 500
        assert outcome.body["error"] == "Server Error"
        assert "API_KEY" in outcome.body["details"]

    @pytest.mark.asyncio
    async def test_provider_built_per_request(self, settings, fake_provider):
        calls = []

        def factory(s):
            calls.append(s)
            return fake_provider

        service = ExplainService(settings, provider_factory=factory)
        await service.explain({"code": "a", "language": "python"})
        await service.explain({"code": "b", "language": "python"})

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_never_both_absent(self, service, fake_provider):
        """유효 입력 → 200 + explanation 또는 500 + error."""
        for side_effect, result in [
            (None, make_completion_result("ok")),
            (None, make_completion_result(None)),
            (ProviderError("X", "bad"), None),
        ]:
            fake_provider.complete = AsyncMock(return_value=result, side_effect=side_effect)
            outcome = await service.explain({"code": "x", "language": "python"})

            if outcome.status_code == 200:
                assert outcome.body["explanation"]
            else:
                assert outcome.status_code == 500
                assert outcome.body["error"]
