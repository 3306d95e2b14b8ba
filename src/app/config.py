"""
서버 설정.

우선순위: 환경변수(.env 포함) > default.yaml > 코드 기본값
시작 시 한 번만 로드, 런타임 재로드 없음.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from src.domain.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_FRONTEND_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PORT,
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
    MAX_BODY_BYTES,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from src.domain.errors import ConfigError, ErrorCodes

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "default.yaml"

SUPPORTED_PROVIDERS = ("openai", "anthropic")


@dataclass(frozen=True)
class Settings:
    """
    불변 서버 설정.

    앱 생성 시 주입되어 app.state.settings로 핸들러에 전달된다.
    """
    api_key: str | None = None
    anthropic_api_key: str | None = None
    frontend_url: str = DEFAULT_FRONTEND_URL
    port: int = DEFAULT_PORT

    # AI
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    # Request gate
    rate_limit_window_seconds: int = RATE_LIMIT_WINDOW_SECONDS
    rate_limit_max: int = RATE_LIMIT_MAX_REQUESTS
    max_body_bytes: int = MAX_BODY_BYTES

    def has_api_key(self) -> bool:
        """선택된 provider의 키 존재 여부."""
        if self.provider == "anthropic":
            return bool(self.anthropic_api_key)
        return bool(self.api_key)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """설정 파일 로드. 파일이 없으면 빈 dict."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(ErrorCodes.INVALID_CONFIG_FILE, path=str(config_path))
    return data


def _parse_int(name: str, value: Any, code: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(code, field=name, value=value) from e


def _parse_temperature(value: Any) -> float:
    try:
        temperature = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(ErrorCodes.INVALID_TEMPERATURE, field="temperature", value=value) from e
    if not temperature >= 0:
        raise ConfigError(ErrorCodes.INVALID_TEMPERATURE, field="temperature", value=value)
    return temperature


def _require_positive(name: str, value: int) -> int:
    if value <= 0:
        raise ConfigError(ErrorCodes.INVALID_LIMIT, field=name, value=value)
    return value


def load_settings(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """
    설정 로드 + 검증.

    Args:
        config_path: YAML 경로 (None이면 프로젝트 루트 default.yaml)
        env: 환경변수 (None이면 .env 로드 후 os.environ)

    Returns:
        Settings

    Raises:
        ConfigError: 포트/provider/온도/한도 값이 잘못되었거나
            anthropic인데 모델이 지정되지 않았을 때
    """
    if env is None:
        load_dotenv()
        env = os.environ

    config = load_config(config_path)
    ai_config = config.get("ai") or {}
    server_config = config.get("server") or {}

    port = _parse_int(
        "PORT",
        env.get("PORT") or server_config.get("port", DEFAULT_PORT),
        ErrorCodes.INVALID_PORT,
    )
    if not 0 < port < 65536:
        raise ConfigError(ErrorCodes.INVALID_PORT, field="PORT", value=port)

    provider = (env.get("AI_PROVIDER") or ai_config.get("provider", DEFAULT_PROVIDER)).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            ErrorCodes.INVALID_PROVIDER,
            value=provider,
            supported=list(SUPPORTED_PROVIDERS),
        )

    # 기본 모델은 OpenAI 호환 엔드포인트 전용 → anthropic은 명시 필수
    model = env.get("AI_MODEL") or ai_config.get("model", DEFAULT_MODEL)
    if provider == "anthropic" and model == DEFAULT_MODEL:
        raise ConfigError(ErrorCodes.MODEL_REQUIRED, provider=provider, value=model)

    temperature = _parse_temperature(ai_config.get("temperature", DEFAULT_TEMPERATURE))

    max_tokens = _require_positive(
        "max_tokens",
        _parse_int("max_tokens", ai_config.get("max_tokens", DEFAULT_MAX_TOKENS), ErrorCodes.INVALID_LIMIT),
    )
    window = _require_positive(
        "rate_limit_window_seconds",
        _parse_int(
            "rate_limit_window_seconds",
            server_config.get("rate_limit_window_seconds", RATE_LIMIT_WINDOW_SECONDS),
            ErrorCodes.INVALID_LIMIT,
        ),
    )
    limit = _require_positive(
        "rate_limit_max",
        _parse_int(
            "rate_limit_max",
            server_config.get("rate_limit_max", RATE_LIMIT_MAX_REQUESTS),
            ErrorCodes.INVALID_LIMIT,
        ),
    )
    max_body = _require_positive(
        "max_body_bytes",
        _parse_int(
            "max_body_bytes",
            server_config.get("max_body_bytes", MAX_BODY_BYTES),
            ErrorCodes.INVALID_LIMIT,
        ),
    )

    settings = Settings(
        api_key=env.get("API_KEY") or None,
        anthropic_api_key=(
            env.get("MY_ANTHROPIC_KEY") or env.get("ANTHROPIC_API_KEY") or None
        ),
        frontend_url=env.get("FRONTEND_URL") or DEFAULT_FRONTEND_URL,
        port=port,
        provider=provider,
        model=model,
        base_url=ai_config.get("base_url", DEFAULT_BASE_URL),
        temperature=temperature,
        max_tokens=max_tokens,
        rate_limit_window_seconds=window,
        rate_limit_max=limit,
        max_body_bytes=max_body,
    )

    if not settings.has_api_key():
        logger.warning(
            f"No API key configured for provider '{settings.provider}'. "
            "Explain requests will fail until one is set."
        )

    return settings
