"""Domain layer: errors, schemas and constants."""

from .errors import AskDurgaError, ConfigError, ErrorCodes
from .schemas import (
    ChatMessage,
    ChatRole,
    ChatState,
    ExplainRequest,
    ExplainResponse,
    SaveResult,
    TemplateKind,
)

__all__ = [
    "AskDurgaError",
    "ConfigError",
    "ErrorCodes",
    "ChatMessage",
    "ChatRole",
    "ChatState",
    "ExplainRequest",
    "ExplainResponse",
    "SaveResult",
    "TemplateKind",
]
