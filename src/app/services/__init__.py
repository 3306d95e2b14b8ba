"""
App Services.

- prompts: 템플릿 선택/렌더링
- explain: 요청 처리 흐름
"""

from .explain import ExplainOutcome, ExplainService, is_truthy
from .prompts import PromptTemplate, build_messages, select_template

__all__ = [
    "ExplainOutcome",
    "ExplainService",
    "is_truthy",
    "PromptTemplate",
    "build_messages",
    "select_template",
]
