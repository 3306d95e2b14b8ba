"""
프롬프트 템플릿.

두 가지 모드만 존재:
- english (대소문자 무시, trim 없음) → 문법 교정
- 그 외 모든 값 → 코드 설명

템플릿 문구는 provider 응답 품질에 직접 영향 → 수정 시 test_prompts.py 기대값도 갱신.
"""

from dataclasses import dataclass
from typing import Any

from src.domain.constants import GRAMMAR_LANGUAGE
from src.domain.schemas import TemplateKind

GRAMMAR_SYSTEM_PROMPT = (
    "You are AskDurga AI — a friendly English assistant. When the user gives a "
    "sentence, fix the grammar and return two things only:\n"
    "1. The corrected sentence in clean, proper English.\n"
    "2. A short one-line reason for the mistake in very simple English (like "
    "'you used wrong word order' or 'you missed the verb'). Do not mention "
    "capitalization, commas, or punctuation unless it changes meaning."
)

GRAMMAR_USER_PROMPT = 'Correct this sentence and explain shortly:\n\n"{code}"'

CODE_SYSTEM_PROMPT = """You are AskDurga AI — a code explainer assistant.

When the user provides any code in any programming language (like JavaScript, Python, Java, etc.), follow these rules:

1. Rewrite the same code clearly and neatly.
2. Add step-by-step comments before each major action in this exact format:
   // step-1: ...
   // step-2: ...
   (Use numbering properly in order.)
3. If the code includes any built-in function or method (like console.log(), print(), len(), etc.), add a short inline comment explaining what it does.
4. Do not explain outside the code — only show commented code.
5. Keep the tone clean and simple, just like this example:

Example Output:
```javascript
// step-1: Define the function named 'greet' with 0 parameters
function greet() {   
  // step-2: Inside the function, print a message to the console
  console.log('Hello AskDurga-AI'); // it will print "Hello AskDurga-AI"
}

// step-3: Call the 'greet' function (no arguments passed)
greet();
```
"""

CODE_USER_PROMPT = """Explain this {language} code by rewriting it with step-by-step comments as shown in the example.

1. Only return the code — do not add any extra explanation.
2. Follow the numbering pattern (step-1, step-2, etc.).
3. Explain any built-in functions or methods inline.
4. Keep code structure clean and easy to read.

Code:
{code}"""


@dataclass(frozen=True)
class PromptTemplate:
    """system/user 메시지 쌍."""
    kind: TemplateKind
    system: str
    user: str

    def render(self, language: Any, code: Any) -> list[dict[str, str]]:
        """provider에 보낼 메시지 목록 생성."""
        user_content = self.user.format(language=language, code=code)
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": user_content},
        ]


TEMPLATES: dict[TemplateKind, PromptTemplate] = {
    TemplateKind.GRAMMAR: PromptTemplate(
        kind=TemplateKind.GRAMMAR,
        system=GRAMMAR_SYSTEM_PROMPT,
        user=GRAMMAR_USER_PROMPT,
    ),
    TemplateKind.CODE: PromptTemplate(
        kind=TemplateKind.CODE,
        system=CODE_SYSTEM_PROMPT,
        user=CODE_USER_PROMPT,
    ),
}


def select_template(language: str) -> PromptTemplate:
    """
    language → 템플릿.

    Raises:
        AttributeError: language가 문자열이 아닐 때 (호출측에서 500 처리)
    """
    if language.lower() == GRAMMAR_LANGUAGE:
        return TEMPLATES[TemplateKind.GRAMMAR]
    return TEMPLATES[TemplateKind.CODE]


def build_messages(language: str, code: Any) -> tuple[TemplateKind, list[dict[str, str]]]:
    """템플릿 선택 + 렌더링."""
    template = select_template(language)
    return template.kind, template.render(language, code)
