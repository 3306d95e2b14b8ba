"""
AskDurga 터미널 클라이언트.

실행:
    uv run askdurga                      # 대화 모드
    uv run askdurga --language python    # 기본 언어 지정
    uv run askdurga --history            # 저장된 기록 출력
    uv run askdurga --clear              # 기록 삭제

대화 모드 명령:
    /lang <name>   언어 변경 (english면 문법 교정)
    /history       최근 기록
    /clear         기록 삭제
    /quit          종료
"""

import argparse
import asyncio
import sys
from pathlib import Path

from src.client.api import ExplainClient, default_api_url
from src.client.composer import ChatComposer
from src.client.transcript import TranscriptStore, dump_history
from src.core.logging import configure_logging
from src.domain.constants import LANGUAGE_OPTIONS
from src.domain.schemas import ChatMessage, ChatRole

PROMPT = "AskDurga AI > "


def format_message(message: ChatMessage) -> str:
    prefix = "you" if message.role == ChatRole.USER else "durga"
    return f"[{prefix}] {message.text}"


def print_languages() -> None:
    for value, label in LANGUAGE_OPTIONS:
        print(f"  {value:<12} {label}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="askdurga",
        description="AskDurga AI - code explanation and English grammar correction",
    )
    parser.add_argument("--api-url", default=None, help="API 서버 주소 (기본: ASKDURGA_API_URL)")
    parser.add_argument("--storage", type=Path, default=None, help="기록 저장 파일 경로")
    parser.add_argument(
        "--language",
        default=LANGUAGE_OPTIONS[0][0],
        help="언어 (english | javascript | python | java ...)",
    )
    parser.add_argument("--history", action="store_true", help="저장된 기록 출력 후 종료")
    parser.add_argument("--json", action="store_true", help="--history를 JSON으로 출력")
    parser.add_argument("--clear", action="store_true", help="기록 삭제 후 종료")
    parser.add_argument("--log-level", default="WARNING", help="로그 레벨")
    return parser


async def run_interactive(composer: ChatComposer, language: str) -> None:
    """입력 루프. 제출은 순차 처리 (await 완료 전 다음 입력 없음)."""
    print(f"language: {language}  (/lang, /history, /clear, /quit)")

    while True:
        try:
            line = await asyncio.to_thread(input, PROMPT)
        except EOFError:
            break

        command = line.strip()
        if command in ("/quit", "/exit"):
            break
        if command == "/history":
            for message in composer.recent():
                print(format_message(message))
            continue
        if command == "/clear":
            composer.clear()
            print("history cleared")
            continue
        if command == "/lang" or command.startswith("/lang "):
            _, _, value = command.partition(" ")
            if value:
                language = value
                print(f"language: {language}")
            else:
                print_languages()
            continue

        print("Thinking...")
        state = await composer.submit(language, line)
        print(format_message(state.history[-1]))


async def run(args: argparse.Namespace) -> int:
    store = TranscriptStore(args.storage)

    if args.clear:
        result = store.clear()
        print("history cleared" if result.success else f"clear failed: {result.error}")
        return 0 if result.success else 1

    if args.history:
        history = store.load()
        if args.json:
            print(dump_history(history))
        else:
            for message in history:
                print(format_message(message))
        return 0

    async with ExplainClient(args.api_url or default_api_url()) as client:
        composer = ChatComposer(client, store)
        await run_interactive(composer, args.language)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
