"""
Transcript 저장소 (브라우저 localStorage 대응).

파일 하나를 key → value 저장소로 사용:
    {"askdurga_chat_history": [{"role": "user", "text": "..."}, ...]}

규칙:
- load: 파일 없음/손상/형식 오류 → 빈 목록 (예외를 밖으로 던지지 않음)
- save: 실패해도 예외 없음, SaveResult로 보고 (로그 용도)
"""

import json
import logging
from pathlib import Path
from typing import Any

from src.core.storage import atomic_write_json, read_json_file
from src.domain.constants import HISTORY_STORAGE_KEY
from src.domain.schemas import ChatMessage, SaveResult

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = Path.home() / ".askdurga" / "storage.json"


class TranscriptStore:
    """
    대화 기록 저장/로드.

    Usage:
        store = TranscriptStore(Path("storage.json"))
        history = store.load()
        store.save(history)
    """

    def __init__(self, path: Path | None = None, key: str = HISTORY_STORAGE_KEY):
        self.path = path or DEFAULT_STORAGE_PATH
        self.key = key

    def _read_storage(self) -> dict[str, Any]:
        """저장 파일 전체. 없거나 손상되면 빈 dict."""
        try:
            data = read_json_file(self.path)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Storage file unreadable, starting empty: {self.path} ({e})")
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> list[ChatMessage]:
        """기록 로드. 하나라도 형식이 틀리면 전체를 빈 목록으로."""
        raw = self._read_storage().get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Stored history is not a list: {type(raw).__name__}")
            return []

        try:
            return [ChatMessage.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Stored history is corrupt, starting empty: {e}")
            return []

    def save(self, history: list[ChatMessage]) -> SaveResult:
        """기록 저장. 다른 키는 보존."""
        try:
            storage = self._read_storage()
            storage[self.key] = [message.to_dict() for message in history]
            atomic_write_json(self.path, storage)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save history to {self.path}: {e}")
            return SaveResult(success=False, error=str(e))
        return SaveResult(success=True)

    def clear(self) -> SaveResult:
        return self.save([])


def dump_history(history: list[ChatMessage]) -> str:
    """디버그/출력용 JSON 문자열."""
    return json.dumps([m.to_dict() for m in history], ensure_ascii=False, indent=2)
