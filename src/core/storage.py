"""
파일 기반 JSON 저장.

- 중간 상태 없음: temp → replace
- 실패 시 temp 파일 정리, 기존 파일 보존
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def atomic_write_json(path: Path, data: Any) -> None:
    """
    원자적 JSON 쓰기.

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터

    Raises:
        OSError, TypeError: 쓰기/직렬화 실패 (호출측에서 처리)
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def read_json_file(path: Path) -> Any:
    """
    JSON 파일 로드.

    Raises:
        FileNotFoundError: 파일 없음
        json.JSONDecodeError: 파싱 실패
    """
    return json.loads(path.read_text(encoding="utf-8"))
