"""
Core layer: 로깅, 원자적 파일 저장.

서버/클라이언트 양쪽에서 쓰는 인프라성 모듈.
"""

from .logging import configure_logging
from .storage import atomic_write_json, read_json_file

__all__ = [
    "configure_logging",
    "atomic_write_json",
    "read_json_file",
]
