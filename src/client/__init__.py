"""
Client layer: 터미널 채팅 클라이언트.

- api: 백엔드 HTTP 호출 (httpx)
- transcript: 로컬 파일 기반 기록 저장
- composer: 제출 → 기록 추가 흐름
"""

from .api import ExplainClient
from .composer import ChatComposer
from .transcript import TranscriptStore

__all__ = ["ExplainClient", "ChatComposer", "TranscriptStore"]
