"""
App layer: API 서버 (FastAPI).

역할:
- request gate (보안 헤더, CORS, rate limit, 본문 크기)
- 템플릿 선택 후 completion provider 호출, 텍스트 전달
- LLM 로직 없음 (외부 provider에 위임)
"""
