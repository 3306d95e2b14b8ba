"""
Domain Constants: 서비스 전역 상수.

와이어 메시지, 저장 키, 기본 한도 등 클라이언트/서버 양쪽에서 쓰이는 값들.
와이어 문자열은 기존 클라이언트와의 호환을 위해 철자까지 그대로 유지한다.
"""

# =============================================================================
# Wire Messages (응답 본문 고정 문자열)
# =============================================================================

ERROR_CODE_REQUIRED = "Code is required"
ERROR_FAILED_TO_EXPLAIN = "Failed to Explain code"
ERROR_SERVER = "Server Error"

# 성공 응답에서 language가 비었을 때의 대체값 (철자 그대로)
UNKNOWN_LANGUAGE = "unkonwn"

RATE_LIMIT_MESSAGE = "To many requests from this Ip"
BODY_TOO_LARGE_MESSAGE = "request entity too large"

# =============================================================================
# Template Selection
# =============================================================================

GRAMMAR_LANGUAGE = "english"

# =============================================================================
# Client (클라이언트 측 상수)
# =============================================================================

APOLOGY_MESSAGE = "Sorry, there was a problem communicating with the Durga."

# 로컬 저장소 키 (브라우저 localStorage 키와 동일)
HISTORY_STORAGE_KEY = "askdurga_chat_history"

# (value, label) - 첫 항목이 기본 선택
LANGUAGE_OPTIONS: list[tuple[str, str]] = [
    ("english", "English (Grammar Correction)"),
    ("javascript", "JavaScript (Code Explanation)"),
    ("python", "Python (Code Explanation)"),
    ("java", "Java (Code Explanation)"),
]

# 사이드바에 보여주는 최근 대화 개수
RECENT_HISTORY_SIZE = 4

# =============================================================================
# Server Defaults
# =============================================================================

EXPLAIN_ROUTE = "/api/explain-code"

DEFAULT_PORT = 8080
DEFAULT_FRONTEND_URL = "http://localhost:3000"

RATE_LIMIT_WINDOW_SECONDS = 15 * 60
RATE_LIMIT_MAX_REQUESTS = 100
MAX_BODY_BYTES = 10 * 1024 * 1024  # 10MB

# =============================================================================
# Provider Defaults
# =============================================================================

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "openai/gpt-oss-120b"
DEFAULT_BASE_URL = "https://api.studio.nebius.com/v1/"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 800
