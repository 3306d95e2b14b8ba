"""
Logging 설정.

모듈별 logger는 logging.getLogger(__name__)로 얻고,
핸들러/포맷은 프로세스 시작 시 configure_logging() 한 번으로 설정한다.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# 서버/클라이언트 공통 루트 logger 이름
LOGGER_NAMESPACE = "src"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """
    패키지 루트 logger에 stream handler 연결.

    여러 번 호출해도 핸들러는 하나만 유지 (레벨만 갱신).

    Args:
        level: 로그 레벨 (int 또는 "INFO" 같은 이름)

    Returns:
        설정된 패키지 루트 logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    return logger
