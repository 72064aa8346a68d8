# app/core/logging_config.py

import logging

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = None) -> None:
    """
    프로세스 시작 시 한 번 호출. 레벨은 LOG_LEVEL 설정값을 기본으로 쓴다.
    """
    settings = get_settings()
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
