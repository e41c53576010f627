"""
로깅 설정.

로그 레벨, 핸들러, 포맷 등은 패키지에 포함된 logging.conf 에 정의되어 있고,
이 모듈은 그 설정을 표준 라이브러리 fileConfig 로더로 적용합니다.
usermodel 로거의 레벨만 설정값(USERMODEL_LOG_LEVEL)으로 덮어씁니다.

사용 예시:
    from usermodel.logger import setup_logging
    setup_logging()
"""

import logging
import logging.config
from pathlib import Path
from typing import Optional

from usermodel.config import get_settings

_LOGGING_CONF = Path(__file__).resolve().parent / "logging.conf"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """logging.conf 를 적용하고 패키지 최상위 로거를 반환합니다."""
    logging.config.fileConfig(str(_LOGGING_CONF), disable_existing_loggers=False)

    logger = logging.getLogger("usermodel")
    logger.setLevel((level or get_settings().log_level).upper())
    return logger
