# src/family_weather/core/logger.py
import logging

from family_weather.core import settings

FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """앱/CLI 진입점에서 한 번만 호출."""
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=FORMAT)
    # httpx 요청 로그는 키가 쿼리에 포함되므로 WARNING 이상만
    logging.getLogger("httpx").setLevel(logging.WARNING)
