# src/family_weather/api/deps.py
from family_weather.config import LLMFactory, build_llm
from family_weather.weather.google import GoogleHourlyForecastProvider
from family_weather.weather.types import ForecastProvider


def get_forecast_provider() -> ForecastProvider:
    return GoogleHourlyForecastProvider()


def get_llm_factory() -> LLMFactory:
    # 키 확인은 입력 검증 이후 factory 호출 시점에 한다
    return build_llm
