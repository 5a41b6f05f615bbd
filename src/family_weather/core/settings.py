# src/family_weather/core/settings.py
from __future__ import annotations
import os

from dotenv import load_dotenv

# .env 파일에서 환경 변수 로드
load_dotenv()

# Google Weather (hourly forecast)
GOOGLE_WEATHER_API_KEY = os.getenv("GOOGLE_WEATHER_API_KEY", "")
WEATHER_TIMEOUT_S = float(os.getenv("WEATHER_TIMEOUT_S", "10"))
DEFAULT_FORECAST_HOURS = int(os.getenv("DEFAULT_FORECAST_HOURS", "24"))
MAX_FORECAST_HOURS = 240

# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
SUMMARY_TEMPERATURE = float(os.getenv("SUMMARY_TEMPERATURE", "0.4"))
SUMMARY_MAX_TOKENS = int(os.getenv("SUMMARY_MAX_TOKENS", "1024"))
ADVISORY_TEMPERATURE = float(os.getenv("ADVISORY_TEMPERATURE", "0.5"))
ADVISORY_MAX_TOKENS = int(os.getenv("ADVISORY_MAX_TOKENS", "512"))

# 모델 호출 전체 대기 상한 (재시도 포함) 및 재시도 횟수
LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "45"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "1"))

# LangSmith hub 프롬프트 이름 (비어 있으면 내장 프롬프트 사용)
SUMMARY_PROMPT_NAME = os.getenv("SUMMARY_PROMPT_NAME", "")
ADVISORY_PROMPT_NAME = os.getenv("ADVISORY_PROMPT_NAME", "")

# Auth (Supabase access token, HS256)
JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# CORS
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Client side
RELAY_BASE_URL = os.getenv("FAMILY_WEATHER_API", "http://127.0.0.1:8000")
CLIENT_TZ = os.getenv("FAMILY_WEATHER_TZ", "UTC")
LOCATION_TIMEOUT_S = float(os.getenv("LOCATION_TIMEOUT_S", "15"))
IP_GEOLOCATION_URL = os.getenv("IP_GEOLOCATION_URL", "https://ipapi.co/json/")
FORECAST_STALE_S = 10 * 60
DERIVED_STALE_S = 15 * 60
FAMILY_STORE_PATH = os.getenv(
    "FAMILY_WEATHER_STORE", os.path.join(os.path.expanduser("~"), ".family_weather.json")
)
