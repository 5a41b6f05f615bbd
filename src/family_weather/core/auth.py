# src/family_weather/core/auth.py
import base64
import binascii

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from family_weather.core import settings
from family_weather.core.errors import ConfigError

security = HTTPBearer(auto_error=False)

# HS256 키는 최소 32바이트
MIN_DECODED_KEY_BYTES = 32


def signing_key(secret: str) -> bytes:
    """
    Supabase 대시보드 secret 은 원문 문자열, 직접 발급한 키는 base64 로 오는 경우가 있다.
    base64 로 풀리고 충분히 길면 디코딩 결과를, 아니면 원문 바이트를 키로 쓴다.
    """
    compact = "".join((secret or "").split())
    if not compact:
        return b""
    try:
        decoded = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        return compact.encode("utf-8")
    return decoded if len(decoded) >= MIN_DECODED_KEY_BYTES else compact.encode("utf-8")


def verify_token(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> dict:
    """OTP 로그인 후 발급된 access token(HS256) 검증. payload 반환."""
    token = (credentials.credentials if credentials else "").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")

    key = signing_key(settings.JWT_SECRET)
    if not key:
        raise ConfigError(detail="SUPABASE_JWT_SECRET not set")

    try:
        # exp / aud 검증은 PyJWT가 수행
        return jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM], audience=settings.JWT_AUDIENCE)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidSignatureError:
        raise HTTPException(status_code=401, detail="Invalid signature")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
