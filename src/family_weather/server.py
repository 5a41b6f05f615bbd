from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from family_weather.api import advisory, briefing, forecast, health, summary
from family_weather.core import settings
from family_weather.core.errors import register_exception_handlers
from family_weather.core.logger import setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Family Weather API")

    # ============================================================
    # 🌐 CORS 설정 (preflight OPTIONS 허용, 클라이언트 origin 허용)
    # ============================================================
    allowed_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ============================================================
    # 📦 라우터 등록
    # ============================================================
    app.include_router(forecast.router, prefix="/api")
    app.include_router(summary.router, prefix="/api")
    app.include_router(advisory.router, prefix="/api")
    app.include_router(briefing.router, prefix="/api")
    app.include_router(health.router)

    return app


# ✅ 앱 인스턴스 생성
app = create_app()
