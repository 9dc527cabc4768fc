import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from physioai.api.router import api_router
from physioai.core.config import settings
from physioai.core.logging_config import configure_logging
from physioai.database.session import SessionLocal, init_db
from physioai.services.ai_gateway import build_gateway
from physioai.services.onboarding_service import OnboardingRegistry
from physioai.services.sensor_service import SensorSessionRegistry
from physioai.services.state_store import RosterStore

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.roster_store = RosterStore(SessionLocal, settings.storage_key)
    app.state.ai_gateway = build_gateway()
    app.state.sensor_sessions = SensorSessionRegistry()
    app.state.onboarding = OnboardingRegistry()

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.on_event("startup")
    def _startup():
        init_db()
        app.state.roster_store.load()
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY not set; AI features will return fallback messages")

    return app


app = create_app()
