# app/main.py
from dotenv import load_dotenv

load_dotenv()

import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.appconfig import AppSettings, settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

# Import routers
from app.database.connection import Database
from app.helpers.error_handlers import register_error_handlers
from app.helpers.time import utcnow
from app.system_services.system_routes import router as system_router
from app.users.auth_routers import router as auth_router

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    database: Database = app.state.database
    await database.connect()
    logger.info(f"🚀 Starting {app.title} ({app.state.settings.ENVIRONMENT})")
    logger.info(f"✅ Session cookie: {app.state.settings.SESSION_COOKIE_NAME}, "
                f"expiry {app.state.settings.SESSION_EXPIRY_DAYS} days")
    logger.info(f"✅ CORS origin: {app.state.settings.FRONTEND_URL}")
    yield
    # Shutdown
    await database.disconnect()
    logger.info("👋 Shutting down")


def create_app(app_settings: Optional[AppSettings] = None) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Patient records, medical notes and staff authentication for the clinic",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings.DATABASE_URL, echo=app_settings.DB_ECHO)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers with prefixes
    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(system_router, prefix="/api", tags=["Patients"])

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "timestamp": utcnow().isoformat()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
