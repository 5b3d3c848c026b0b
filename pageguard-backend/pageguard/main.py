import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pageguard.config import settings
from pageguard.database import init_db
from pageguard.api import routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"🚀 Starting {settings.APP_NAME} {settings.VERSION} "
        f"(sensitivity={settings.NOTIFICATION_SENSITIVITY.value}, history={settings.HISTORY_CAPACITY})"
    )
    init_db()
    logger.info("✓ Verdict history and whitelist tables ready")
    yield
    logger.info(f"👋 {settings.APP_NAME} stopped")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)

    # Extension origins are matched by regex; CORS_ORIGINS adds fixed ones
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.include_router(routes.router, prefix=settings.API_PREFIX, tags=["Assessment"])

    @app.get("/")
    def root():
        return {
            "service": settings.APP_NAME,
            "version": settings.VERSION,
            "endpoints": [f"{settings.API_PREFIX}/assess", f"{settings.API_PREFIX}/status"],
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("pageguard.main:app", host="127.0.0.1", port=8000)
