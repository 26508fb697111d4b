import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from bulkmod.config import Settings, settings as default_settings
from bulkmod.database import Base, build_engine
from bulkmod.errors import http_exception_handler, validation_exception_handler
from bulkmod.routers import auth, modlists
from bulkmod.tokens import issuer_from_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[bulkmod] %(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(settings: Settings = default_settings) -> FastAPI:
    """Build the application around ``settings``.

    The engine, session factory and token issuer are created here and kept on
    ``app.state``, so each app talks to its own database with its own key.
    """
    configure_logging(settings.log_level)
    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        if settings.create_schema:
            import bulkmod.models  # noqa: F401

            Base.metadata.create_all(bind=engine)
        yield
        engine.dispose()

    application = FastAPI(title="Bulkmod API", lifespan=lifespan)
    application.state.engine = engine
    application.state.session_factory = sessionmaker(bind=engine)
    application.state.token_issuer = issuer_from_settings(settings)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(
        RequestValidationError, validation_exception_handler
    )

    application.include_router(auth.router, prefix=settings.api_prefix)
    application.include_router(modlists.router, prefix=settings.api_prefix)

    @application.get("/health")
    def health():
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "healthy"}
        except Exception:
            logger.exception("Health check failed")
            return JSONResponse(status_code=503, content={"status": "unhealthy"})

    return application


app = create_app()
