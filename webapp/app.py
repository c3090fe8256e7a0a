# webapp/app.py

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from database.db_manager import DatabaseManager
from resume.ai import OllamaRewriteClient, OpenAIRewriteClient, RewriteService
from resume.cache import TTLCache
from resume.config import TailoringConfig, get_config
from resume.errors import RateLimited, TailoringError
from resume.security import HSTS_HEADER, SECURITY_HEADERS
from resume.tailoring import GenerationOrchestrator
from resume.utils import setup_logging
from webapp.config import Settings, settings as default_settings
from webapp.deps import rate_limit

from webapp.api import account, admin, generate, generations, health

logger = logging.getLogger(__name__)


def build_rewrite_service(settings: Settings) -> Optional[RewriteService]:
    """Rewrite client for the configured provider, or None if unusable"""
    provider = settings.llm_provider.lower()

    if provider == "ollama":
        return OllamaRewriteClient(
            base_url=settings.ollama_host,
            model=settings.ollama_model,
            timeout=settings.llm_timeout
        )

    if provider == "openai":
        if not settings.openai_api_key:
            logger.error("OpenAI API key not configured")
            return None
        return OpenAIRewriteClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.llm_timeout
        )

    logger.error(f"Unknown LLM provider: {settings.llm_provider}")
    return None


def first_validation_message(errors) -> str:
    """User-facing message for the first failed field"""
    if not errors:
        return "Invalid request body"

    first = errors[0]
    custom = (first.get("ctx") or {}).get("error")
    if custom:
        return str(custom)

    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    return f"{'.'.join(loc)}: {first['msg']}" if loc else first["msg"]


def create_app(
    settings: Optional[Settings] = None,
    tailoring_config: Optional[TailoringConfig] = None,
    rewrite_service: Optional[RewriteService] = None
) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Process settings (defaults to environment)
        tailoring_config: Pipeline configuration (defaults to YAML/defaults)
        rewrite_service: Rewrite client override (defaults to the configured provider)
    """
    settings = settings or default_settings
    config = tailoring_config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(Path(settings.log_dir), settings.log_level)

        db = DatabaseManager(settings.database_path)
        cache = TTLCache(sweep_interval_s=config.cache_sweep_interval_s)
        service = rewrite_service or build_rewrite_service(settings)

        app.state.db = db
        app.state.cache = cache
        app.state.rate_limiters = {name: p.build() for name, p in config.rate_limits.items()}
        app.state.orchestrator = (
            GenerationOrchestrator(service, db, cache, config) if service is not None else None
        )
        app.state.started_at = time.monotonic()

        cache.start()
        logger.info(f"{settings.app_name} started (provider={settings.llm_provider})")
        try:
            yield
        finally:
            await cache.stop()
            logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tailoring_config = config

    # Include API routers
    api_guard = [Depends(rate_limit("ip", per_route=False))]
    app.include_router(account.router, prefix="/api", tags=["account"], dependencies=api_guard)
    app.include_router(generate.router, prefix="/api/generate", tags=["generate"], dependencies=api_guard)
    app.include_router(generations.router, prefix="/api/generations", tags=["generations"], dependencies=api_guard)
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"], dependencies=api_guard)
    app.include_router(health.router, tags=["health"])

    # ============= Middleware =============

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        if not settings.debug:
            response.headers[HSTS_HEADER[0]] = HSTS_HEADER[1]
        return response

    # ============= Error Handlers =============

    @app.exception_handler(TailoringError)
    async def tailoring_error_handler(request: Request, exc: TailoringError):
        """Translate service errors into {"error": message}"""
        headers = None
        if isinstance(exc, RateLimited):
            headers = {"Retry-After": str(exc.retry_after)}

        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc!r}")

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.public_message},
            headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Report the first invalid field as a 400"""
        errors = exc.errors()
        logger.warning(f"Invalid request body for {request.url.path}: {errors[:1]}")
        return JSONResponse(status_code=400, content={"error": first_validation_message(errors)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Anything unexpected still answers with the generic JSON error"""
        logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc!r}")
        return JSONResponse(status_code=500, content={"error": TailoringError.default_message})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "webapp.app:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug
    )
