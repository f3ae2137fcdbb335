# appia/main.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as FastAPIValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from appia.core.config import Settings
from appia.core.errors import AppiaError, UpstreamError
from appia.core.logger_setup import setup_logging
from appia.routes.chat import router as chat_router
from appia.routes.files import router as files_router
from appia.routes.github import router as github_router
from appia.routes.health import router as health_router
from appia.routes.projects import router as projects_router
from appia.routes.publish import router as publish_router
from appia.routes.template import router as template_router
from appia.routes.usage import router as usage_router
from appia.services.anthropic_client import AnthropicClient
from appia.services.database import create_db_engine, init_db
from appia.services.github_client import GithubOAuthClient
from appia.services.rate_limit import RateLimiter
from appia.services.response_cache import ResponseCache
from appia.services.usage_tracker import UsageTracker
from appia.services.vercel_client import VercelClient

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(AppiaError)
    async def appia_error_handler(request: Request, exc: AppiaError):
        body = exc.to_body()
        if isinstance(exc, UpstreamError):
            logger.error(f"{request.method} {request.url.path} upstream failure: {exc.message} ({exc.upstream_detail})")
            if settings.is_development and exc.upstream_detail:
                body["details"] = exc.upstream_detail
        elif exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(FastAPIValidationError)
    async def validation_error_handler(request: Request, exc: FastAPIValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    llm_client: Optional[AnthropicClient] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings)

    engine = engine or create_db_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="Appia Builder API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.llm_client = llm_client or AnthropicClient(
        settings, cache=ResponseCache(settings.response_cache_size)
    )
    app.state.usage_tracker = UsageTracker(engine, settings)
    app.state.rate_limiter = RateLimiter(settings.rate_limit_per_min)
    app.state.vercel_client = VercelClient(settings)
    app.state.github_client = GithubOAuthClient(settings)

    _register_exception_handlers(app, settings)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(template_router)
    app.include_router(projects_router)
    app.include_router(usage_router)
    app.include_router(files_router)
    app.include_router(publish_router)
    app.include_router(github_router)

    logger.info(f"Appia backend ready (env={settings.app_env}, db={engine.url.drivername})")
    return app
