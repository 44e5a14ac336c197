"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import load_config
from ..errors import ConfigurationError, InvalidRequestError, UpstreamServiceError
from .routes import ai, health, indexing
from .services import Services, build_services

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidRequestError)
    async def _bad_request(request: Request, exc: InvalidRequestError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(UpstreamServiceError)
    async def _upstream(request: Request, exc: UpstreamServiceError):
        return JSONResponse(status_code=502, content={"message": f"AI service error: {exc.message}"})

    @app.exception_handler(ConfigurationError)
    async def _misconfigured(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=500, content={"message": "AI service configuration error."})


def create_app(cfg: Optional[Dict] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the app. Without ``services`` they are wired from ``cfg`` at startup."""
    cfg = cfg or load_config()
    logging.basicConfig(
        level=cfg.get("log_level", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.services is None:
            try:
                app.state.services = build_services(cfg)
            except ConfigurationError as e:
                # keep serving so every AI call can report the problem
                logger.error(f"Service configuration error: {e}")
                app.state.config_error = e
        yield

    app = FastAPI(title="QuillMind Backend", lifespan=lifespan)

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api")

    api_router.include_router(ai.router)
    api_router.include_router(indexing.router)
    api_router.include_router(health.router)

    app.include_router(api_router)
    _register_error_handlers(app)

    app.state.services = services
    app.state.config_error = None

    return app


app = create_app()
