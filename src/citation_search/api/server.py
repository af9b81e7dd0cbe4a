"""
HTTP API Server for citation search.

Endpoints:
    POST /api/search   {"query": "..."} → ranked citations
    GET  /api/health   liveness probe

The search core never raises to this layer except for programming errors;
those are logged and answered with a generic 500 body.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from citation_search import __version__
from citation_search.application.search.query_validator import MAX_QUERY_LENGTH, ensure_valid_query
from citation_search.config import Settings
from citation_search.container import ApplicationContainer, create_container
from citation_search.core.async_utils import reset_rate_limiters
from citation_search.core.exceptions import InvalidQueryError

logger = logging.getLogger(__name__)

DEFAULT_API_PORT = 8080
VALIDATION_FAILED_MESSAGE = "Invalid request parameters"
INTERNAL_ERROR_MESSAGE = "Internal error, please retry later"


# Pydantic models for API requests/responses
class SearchRequest(BaseModel):
    """Search request body."""
    query: str = Field(..., description=f"Research question, at most {MAX_QUERY_LENGTH} characters")

    @field_validator("query")
    @classmethod
    def _check_query(cls, value: str) -> str:
        try:
            return ensure_valid_query(value)
        except InvalidQueryError as e:
            raise ValueError(e.reason) from e


class CitationResponse(BaseModel):
    title: str
    authors: list[str]
    year: int
    source: str
    abstractText: str
    citationCount: int
    dataSource: str
    relevanceScore: float | None = None
    url: str


class SearchResponse(BaseModel):
    """Search response body."""
    success: bool
    message: str
    keywords: list[str]
    citations: list[CitationResponse]
    duration: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    timestamp: int


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "")})
    return errors


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        container: Pre-configured container; built from the environment when omitted.

    Returns:
        Configured FastAPI instance.
    """
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            f"Citation search API starting (crawler_enabled={container.config.crawler_enabled()})"
        )
        yield
        logger.info("Citation search API shutting down")
        await container.orchestrator().aclose()
        reset_rate_limiters()

    app = FastAPI(
        title="Citation Search API",
        description="Searches Google Scholar and CNKI for citations relevant to a research question.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = _field_errors(exc)
        logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": VALIDATION_FAILED_MESSAGE, "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": INTERNAL_ERROR_MESSAGE},
        )

    @app.post("/api/search", response_model=SearchResponse)
    async def search(body: SearchRequest, request: Request) -> dict[str, Any]:
        """Search every configured source and return the ranked citations."""
        orchestrator = request.app.state.container.orchestrator()
        result = await orchestrator.search(body.query)
        return result.to_dict()

    @app.get("/api/health", response_model=HealthResponse)
    async def health(request: Request) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="UP",
            service=request.app.state.container.config.service_name(),
            timestamp=int(time.time() * 1000),
        )

    return app


def run_api_server(
    host: str = "127.0.0.1",
    port: int = DEFAULT_API_PORT,
    settings: Settings | None = None,
    log_level: str = "info",
) -> None:
    """
    Run the HTTP API server.

    Args:
        host: Host to bind to (default: 127.0.0.1 for local only)
        port: Port to bind to (default: 8080)
        settings: Application settings (default: read from the environment)
        log_level: uvicorn log level
    """
    import uvicorn

    app = create_app(create_container(settings))
    logger.info(f"Starting HTTP API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
