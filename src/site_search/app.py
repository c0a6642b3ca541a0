"""Main ASGI application entry point.

Routes:
    GET /api/search?q=&type=&limit=  ranked search results
    GET /api/topics?type=            topics with display metadata
    GET /health                      index residency status
    GET /metrics                     Prometheus exposition

Usage:
    site-search-serve

    # Or with a custom index location
    SEARCH_INDEX_PATH=/srv/site/search-index.json site-search-serve
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from site_search.adapters.content_source import FilesystemContentSource
from site_search.config import Settings
from site_search.domain.search import ContentType
from site_search.observability import (
    TraceContextMiddleware,
    configure_logging,
    configure_trace_exporter,
    get_metrics,
    get_metrics_content_type,
    init_tracing,
)
from site_search.search.engine import FuzzySearchEngine
from site_search.search.storage import IndexArtifactStore
from site_search.service_layer.search_service import InvalidSearchOptionsError, SearchService


logger = logging.getLogger(__name__)


def build_search_service(settings: Settings) -> SearchService:
    """Wire one engine + store + content source from settings."""
    return SearchService(
        FuzzySearchEngine(),
        IndexArtifactStore(settings.search_index_path),
        content_source=FilesystemContentSource(settings.content_root),
        default_limit=settings.search_default_limit,
        max_limit=settings.search_max_result_limit,
    )


def _build_search_endpoint(service: SearchService):
    async def search_endpoint(request: Request) -> JSONResponse:
        query = request.query_params.get("q")
        if not query or not query.strip():
            return JSONResponse([])

        try:
            options = service.build_options(request.query_params.get("type"), request.query_params.get("limit"))
        except InvalidSearchOptionsError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)

        try:
            await service.ensure_loaded_async()
            results = service.search(query, options)
        except Exception:
            logger.exception("Search failed")
            return JSONResponse({"error": "Search failed"}, status_code=500)

        return JSONResponse([result.model_dump(mode="json") for result in results])

    return search_endpoint


def _build_topics_endpoint(service: SearchService):
    async def topics_endpoint(request: Request) -> JSONResponse:
        raw_type = request.query_params.get("type")
        content_type: ContentType | None = None
        if raw_type:
            try:
                content_type = ContentType.parse(raw_type)
            except ValueError as exc:
                return JSONResponse({"error": str(exc)}, status_code=400)
        return JSONResponse(service.list_topics(content_type))

    return topics_endpoint


def _build_health_endpoint(service: SearchService):
    async def health_check(_: Request) -> JSONResponse:
        return JSONResponse(service.health())

    return health_check


async def _metrics_endpoint(_: Request) -> Response:
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


def create_app(settings: Settings | None = None, service: SearchService | None = None) -> Starlette:
    """Create the search ASGI app.

    Args:
        settings: Loaded settings; read from the environment when omitted.
        service: Pre-built service (tests, embedding); built from settings when omitted.
    """
    settings = settings or Settings()
    service = service or build_search_service(settings)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        if settings.search_preload_index:
            count = await service.ensure_loaded_async()
            logger.info("Preloaded %d search documents", count)
        yield

    routes = [
        Route("/api/search", endpoint=_build_search_endpoint(service), methods=["GET"]),
        Route("/api/topics", endpoint=_build_topics_endpoint(service), methods=["GET"]),
        Route("/health", endpoint=_build_health_endpoint(service), methods=["GET"]),
        Route("/metrics", endpoint=_metrics_endpoint, methods=["GET"]),
    ]

    app = Starlette(
        debug=settings.log_level.lower() == "debug",
        routes=routes,
        middleware=[Middleware(TraceContextMiddleware)],
        lifespan=lifespan,
    )
    app.state.search_service = service
    return app


def main() -> None:
    """Entry point for the search HTTP server."""
    import uvicorn

    settings = Settings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    provider = init_tracing(settings.service_name)
    configure_trace_exporter(settings.otlp_traces_endpoint, provider)

    app = create_app(settings)

    logger.info("Starting search server on %s:%d", settings.search_host, settings.search_port)
    logger.info("Index artifact: %s", settings.search_index_path)

    uvicorn.run(
        app,
        host=settings.search_host,
        port=settings.search_port,
        log_level=settings.log_level.lower(),
        log_config=None,  # Don't let uvicorn override our logging config
    )


if __name__ == "__main__":
    main()
