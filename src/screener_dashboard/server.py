"""HTTP relay serving the market page markup unchanged.

Browsers cannot read the market page cross-origin; this relay fetches it
server-side with a browser-like header set and returns the raw HTML.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends, FastAPI, Response, status
from fastapi.responses import JSONResponse
import structlog

from .config import MARKET_URL, RELAY_PATH
from .fetcher import DirectStrategy, DocumentRetriever, FetcherConfig, FetchSuccess

logger = structlog.get_logger(__name__)

RetrieverFactory = Callable[[], DocumentRetriever]

router = APIRouter(tags=["relay"])


def default_retriever() -> DocumentRetriever:
    """A single direct request, no marker check: the relay passes markup through."""
    return DocumentRetriever(
        strategies=[DirectStrategy()],
        config=FetcherConfig(attempts_per_strategy=1, max_total_attempts=1),
        marker=None,
    )


def get_retriever_factory() -> RetrieverFactory:
    """Dependency hook; overridden in tests and by `create_app`."""
    return default_retriever


@router.get(RELAY_PATH, response_model=None)
async def relay_market_page(
    factory: RetrieverFactory = Depends(get_retriever_factory),
) -> Response:
    """Fetch the market page and return it verbatim."""
    async with factory() as retriever:
        result = await retriever.retrieve(MARKET_URL)

    if isinstance(result, FetchSuccess):
        return Response(
            content=result.body,
            media_type="text/html; charset=utf-8",
            headers={"Cache-Control": "no-store"},
        )

    if result.last_status is not None:
        logger.warning("Origin returned an error", status=result.last_status)
        return JSONResponse({"error": "Failed to fetch"}, status_code=result.last_status)

    logger.error("Market page fetch error", error=result.last_error)
    return JSONResponse(
        {"error": "Error fetching data"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


def create_app(retriever_factory: RetrieverFactory | None = None) -> FastAPI:
    """Build the relay application.

    Args:
        retriever_factory: Builds the retriever for each request. Uses a
            single direct request if not provided.

    Returns:
        The FastAPI application.
    """
    app = FastAPI(title="Screener market relay")
    app.include_router(router)
    if retriever_factory is not None:
        app.dependency_overrides[get_retriever_factory] = lambda: retriever_factory
    return app
