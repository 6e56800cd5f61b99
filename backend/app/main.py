"""
FastAPI application entrypoint for the stock-themes backend.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import candles, performance, stocks, summary
from app.core.config import settings
from app.core.logging import configure_logging
from app.core.redis import close_redis
from app.schemas.responses import ErrorResponse
from app.services.store import StoreError, load_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Migrates and evicts stale rows on first load
    load_store()
    yield
    await close_redis()


app = FastAPI(
    title="Stock Themes API",
    description="REST API over stored stocks, performance and price candles",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# Register routers
app.include_router(stocks.router, prefix="/api/stocks", tags=["stocks"])
app.include_router(performance.router, prefix="/api/performance", tags=["performance"])
app.include_router(candles.router, prefix="/api/candles", tags=["candles"])
app.include_router(summary.router, prefix="/api/summary", tags=["summary"])


def run():
    import uvicorn
    uvicorn.run(app, host=settings.HTTP_HOST, port=settings.HTTP_PORT)


if __name__ == "__main__":
    run()
