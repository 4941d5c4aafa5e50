import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from . import config
from .database import TransactionStore
from .errors import SalesboardError
from .routers import reports, seed, transactions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ───────────────────────────────────────────────────────────────
    app.state.store.connect()
    yield
    # ── Shutdown ──────────────────────────────────────────────────────────────
    app.state.store.close()


async def _salesboard_error(request: Request, exc: SalesboardError) -> PlainTextResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return PlainTextResponse(str(exc), status_code=500)


def create_app(
    store: Optional[TransactionStore] = None,
    *,
    seed_url: Optional[str] = None,
    seed_transport: Optional[httpx.BaseTransport] = None,
) -> FastAPI:
    app = FastAPI(
        title="Salesboard",
        description="Month-filtered sales listing, statistics and chart data.",
        version=config.VERSION,
        lifespan=lifespan,
    )
    app.state.store = store or TransactionStore(config.DATABASE_URL)
    app.state.seed_url = seed_url or config.SEED_URL
    app.state.seed_transport = seed_transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SalesboardError, _salesboard_error)

    app.include_router(seed.router)
    app.include_router(transactions.router)
    app.include_router(reports.router)

    @app.get("/health", tags=["meta"])
    def health():
        return {"status": "ok", "version": config.VERSION}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
