"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``) and initialises the schema.  On
shutdown it closes the connection.

Routers
-------
    /health         liveness probe
    /api/policies   list or keyword-search stored policies
    /api/ask        answer a question from the stored policies
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from policy_qa.db import get_connection, init_db

from policy_qa.api.routers import ask as ask_router
from policy_qa.api.routers import health as health_router
from policy_qa.api.routers import policies as policies_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    conn = get_connection()
    init_db(conn)
    app.state.db = conn
    try:
        yield
    finally:
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Suffolk Law Policy Q&A API",
        description=(
            "Answers student questions from scraped Suffolk Law policy pages "
            "and exposes the stored policies for browsing and keyword search."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router.router, tags=["health"])
    app.include_router(policies_router.router, prefix="/api/policies", tags=["policies"])
    app.include_router(ask_router.router, prefix="/api/ask", tags=["ask"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn policy_qa.api.app:app --reload
app = create_app()
