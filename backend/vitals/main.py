"""FastAPI application — CORS, route registration, scheduler lifecycle."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vitals import settings
from vitals.routes.dashboard import router as dashboard_router
from vitals.scheduler import RefreshScheduler

# Load .env before anything else
load_dotenv()

logging.basicConfig(
    level=settings.log_level(),
    format=settings.LOG_FORMAT,
)

SchedulerFactory = Callable[[], RefreshScheduler]


def create_app(scheduler_factory: SchedulerFactory = RefreshScheduler) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = scheduler_factory()
        app.state.scheduler = scheduler
        scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()

    app = FastAPI(
        title="Earth Vitals",
        description="Live approximations of Earth's vital signs",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS — the dashboard frontend is served from a separate dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(dashboard_router)
    return app


app = create_app()
