"""Dashboard endpoints: REST snapshots of each stream + a push WebSocket."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect

from vitals import settings
from vitals.models import (
    ClockReading,
    DashboardSnapshot,
    HealthResponse,
    HistoricalFact,
    MoonPhase,
    OrbitalState,
    SatelliteFix,
    SpaceRoster,
    StreamSnapshot,
)
from vitals.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

router = APIRouter()


def _scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.scheduler


@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok")


@router.get("/api/dashboard", response_model=DashboardSnapshot)
async def get_dashboard(request: Request):
    return _scheduler(request).snapshot()


@router.get("/api/population", response_model=StreamSnapshot[int])
async def get_population(request: Request):
    return _scheduler(request).population.snapshot()


@router.get("/api/moon", response_model=StreamSnapshot[MoonPhase])
async def get_moon(request: Request):
    return _scheduler(request).moon.snapshot()


@router.get("/api/orbit", response_model=StreamSnapshot[OrbitalState])
async def get_orbit(request: Request):
    return _scheduler(request).orbit.snapshot()


@router.get("/api/clock", response_model=StreamSnapshot[ClockReading])
async def get_clock(request: Request):
    return _scheduler(request).clock_cell.snapshot()


@router.get("/api/iss", response_model=StreamSnapshot[SatelliteFix])
async def get_iss(request: Request):
    return _scheduler(request).iss.snapshot()


@router.get("/api/astronauts", response_model=StreamSnapshot[SpaceRoster])
async def get_astronauts(request: Request):
    return _scheduler(request).roster.snapshot()


@router.get("/api/on-this-day", response_model=StreamSnapshot[HistoricalFact])
async def get_on_this_day(request: Request):
    return _scheduler(request).fact.snapshot()


@router.websocket("/ws/dashboard")
async def dashboard_ws(ws: WebSocket):
    """Push the full dashboard snapshot every tick until the client leaves."""
    await ws.accept()
    scheduler: RefreshScheduler = ws.app.state.scheduler
    logger.info("Dashboard WS client connected")

    async def sender():
        while True:
            await ws.send_json(scheduler.snapshot().model_dump(mode="json"))
            await asyncio.sleep(settings.DASHBOARD_PUSH_S)

    send_task = asyncio.create_task(sender())

    try:
        while True:
            # client messages are ignored; receiving surfaces the disconnect
            await ws.receive_text()
    except WebSocketDisconnect:
        logger.info("Dashboard WS client disconnected")
    finally:
        send_task.cancel()
        await asyncio.gather(send_task, return_exceptions=True)
