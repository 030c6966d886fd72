"""FastAPI application exposing the live race state.

Serve with any ASGI server, e.g. ``uvicorn race_telemetry.web.app:app``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException

from race_telemetry.config import Settings
from race_telemetry.protocol import Driver
from race_telemetry.web.schemas import (
    HealthResponse,
    ParticipantModel,
    RaceLineResponse,
    RaceResponse,
    SpatialLocationModel,
)
from race_telemetry.web.service import RaceService

load_dotenv()  # loads .env from the working directory before settings are read

VERSION = "0.1.0"

_service: RaceService | None = None


def get_service() -> RaceService:
    """Return the process-wide :class:`RaceService`, creating it on first use."""
    global _service
    if _service is None:
        _service = RaceService(Settings.from_env())
    return _service


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = Settings.from_env()
    service = None
    if settings.listen:
        service = app.dependency_overrides.get(get_service, get_service)()
        service.start()
    try:
        yield
    finally:
        if service is not None:
            service.stop()


app = FastAPI(title="Race Telemetry", version=VERSION, lifespan=_lifespan)


def _parse_driver(value: str) -> Driver:
    """Accept a driver id (``"7"``) or enum name (``"lewis_hamilton"``)."""
    try:
        if value.isdigit():
            return Driver(int(value))
        return Driver[value.upper()]
    except (KeyError, ValueError):
        raise HTTPException(status_code=404, detail=f"Unknown driver {value!r}") from None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health(service: RaceService = Depends(get_service)) -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION, listening=service.running)


@app.get("/api/race", response_model=RaceResponse)
def race(service: RaceService = Depends(get_service)) -> RaceResponse:
    """Return status and roster of the current session."""
    snap = service.snapshot()
    return RaceResponse(
        session_uid=snap.session_uid,
        status=snap.status.value,
        participants=[
            ParticipantModel(
                slot=i,
                driver=p.driver_id.name,
                driver_id=int(p.driver_id),
                team=p.team.name,
                ai_controlled=not p.is_human,
                race_number=p.race_number,
                name=p.name,
            )
            for i, p in enumerate(snap.participants)
        ],
        samples=snap.samples,
    )


@app.get("/api/race/lines/{driver}", response_model=RaceLineResponse)
def race_line(driver: str, service: RaceService = Depends(get_service)) -> RaceLineResponse:
    """Return the race line driven so far by *driver*."""
    drv = _parse_driver(driver)
    points = [
        SpatialLocationModel(
            timestamp=loc.timestamp, x=loc.coords[0], z=loc.coords[1], y=loc.coords[2]
        )
        for loc in service.race_line(drv)
    ]
    return RaceLineResponse(driver=drv.name, driver_id=int(drv), points=points)
