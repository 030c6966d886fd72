"""Pydantic response schemas for the race query API."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    listening: bool


class ParticipantModel(BaseModel):
    slot: int
    driver: str
    driver_id: int
    team: str
    ai_controlled: bool
    race_number: int
    name: str


class RaceResponse(BaseModel):
    session_uid: int | None
    status: str
    participants: list[ParticipantModel]
    samples: int


class SpatialLocationModel(BaseModel):
    timestamp: float
    x: float
    z: float
    y: float


class RaceLineResponse(BaseModel):
    driver: str
    driver_id: int
    points: list[SpatialLocationModel]
