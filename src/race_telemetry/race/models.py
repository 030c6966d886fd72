"""Race state models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from race_telemetry.protocol import Driver


class Status(Enum):
    """Status of a race.  ``FINISHED`` is terminal."""

    UNKNOWN = "unknown"
    UNFOLDING = "unfolding"
    FINISHED = "finished"


@dataclass(frozen=True)
class SpatialLocation:
    """Where *driver* was at *timestamp*."""

    driver: Driver

    timestamp: float
    """``session_time`` of the motion frame the sample came from."""

    coords: tuple[float, float, float]
    """World position as ``(x, z, y)``: ground plane first, elevation last."""

    @property
    def ground_point(self) -> tuple[float, float]:
        """``(x, z)`` position on the ground plane."""
        return (self.coords[0], self.coords[1])
