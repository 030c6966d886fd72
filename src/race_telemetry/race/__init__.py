"""Race state aggregation.

Public API
----------
Race             - folds frames into status, participants and race lines
RaceLines        - ordered spatial samples, filterable by driver
SpatialLocation  - one sample of a driver's position
Status           - UNKNOWN → UNFOLDING → FINISHED
RaceStateError   - frame fed out of order
"""

from race_telemetry.race.aggregator import Race, RaceLines, RaceStateError
from race_telemetry.race.models import SpatialLocation, Status

__all__ = [
    "Race",
    "RaceLines",
    "RaceStateError",
    "SpatialLocation",
    "Status",
]
