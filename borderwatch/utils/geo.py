"""
Geographic utilities for BorderWatch.

Great-circle distance, nearest-point lookup and the static border
reference points used for proximity scoring.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

EARTH_RADIUS_KM = 6371.0


def validate_coordinates(lat: Optional[float], lon: Optional[float]) -> bool:
    """
    Validate that coordinates are within valid ranges.

    Args:
        lat: Latitude (-90 to 90)
        lon: Longitude (-180 to 180)

    Returns:
        True if valid, False otherwise
    """
    if lat is None or lon is None:
        return False
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


@dataclass(frozen=True)
class Coordinate:
    """
    Immutable (latitude, longitude) pair in decimal degrees.

    Raises:
        ValueError: On construction, if latitude is outside [-90, 90] or
            longitude outside [-180, 180].
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        if not validate_coordinates(self.latitude, self.longitude):
            raise ValueError(f"Invalid coordinate: ({self.latitude}, {self.longitude})")
        object.__setattr__(self, "latitude", float(self.latitude))
        object.__setattr__(self, "longitude", float(self.longitude))


class ReferencePoint(NamedTuple):
    """A named fixed geographic anchor."""
    name: str
    coordinate: Coordinate


class NearestResult(NamedTuple):
    candidate: object
    distance_km: float


# Line of Control reference points
LOC_REFERENCE_POINTS = (
    ReferencePoint("Kashmir Sector", Coordinate(34.0837, 74.7973)),
    ReferencePoint("Jammu Sector", Coordinate(33.7782, 75.3412)),
    ReferencePoint("Srinagar Sector", Coordinate(34.5194, 74.3119)),
    ReferencePoint("Central Kashmir", Coordinate(32.7767, 74.9014)),
)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate great-circle distance between two points in kilometers.

    Args:
        a: First point.
        b: Second point.

    Returns:
        Haversine distance in kilometers.
    """
    lat1_rad = math.radians(a.latitude)
    lat2_rad = math.radians(b.latitude)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    c = 2 * math.asin(math.sqrt(min(1.0, h)))

    return EARTH_RADIUS_KM * c


def _coordinate_of(candidate) -> Coordinate:
    if isinstance(candidate, ReferencePoint):
        return candidate.coordinate
    return candidate


def nearest(origin: Coordinate, candidates: Sequence) -> Optional[NearestResult]:
    """
    Find the candidate closest to origin.

    Candidates may be coordinates or reference points. Ties go to the
    earliest candidate.

    Returns:
        NearestResult, or None when there are no candidates.
    """
    best = None
    for candidate in candidates:
        d = distance_km(origin, _coordinate_of(candidate))
        if best is None or d < best.distance_km:
            best = NearestResult(candidate, d)
    return best


def distance_to_nearest_reference(origin: Coordinate, reference_points: Sequence = LOC_REFERENCE_POINTS) -> float:
    """
    Distance in kilometers from origin to the closest reference point.

    Returns infinity when no reference points are configured.
    """
    result = nearest(origin, reference_points)
    return result.distance_km if result else math.inf


def format_distance(km: float) -> str:
    """
    Format a distance for display.

    Args:
        km: Distance in kilometers.

    Returns:
        "850 m", "4.2 km" or "37 km".
    """
    if km < 1:
        return f"{round(km * 1000)} m"
    if km < 10:
        return f"{km:.1f} km"
    return f"{round(km)} km"
