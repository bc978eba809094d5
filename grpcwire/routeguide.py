"""Route guide service: features on a map, routes and location notes."""

from __future__ import annotations

import json
import math
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

ROUTE_GUIDE_DB_PATH = "testdata/route_guide_db.json"

_COORD_FACTOR = 1e7
_EARTH_RADIUS_M = 6371000.0
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class Point:
    """A location in E7 degrees."""

    latitude: int = 0
    longitude: int = 0


@dataclass(frozen=True)
class Rectangle:
    """A rectangle given by two opposite corners."""

    lo: Point = field(default_factory=Point)
    hi: Point = field(default_factory=Point)


@dataclass(frozen=True)
class Feature:
    """A named feature at a location."""

    name: str = ""
    location: Point = field(default_factory=Point)


@dataclass(frozen=True)
class RouteNote:
    """A message left at a location."""

    location: Point = field(default_factory=Point)
    message: str = ""


@dataclass(frozen=True)
class RouteSummary:
    """Summary of a traversed route."""

    point_count: int = 0
    feature_count: int = 0
    distance: int = 0
    elapsed_time: int = 0


def in_range(point: Point, rect: Rectangle) -> bool:
    """True if ``point`` lies inside ``rect``, edges included."""
    left = min(rect.lo.longitude, rect.hi.longitude)
    right = max(rect.lo.longitude, rect.hi.longitude)
    top = max(rect.lo.latitude, rect.hi.latitude)
    bottom = min(rect.lo.latitude, rect.hi.latitude)
    return left <= point.longitude <= right and bottom <= point.latitude <= top


def calc_distance(p1: Point, p2: Point) -> int:
    """Great-circle distance between two points in whole metres."""
    lat1 = math.radians(p1.latitude / _COORD_FACTOR)
    lat2 = math.radians(p2.latitude / _COORD_FACTOR)
    lng1 = math.radians(p1.longitude / _COORD_FACTOR)
    lng2 = math.radians(p2.longitude / _COORD_FACTOR)
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return max(0, int(_EARTH_RADIUS_M * c))


def serialize_point(point: Point) -> str:
    """Key identifying a location."""
    return f"{point.latitude} {point.longitude}"


def _require(obj: Dict[str, Any], key: str) -> Any:
    if key not in obj:
        raise ValueError(f"missing {key!r}")
    return obj[key]


def _as_i32(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key!r} is not a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key!r} is not an integer")
        value = int(value)
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"{key!r} is out of range")
    return value


def _feature_from_json(item: Any) -> Feature:
    if not isinstance(item, dict):
        raise ValueError("feature is not an object")
    location = _require(item, "location")
    if not isinstance(location, dict):
        raise ValueError("location is not an object")
    name = _require(item, "name")
    if not isinstance(name, str):
        raise ValueError("'name' is not a string")
    return Feature(
        name=name,
        location=Point(
            latitude=_as_i32(_require(location, "latitude"), "latitude"),
            longitude=_as_i32(_require(location, "longitude"), "longitude"),
        ),
    )


def load_features(path: Union[str, Path]) -> List[Feature]:
    """Load features from a JSON array of ``{name, location}`` objects.

    Raises :class:`ValueError` if the document does not have that shape.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("feature database is not an array")
    return [_feature_from_json(item) for item in data]


class RouteGuide:
    """The route guide service over a fixed set of features."""

    def __init__(self, saved_features: Optional[Iterable[Feature]] = None) -> None:
        self.saved_features: List[Feature] = list(saved_features or ())
        self._route_notes: Dict[str, List[RouteNote]] = defaultdict(list)
        self._lock = threading.Lock()

    @classmethod
    def from_db(cls, path: Union[str, Path] = ROUTE_GUIDE_DB_PATH) -> "RouteGuide":
        """Create the service with features loaded from a JSON database."""
        return cls(load_features(path))

    def get_feature(self, point: Point) -> Feature:
        """Return the feature at ``point``, or an unnamed one there."""
        found = next((f for f in self.saved_features if f.location == point), None)
        return found if found is not None else Feature(location=point)

    def list_features(self, rect: Rectangle) -> Iterator[Feature]:
        """Yield every feature inside ``rect``."""
        for feature in self.saved_features:
            if in_range(feature.location, rect):
                yield feature

    def record_route(self, points: Iterable[Point]) -> RouteSummary:
        """Summarise a route: points, features passed, distance, seconds taken."""
        start = time.monotonic()
        point_count = feature_count = distance = 0
        last_point: Optional[Point] = None
        for point in points:
            point_count += 1
            feature_count += sum(1 for f in self.saved_features if f.location == point)
            if last_point is not None:
                distance += calc_distance(last_point, point)
            last_point = point
        return RouteSummary(
            point_count=point_count,
            feature_count=feature_count,
            distance=distance,
            elapsed_time=int(time.monotonic() - start),
        )

    def route_chat(self, notes: Iterable[RouteNote]) -> Iterator[RouteNote]:
        """For each incoming note, store it and yield all notes at its location."""
        for note in notes:
            key = serialize_point(note.location)
            with self._lock:
                at_location = self._route_notes[key]
                at_location.append(note)
                snapshot = list(at_location)
            yield from snapshot