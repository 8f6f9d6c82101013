"""
Airspace boundaries and the containment tests run against them.

A controlled airspace is published as a run of boundary segments; each run
that ends with a return-to-origin flag closes one loop. Every loop becomes
a region and a point is inside the airspace when it is inside any region.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntFlag
from fractions import Fraction
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .altitude import Altitude, AltitudeMSL, FlightLevel
from .coordinate import Coordinate
from .course import MagneticCourse, TrueCourse
from .record import RecordLine
from .restrictions import AltitudeRestriction
from .validation import GeometryError

logger = logging.getLogger(__name__)

# Allowed miss between an arc's published end vertex and the arc itself, nmi
ARC_ENDPOINT_TOLERANCE = 0.25

EPSILON = 1.1102230246251565e-16
ERRBOUND3 = (3.0 + 16.0 * EPSILON) * EPSILON


class BoundaryVia(IntFlag):
    """Boundary path code; the low three bits are the shape, bit 3 closes the loop."""

    CONTINUE = 0
    CIRCLE = 0b001
    GREAT_CIRCLE = 0b010
    RHUMB_LINE = 0b011
    COUNTER_CLOCKWISE_ARC = 0b100
    CLOCKWISE_ARC = 0b101
    RETURN_TO_ORIGIN = 0b1000

    @property
    def shape(self) -> 'BoundaryVia':
        return BoundaryVia(self & 0b0111)

    @property
    def returns_to_origin(self) -> bool:
        return bool(self & BoundaryVia.RETURN_TO_ORIGIN)


AIRSPACE_CLASSES = 'ABCDEG'

RESTRICTION_TYPES = {
    'A': 'alert',
    'C': 'caution',
    'D': 'danger',
    'M': 'MOA',
    'P': 'prohibited',
    'R': 'restricted',
    'T': 'training',
    'W': 'warning',
    'U': 'unknown',
}


@dataclass(frozen=True)
class BoundarySegment:
    via: BoundaryVia
    vertex: Coordinate


@dataclass(frozen=True)
class BoundaryLine(BoundarySegment):
    pass


@dataclass(frozen=True)
class BoundaryRhumbLine(BoundarySegment):
    pass


@dataclass(frozen=True)
class BoundaryCircle(BoundarySegment):
    """Circle around ``vertex`` (its center) of ``radius`` nautical miles."""

    radius: float = 0.0

    @property
    def center(self) -> Coordinate:
        return self.vertex


@dataclass(frozen=True)
class BoundaryArc(BoundarySegment):
    """
    Arc starting at ``vertex`` around ``origin``.

    The start vertex must sit within 1% of the distance (at least 0.05 nmi)
    of the point at ``bearing`` and ``distance`` from the origin.
    """

    origin: Optional[Coordinate] = None
    distance: float = 0.0
    bearing: TrueCourse = TrueCourse(360)

    def __post_init__(self):
        if self.origin is None:
            raise GeometryError("Arc boundary needs an origin.")
        extrapolated = self.origin.fix_radial_distance(self.bearing, self.distance)
        tolerance = max(0.01 * self.distance, 0.05)
        if self.vertex.distance_to(extrapolated) > tolerance:
            raise GeometryError(
                "Arc point doesn't line up with fix/radial/distance from origin. "
                f"{self.vertex.dms} -> {extrapolated.dms} > {tolerance:.2f}nmi")

    @property
    def clockwise(self) -> bool:
        return self.via.shape == BoundaryVia.CLOCKWISE_ARC


@dataclass(frozen=True)
class GridMORA(RecordLine):
    """Minimum off-route altitudes for the 30 one-degree cells east of ``start_position``."""

    start_position: Coordinate
    mora: Tuple[Optional[FlightLevel], ...]

    header = 'AS'

    def mora_at(self, longitude_offset: int) -> Optional[FlightLevel]:
        return self.mora[longitude_offset]

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data['start_position'] = self.start_position.to_dict()
        data['mora'] = [None if m is None else m.level for m in self.mora]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridMORA':
        return cls(
            start_position=Coordinate.from_dict(data['start_position']),
            mora=tuple(None if m is None else FlightLevel(m) for m in data.get('mora', [])),
            **cls._base_kwargs(data),
        )


@dataclass(frozen=True)
class ControlledAirspace(RecordLine):
    region: str
    airspace_type: str
    center: str
    airspace_class: str
    multiple_code: str
    sequence_number: int
    boundary: BoundarySegment
    lower_limit: Optional[Altitude]
    upper_limit: Optional[Altitude]
    name: str

    header = 'UC'

    @property
    def vertical_bounds(self) -> Tuple[Optional[Altitude], Optional[Altitude]]:
        return self.lower_limit, self.upper_limit


@dataclass(frozen=True)
class RestrictiveAirspace(RecordLine):
    region: str
    restriction_type: str
    designation: str
    multiple_code: str
    sequence_number: int
    boundary: BoundarySegment
    lower_limit: Optional[Altitude]
    upper_limit: Optional[Altitude]
    name: str

    header = 'UR'


@dataclass(frozen=True)
class MSASector:
    anticlockwise_limit: MagneticCourse
    clockwise_limit: MagneticCourse
    altitude: AltitudeRestriction
    radius: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'anticlockwise_limit': self.anticlockwise_limit.to_dict(),
            'clockwise_limit': self.clockwise_limit.to_dict(),
            'altitude': self.altitude.to_dict(),
            'radius': self.radius,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MSASector':
        return cls(
            anticlockwise_limit=MagneticCourse(*data['anticlockwise_limit']),
            clockwise_limit=MagneticCourse(*data['clockwise_limit']),
            altitude=AltitudeRestriction.from_dict(data['altitude']),
            radius=data['radius'],
        )


@dataclass(frozen=True)
class AirportMSA(RecordLine):
    airport: str
    fix: str
    multiple_code: str
    sectors: Tuple[MSASector, ...]

    header = 'PS'

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            'airport': self.airport,
            'fix': self.fix,
            'multiple_code': self.multiple_code,
            'sectors': [sector.to_dict() for sector in self.sectors],
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AirportMSA':
        return cls(
            airport=data['airport'],
            fix=data['fix'],
            multiple_code=data.get('multiple_code', ' '),
            sectors=tuple(MSASector.from_dict(s) for s in data.get('sectors', [])),
            **cls._base_kwargs(data),
        )


def orient3(a: Coordinate, b: Coordinate, c: Coordinate) -> float:
    """
    Orientation of three points with latitude as x and longitude as y.

    Returns a negative value, a positive value or zero (collinear). Results
    too close to zero for floating point are recomputed exactly.
    """
    ax, ay = a.latitude, a.longitude
    bx, by = b.latitude, b.longitude
    cx, cy = c.latitude, c.longitude

    left = (ay - cy) * (bx - cx)
    right = (ax - cx) * (by - cy)
    det = left - right

    if left > 0:
        if right <= 0:
            return det
        s = left + right
    elif left < 0:
        if right >= 0:
            return det
        s = -(left + right)
    else:
        return det

    tolerance = ERRBOUND3 * s
    if det >= tolerance or det <= -tolerance:
        return det

    fax, fay, fbx, fby, fcx, fcy = (Fraction(v) for v in (ax, ay, bx, by, cx, cy))
    exact = (fay - fcy) * (fbx - fcx) - (fax - fcx) * (fby - fcy)
    return float(exact.numerator > 0) - float(exact.numerator < 0)


class Region(ABC):
    """One closed loop of an airspace."""

    def __init__(self, segments: Sequence[ControlledAirspace]):
        self.segments = list(segments)

    @staticmethod
    def from_segments(segments: Sequence[ControlledAirspace]) -> 'Region':
        """
        Pick the region kind for a loop.

        Raises:
            GeometryError: If the loop mixes shapes no region supports
        """
        boundaries = [s.boundary for s in segments]
        if len(boundaries) == 1 and isinstance(boundaries[0], BoundaryCircle):
            return CircularRegion(segments)
        if any(isinstance(b, BoundaryArc) for b in boundaries):
            return ArcRegion(segments)
        if all(type(b) is BoundaryLine for b in boundaries):
            return LineRegion(segments)
        raise GeometryError("Unsupported combination of boundary segments.")

    def check_altitude(self, altitude: AltitudeMSL) -> bool:
        """
        Whether ``altitude`` is within the loop's vertical bounds.

        Bounds come from the first segment. Heights above ground cannot be
        compared to an MSL altitude and are treated as open.

        Raises:
            GeometryError: If the first segment has neither bound
        """
        lower, upper = self.segments[0].vertical_bounds
        if lower is None and upper is None:
            raise GeometryError("First segment of airspace must have altitude restrictions.")
        if isinstance(lower, AltitudeMSL) and altitude.feet < lower.feet:
            return False
        if isinstance(upper, AltitudeMSL) and altitude.feet > upper.feet:
            return False
        return True

    @abstractmethod
    def contains(self, point: Coordinate, altitude: AltitudeMSL) -> bool:
        pass


class CircularRegion(Region):
    @property
    def boundary(self) -> BoundaryCircle:
        return self.segments[0].boundary

    def contains(self, point: Coordinate, altitude: AltitudeMSL) -> bool:
        return self.boundary.center.distance_to(point) <= self.boundary.radius and self.check_altitude(altitude)


class LineRegion(Region):
    """
    Polygon of great-circle segments treated as straight lines in degrees.

    Points on an edge or vertex count as inside.
    """

    def __init__(self, segments: Sequence[ControlledAirspace]):
        super().__init__(segments)
        self.vertices = [s.boundary.vertex for s in self.segments]

    def contains(self, point: Coordinate, altitude: AltitudeMSL) -> bool:
        if not self.check_altitude(altitude):
            return False
        return self.contains_point(point)

    def contains_point(self, point: Coordinate) -> bool:
        vertices = self.vertices
        x, y = point.latitude, point.longitude
        n = len(vertices)

        inside = True
        limit = n
        i, j = 0, n - 1
        while i < limit:
            a = vertices[i]
            b = vertices[j]
            xi, yi = a.latitude, a.longitude
            xj, yj = b.latitude, b.longitude

            if yj < yi:
                if yj < y < yi:
                    s = orient3(a, b, point)
                    if s == 0:
                        return True
                    inside ^= 0 < s
                elif y == yi:
                    yk = vertices[(i + 1) % n].longitude
                    if yi < yk:
                        s = orient3(a, b, point)
                        if s == 0:
                            return True
                        inside ^= 0 < s
            elif yi < yj:
                if yi < y < yj:
                    s = orient3(a, b, point)
                    if s == 0:
                        return True
                    inside ^= s < 0
                elif y == yi:
                    yk = vertices[(i + 1) % n].longitude
                    if yk < yi:
                        s = orient3(a, b, point)
                        if s == 0:
                            return True
                        inside ^= s < 0
            elif y == yi:
                x0, x1 = min(xi, xj), max(xi, xj)
                if i == 0:
                    while j > 0:
                        k = (j + n - 1) % n
                        p = vertices[k]
                        if p.longitude != y:
                            break
                        x0, x1 = min(x0, p.latitude), max(x1, p.latitude)
                        j = k
                    if j == 0:
                        return x0 <= x <= x1
                    limit = j + 1

                y0 = vertices[(j + n - 1) % n].longitude
                while i + 1 < limit:
                    p = vertices[i + 1]
                    if p.longitude != y:
                        break
                    x0, x1 = min(x0, p.latitude), max(x1, p.latitude)
                    i += 1

                if x0 <= x <= x1:
                    return True

                y1 = vertices[(i + 1) % n].longitude
                if x < x0 and ((y0 < y) != (y1 < y)):
                    inside = not inside

            j = i
            i += 1

        return not inside


def _orientation(p: Coordinate, q: Coordinate, r: Coordinate) -> bool:
    return ((q.latitude - p.latitude) * (r.longitude - q.longitude)
            - (q.longitude - p.longitude) * (r.latitude - q.latitude)) > 0


def _euclidean(a: Coordinate, b: Coordinate) -> float:
    offset = b - a
    return math.hypot(offset.latitude, offset.longitude)


class ArcRegion(Region):
    """
    Loop mixing lines and arcs, tested by counting crossings of a ray.

    The ray runs from the point to a reference outside the loop's south-west
    corner; arcs are intersected as circles in degree space and the hits
    kept only where they fall within the arc's angular span.
    """

    def __init__(self, segments: Sequence[ControlledAirspace]):
        super().__init__(segments)
        boundaries = [s.boundary for s in self.segments]
        count = len(boundaries)

        self.lines: List[Tuple[Coordinate, Coordinate]] = []
        self.arcs: List[Tuple[BoundaryArc, TrueCourse]] = []

        for index, boundary in enumerate(boundaries):
            if type(boundary) is BoundaryLine:
                self.lines.append((boundary.vertex, boundaries[(index + 1) % count].vertex))

        for index, boundary in enumerate(boundaries):
            if not isinstance(boundary, BoundaryArc):
                continue
            following = boundaries[(index + 1) % count]
            end_bearing, end_distance = boundary.origin.get_bearing_distance(following.vertex)
            if abs(end_distance - boundary.distance) > ARC_ENDPOINT_TOLERANCE:
                raise GeometryError(
                    f"Endpoint is more than {ARC_ENDPOINT_TOLERANCE}nmi off of arc around {boundary.origin.dms}.")
            self.arcs.append((boundary, end_bearing or TrueCourse(360)))

    def _reference_point(self) -> Coordinate:
        vertices = [s.boundary.vertex for s in self.segments]
        max_radius = (max(arc.distance for arc, _ in self.arcs) + 0.1) / 60
        return Coordinate(min(v.latitude for v in vertices) - max_radius,
                          min(v.longitude for v in vertices) - max_radius)

    @staticmethod
    def crosses_line(line: Tuple[Coordinate, Coordinate], point: Coordinate, target: Coordinate) -> bool:
        start, end = line
        o1 = _orientation(start, end, point)
        o2 = _orientation(start, end, target)
        o3 = _orientation(point, target, start)
        o4 = _orientation(point, target, end)
        return o1 != o2 and o3 != o4

    @staticmethod
    def crosses_arc(arc: Tuple[BoundaryArc, TrueCourse], point: Coordinate, target: Coordinate) -> bool:
        boundary, end_bearing = arc
        origin = boundary.origin
        relative = point - origin

        # Degree-space radius, averaged between the arc origin and the point
        radius = _euclidean(origin.fix_radial_distance(TrueCourse(90), boundary.distance), origin)
        radius += _euclidean(relative.fix_radial_distance(TrueCourse(90), boundary.distance), relative)
        radius /= 2

        delta = target - point
        dy, dx = delta.latitude, delta.longitude
        if dx == 0:
            # Vertical ray: x is fixed at the point's longitude
            remainder = radius ** 2 - relative.longitude ** 2
            if remainder < 0:
                return False
            root = math.sqrt(remainder)
            offsets = [(root, relative.longitude), (-root, relative.longitude)]
        else:
            m = dy / dx
            b = relative.latitude - relative.longitude * m
            d = (m ** 2 + 1) * radius ** 2 - b ** 2
            if d < 0:
                return False
            x1 = -((math.sqrt(d) + b * m) / (m ** 2 + 1))
            x2 = (math.sqrt(d) - b * m) / (m ** 2 + 1)
            offsets = [(x1 * m + b, x1), (x2 * m + b, x2)]

        min_lat, max_lat = min(point.latitude, target.latitude), max(point.latitude, target.latitude)
        min_lon, max_lon = min(point.longitude, target.longitude), max(point.longitude, target.longitude)

        hits = 0
        for off_lat, off_lon in offsets:
            intersection = Coordinate(off_lat, off_lon) + origin
            if not (min_lat <= intersection.latitude <= max_lat and min_lon <= intersection.longitude <= max_lon):
                continue
            theta = TrueCourse(360 - math.degrees(math.atan2(off_lat, off_lon)) + 90)
            if ArcRegion._within_span(boundary, end_bearing, theta):
                hits += 1

        return hits % 2 == 1

    @staticmethod
    def _within_span(boundary: BoundaryArc, end_bearing: TrueCourse, theta: TrueCourse) -> bool:
        start = boundary.bearing
        if boundary.clockwise:
            if start < end_bearing:
                return start < theta < end_bearing
            return theta > start or theta < end_bearing
        if start > end_bearing:
            return end_bearing < theta < start
        return theta < start or theta > end_bearing

    def contains(self, point: Coordinate, altitude: AltitudeMSL) -> bool:
        if not self.check_altitude(altitude):
            return False

        reference = self._reference_point()
        lines_crossed = sum(1 for line in self.lines if self.crosses_line(line, point, reference))
        arcs_crossed = sum(1 for arc in self.arcs if self.crosses_arc(arc, point, reference))
        return (lines_crossed + arcs_crossed) % 2 == 1


class Airspace:
    """
    A controlled airspace made of one or more closed loops.

    Args:
        segments: Boundary records in file order; every loop must end with
            a return-to-origin segment

    Raises:
        GeometryError: If the last loop is left open or a loop cannot be
            turned into a region
    """

    def __init__(self, segments: Sequence[ControlledAirspace]):
        if not segments:
            raise GeometryError("Airspace needs at least one segment.")

        self.segments = list(segments)
        self.regions: List[Region] = []

        loop: List[ControlledAirspace] = []
        for segment in self.segments:
            loop.append(segment)
            if segment.boundary.via.returns_to_origin:
                self.regions.append(Region.from_segments(loop))
                loop = []

        if loop:
            raise GeometryError("Last segment must return to origin.")
        logger.debug(f"Airspace {self.center} built with {len(self.regions)} regions")

    @property
    def center(self) -> str:
        return self.segments[0].center

    @property
    def multiple_code(self) -> str:
        return self.segments[0].multiple_code

    @property
    def airspace_class(self) -> str:
        return self.segments[0].airspace_class

    @property
    def name(self) -> str:
        return self.segments[0].name

    def contains(self, point: Coordinate, altitude: AltitudeMSL) -> bool:
        return any(region.contains(point, altitude) for region in self.regions)

    def __repr__(self) -> str:
        return f"Airspace({self.center}{self.multiple_code.strip()}, class {self.airspace_class}, {len(self.regions)} regions)"
