import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .coordinate import Coordinate
from .course import MagneticCourse
from .record import RecordLine
from .restrictions import AltitudeRestriction
from .validation import ResolutionError
from ..utils.fix_resolver import FixTable, UnresolvedWaypoint

logger = logging.getLogger(__name__)

# Waypoint type letters (column 27, or lowercased column 28 when 27 is blank)
WAYPOINT_TYPES = {
    'C': 'combined named intersection and RNAV',
    'R': 'named intersection',
    'V': 'VFR waypoint',
    'W': 'RNAV waypoint',
    'v': 'lat/lon full degree',
    'w': 'lat/lon half degree',
}

# Waypoint usage letters (column 31)
WAYPOINT_USAGES = {
    'B': 'high and low',
    'H': 'high',
    'L': 'low',
    ' ': 'terminal',
}


@dataclass(frozen=True)
class Waypoint(RecordLine):
    identifier: str
    airport: str
    waypoint_type: str
    usage: str
    position: Coordinate
    magnetic_variation: float
    name: str

    header = 'EA'

    @property
    def type_description(self) -> str:
        return WAYPOINT_TYPES.get(self.waypoint_type, 'unknown')

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            'identifier': self.identifier,
            'airport': self.airport,
            'waypoint_type': self.waypoint_type,
            'usage': self.usage,
            'position': self.position.to_dict(),
            'magnetic_variation': self.magnetic_variation,
            'name': self.name,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Waypoint':
        return cls(
            identifier=data['identifier'],
            airport=data.get('airport', ''),
            waypoint_type=data.get('waypoint_type', 'R'),
            usage=data.get('usage', ' '),
            position=Coordinate.from_dict(data['position']),
            magnetic_variation=data.get('magnetic_variation', 0.0),
            name=data.get('name', ''),
            **cls._base_kwargs(data),
        )


@dataclass(frozen=True)
class PathPoint(RecordLine):
    """Final approach path point of an RNAV approach (threshold and FPAP)."""

    airport: str
    approach: str
    runway: str
    position: Coordinate
    glidepath_angle: float
    flight_path_alignment_point: Coordinate
    threshold_crossing_height: float

    header = 'PP'


@dataclass(frozen=True)
class AirwayFixLine(RecordLine):
    airway_identifier: str
    sequence_number: int
    fix: UnresolvedWaypoint
    rnav: bool
    level: str
    outbound_course: Optional[MagneticCourse]
    distance: Optional[float]
    inbound_course: Optional[MagneticCourse]
    outbound_altitude: AltitudeRestriction
    inbound_altitude: AltitudeRestriction

    header = 'ER'


@dataclass(frozen=True)
class AirwayFix:
    name: Optional[str]
    point: Coordinate
    inbound_altitude: AltitudeRestriction = field(default_factory=AltitudeRestriction.unrestricted)
    outbound_altitude: AltitudeRestriction = field(default_factory=AltitudeRestriction.unrestricted)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'point': self.point.to_dict(),
            'inbound_altitude': self.inbound_altitude.to_dict(),
            'outbound_altitude': self.outbound_altitude.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AirwayFix':
        return cls(
            data.get('name'),
            Coordinate.from_dict(data['point']),
            AltitudeRestriction.from_dict(data.get('inbound_altitude', {})),
            AltitudeRestriction.from_dict(data.get('outbound_altitude', {})),
        )


class Airway:
    """
    An ordered chain of resolved fixes.

    Airway names are reused around the world, so two airways with the same
    identifier may coexist; each instance is one continuous run of
    increasing sequence numbers.
    """

    def __init__(self, identifier: str, fixes: Sequence[AirwayFix]):
        self.identifier = identifier
        self.fixes: List[AirwayFix] = list(fixes)

    @classmethod
    def from_lines(cls, identifier: str, lines: Sequence[AirwayFixLine], fix_table: FixTable) -> 'Airway':
        """
        Resolve a run of airway fix records into an airway.

        The first fix is disambiguated by its proximity to the second one;
        every later fix by its proximity to the fix before it.

        Raises:
            ResolutionError: If fewer than two fixes are given or a fix
                cannot be resolved
        """
        if len(lines) < 2:
            raise ResolutionError(f"Airway {identifier} must have at least two points.")

        first = lines[0]
        fixes = [AirwayFix(first.fix.name, first.fix.resolve(fix_table, lines[1].fix),
                           first.inbound_altitude, first.outbound_altitude)]
        for line in lines[1:]:
            fixes.append(AirwayFix(line.fix.name, line.fix.resolve(fix_table, fixes[-1].point),
                                   line.inbound_altitude, line.outbound_altitude))

        logger.debug(f"Built airway {identifier} with {len(fixes)} fixes")
        return cls(identifier, fixes)

    def __iter__(self) -> Iterator[AirwayFix]:
        return iter(self.fixes)

    def __len__(self) -> int:
        return len(self.fixes)

    def __repr__(self) -> str:
        return f"Airway({self.identifier}, {len(self.fixes)} fixes)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'identifier': self.identifier,
            'fixes': [f.to_dict() for f in self.fixes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Airway':
        return cls(data['identifier'], [AirwayFix.from_dict(f) for f in data.get('fixes', [])])
