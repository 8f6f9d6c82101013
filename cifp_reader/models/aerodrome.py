from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from .altitude import Altitude, AltitudeAGL, AltitudeMSL, FlightLevel
from .coordinate import Coordinate
from .course import MagneticCourse
from .record import RecordLine

# Runway idents made only of compass letters are seaplane waterways
WATERWAY_LETTERS = 'NSEW'
_OPPOSITE_SIDE = {'L': 'R', 'R': 'L', 'C': 'C'}
_OPPOSITE_COMPASS = {'N': 'S', 'S': 'N', 'E': 'W', 'W': 'E'}


def is_waterway(identifier: str) -> bool:
    return 0 < len(identifier) <= 2 and all(c in WATERWAY_LETTERS for c in identifier)


@dataclass(frozen=True)
class Aerodrome(RecordLine):
    """
    Fields shared by airports and heliports.

    ``magnetic_variation`` is in degrees, west positive, as used by
    ``TrueCourse.to_magnetic``.
    """

    identifier: str
    iata_designator: str
    location: Coordinate
    magnetic_variation: float
    elevation: AltitudeMSL
    transition_altitude: Altitude
    transition_level: FlightLevel
    ifr_capable: bool
    usage: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            'identifier': self.identifier,
            'iata_designator': self.iata_designator,
            'location': self.location.to_dict(),
            'magnetic_variation': self.magnetic_variation,
            'elevation': self.elevation.feet,
            'transition_altitude': self.transition_altitude.to_dict(),
            'transition_level': self.transition_level.level,
            'ifr_capable': self.ifr_capable,
            'usage': self.usage,
            'name': self.name,
        })
        return data

    @classmethod
    def _aerodrome_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = cls._base_kwargs(data)
        kwargs.update({
            'identifier': data['identifier'],
            'iata_designator': data.get('iata_designator', ''),
            'location': Coordinate.from_dict(data['location']),
            'magnetic_variation': data.get('magnetic_variation', 0.0),
            'elevation': AltitudeMSL(data.get('elevation', 0)),
            'transition_altitude': Altitude.from_dict(data.get('transition_altitude', 18000)),
            'transition_level': FlightLevel(data.get('transition_level', 180)),
            'ifr_capable': data.get('ifr_capable', False),
            'usage': data.get('usage', ' '),
            'name': data.get('name', ''),
        })
        return kwargs

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Aerodrome':
        aerodrome_class = _AERODROME_HEADERS.get(data.get('header'))
        if aerodrome_class is None:
            raise ValueError(f"Unknown aerodrome kind: {data.get('header')}")
        return aerodrome_class._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Aerodrome':
        raise NotImplementedError


@dataclass(frozen=True)
class Airport(Aerodrome):
    longest_runway: int = 0

    header = 'PA'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['longest_runway'] = self.longest_runway
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Airport':
        return cls(longest_runway=data.get('longest_runway', 0), **cls._aerodrome_kwargs(data))


@dataclass(frozen=True)
class Heliport(Aerodrome):
    pad_identifier: str = ''

    header = 'HA'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['pad_identifier'] = self.pad_identifier
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Heliport':
        return cls(pad_identifier=data.get('pad_identifier', ''), **cls._aerodrome_kwargs(data))


_AERODROME_HEADERS: Dict[Optional[str], Type[Aerodrome]] = {
    Airport.header: Airport,
    Heliport.header: Heliport,
}


@dataclass(frozen=True)
class Runway(RecordLine):
    """
    Runway threshold record.

    ``identifier`` is stored without its ``RW`` prefix (``08L``, ``NE``).
    The touchdown zone elevation is a zero height above the field elevation
    it carries, and the threshold crossing height is relative to it.
    """

    airport: str
    identifier: str
    length: int
    width: int
    course: MagneticCourse
    endpoint: Coordinate
    tdze: AltitudeAGL
    threshold_crossing_height: AltitudeAGL
    threshold_displacement: int = 0
    approach: Optional[str] = None
    approach_category: str = ' '
    second_approach: Optional[str] = None

    header = 'PG'

    @property
    def is_waterway(self) -> bool:
        return is_waterway(self.identifier)

    @property
    def opposite_identifier(self) -> str:
        """
        Identifier of the other end of this runway.

        ``08L`` gives ``26R``, ``36C`` gives ``18C`` and the waterway ``NE``
        gives ``SW``.
        """
        if self.is_waterway:
            return ''.join(_OPPOSITE_COMPASS[c] for c in self.identifier)

        digits = ''.join(c for c in self.identifier if c.isdigit())
        suffix = self.identifier[len(digits):]
        number = (int(digits) + 17) % 36 + 1
        return f"{number:02d}" + ''.join(_OPPOSITE_SIDE.get(c, c) for c in suffix)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            'airport': self.airport,
            'identifier': self.identifier,
            'length': self.length,
            'width': self.width,
            'course': self.course.to_dict(),
            'endpoint': self.endpoint.to_dict(),
            'tdze': self.tdze.ground_elevation,
            'threshold_crossing_height': self.threshold_crossing_height.feet,
            'threshold_displacement': self.threshold_displacement,
            'approach': self.approach,
            'approach_category': self.approach_category,
            'second_approach': self.second_approach,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Runway':
        tdze = data.get('tdze') or 0
        course = data.get('course') or [360.0, None]
        return cls(
            airport=data['airport'],
            identifier=data['identifier'],
            length=data.get('length', 0),
            width=data.get('width', 0),
            course=MagneticCourse(course[0], course[1]),
            endpoint=Coordinate.from_dict(data['endpoint']),
            tdze=AltitudeAGL(0, tdze),
            threshold_crossing_height=AltitudeAGL(data.get('threshold_crossing_height', 0), tdze),
            threshold_displacement=data.get('threshold_displacement', 0),
            approach=data.get('approach'),
            approach_category=data.get('approach_category', ' '),
            second_approach=data.get('second_approach'),
            **cls._base_kwargs(data),
        )
