from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from .altitude import AltitudeMSL
from .coordinate import Coordinate
from .course import MagneticCourse
from .record import RecordLine

# Facility class letters (column 28)
FACILITY_VOR = 'V'
FACILITY_NDB = 'H'

# Marker class letters (column 29); markers and navaids share letters
MARKER_ILS = 'I'
MARKER_DME = 'D'
MARKER_TACAN = 'T'
MARKER_MILITARY_TACAN = 'M'
DME_MARKERS = (MARKER_DME, MARKER_TACAN, MARKER_MILITARY_TACAN, MARKER_ILS)


@dataclass(frozen=True)
class NavaidClass:
    """Facility, marker, power and voice letters of a navaid class field."""

    facility: str
    marker: str
    power: str
    voice: str
    on_field: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'facility': self.facility,
            'marker': self.marker,
            'power': self.power,
            'voice': self.voice,
            'on_field': self.on_field,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NavaidClass':
        known_fields = {field for field in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


@dataclass(frozen=True)
class Navaid(RecordLine):
    identifier: str
    position: Coordinate
    magnetic_variation: Optional[float]
    name: str

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            'identifier': self.identifier,
            'position': self.position.to_dict(),
            'magnetic_variation': self.magnetic_variation,
            'name': self.name,
        })
        return data

    @classmethod
    def _navaid_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        kwargs = cls._base_kwargs(data)
        kwargs.update({
            'identifier': data['identifier'],
            'position': Coordinate.from_dict(data['position']),
            'magnetic_variation': data.get('magnetic_variation'),
            'name': data.get('name', ''),
        })
        return kwargs

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Navaid':
        """Rebuild any navaid kind from its dictionary, dispatching on ``header``."""
        navaid_class = _NAVAID_HEADERS.get(data.get('header'))
        if navaid_class is None:
            raise ValueError(f"Unknown navaid kind: {data.get('header')}")
        return navaid_class._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Navaid':
        raise NotImplementedError


@dataclass(frozen=True)
class NDB(Navaid):
    channel: int = 0
    navaid_class: Optional[NavaidClass] = None

    header = 'DB'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['channel'] = self.channel
        data['navaid_class'] = self.navaid_class.to_dict() if self.navaid_class else None
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'NDB':
        navaid_class = data.get('navaid_class')
        return cls(channel=data.get('channel', 0),
                   navaid_class=NavaidClass.from_dict(navaid_class) if navaid_class else None,
                   **cls._navaid_kwargs(data))


@dataclass(frozen=True)
class DME(Navaid):
    """Distance measuring equipment, standalone or collocated with a VOR or localizer."""

    channel: int = 0
    navaid_class: Optional[NavaidClass] = None
    elevation: Optional[AltitudeMSL] = None

    header = 'DD'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['channel'] = self.channel
        data['navaid_class'] = self.navaid_class.to_dict() if self.navaid_class else None
        data['elevation'] = self.elevation.feet if self.elevation else None
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'DME':
        navaid_class = data.get('navaid_class')
        elevation = data.get('elevation')
        return cls(channel=data.get('channel', 0),
                   navaid_class=NavaidClass.from_dict(navaid_class) if navaid_class else None,
                   elevation=AltitudeMSL(elevation) if elevation is not None else None,
                   **cls._navaid_kwargs(data))


@dataclass(frozen=True)
class RadioNavaid(Navaid):
    """Frequency-tuned navaid with an optional collocated DME."""

    frequency: float = 0.0
    navaid_class: Optional[NavaidClass] = None
    elevation: Optional[AltitudeMSL] = None
    collocated_dme: Optional[DME] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['frequency'] = self.frequency
        data['navaid_class'] = self.navaid_class.to_dict() if self.navaid_class else None
        data['elevation'] = self.elevation.feet if self.elevation else None
        data['collocated_dme'] = self.collocated_dme.to_dict() if self.collocated_dme else None
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'RadioNavaid':
        navaid_class = data.get('navaid_class')
        elevation = data.get('elevation')
        dme = data.get('collocated_dme')
        return cls(frequency=data.get('frequency', 0.0),
                   navaid_class=NavaidClass.from_dict(navaid_class) if navaid_class else None,
                   elevation=AltitudeMSL(elevation) if elevation is not None else None,
                   collocated_dme=DME._from_dict(dme) if dme else None,
                   **cls._navaid_kwargs(data))


@dataclass(frozen=True)
class VOR(RadioNavaid):
    header = 'DV'


@dataclass(frozen=True)
class NavaidILS(RadioNavaid):
    """Localizer navaid record; its position is the one of the collocated DME."""

    header = 'DI'


@dataclass(frozen=True)
class ILS(Navaid):
    """Airport localizer/glideslope record; variation comes from the localizer course."""

    airport: str = ''
    category: str = ' '
    frequency: float = 0.0
    runway: str = ''
    localizer_course: Optional[MagneticCourse] = None
    glideslope_position: Optional[Coordinate] = None

    header = 'PI'

    @property
    def localizer_position(self) -> Coordinate:
        return self.position

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            'airport': self.airport,
            'category': self.category,
            'frequency': self.frequency,
            'runway': self.runway,
            'localizer_course': self.localizer_course.to_dict() if self.localizer_course else None,
            'glideslope_position': self.glideslope_position.to_dict() if self.glideslope_position else None,
        })
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'ILS':
        course = data.get('localizer_course')
        glideslope = data.get('glideslope_position')
        return cls(airport=data.get('airport', ''),
                   category=data.get('category', ' '),
                   frequency=data.get('frequency', 0.0),
                   runway=data.get('runway', ''),
                   localizer_course=MagneticCourse(course[0], course[1]) if course else None,
                   glideslope_position=Coordinate.from_dict(glideslope) if glideslope else None,
                   **cls._navaid_kwargs(data))


_NAVAID_HEADERS: Dict[Optional[str], Type[Navaid]] = {
    NDB.header: NDB,
    DME.header: DME,
    VOR.header: VOR,
    NavaidILS.header: NavaidILS,
    ILS.header: ILS,
    'PN': NDB,
}
