from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Dict, Optional, Union

from .validation import GuidanceError


@total_ordering
class Altitude:
    """
    Base class for altitudes.

    Altitudes compare and hash by their mean-sea-level equivalent in feet,
    so ``FlightLevel(50) == AltitudeMSL(5000)``.
    """

    feet: int

    def to_msl(self) -> 'AltitudeMSL':
        raise NotImplementedError

    def to_agl(self, ground_elevation: int) -> 'AltitudeAGL':
        raise NotImplementedError

    def _key(self) -> Any:
        return self.to_msl().feet

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Altitude):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: 'Altitude') -> bool:
        return self.to_msl().feet < other.to_msl().feet

    def __hash__(self) -> int:
        return hash(self._key())

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: Union[int, Dict[str, Any]]) -> 'Altitude':
        """Rebuild an altitude; a bare integer is read as feet MSL."""
        if isinstance(data, int):
            return AltitudeMSL(data)
        kind = data.get('type', 'msl')
        if kind == 'agl':
            return AltitudeAGL(data['feet'], data.get('ground_elevation'))
        if kind == 'fl':
            return FlightLevel(data['level'])
        return AltitudeMSL(data['feet'])


@dataclass(frozen=True, eq=False)
class AltitudeMSL(Altitude):
    feet: int

    def to_msl(self) -> 'AltitudeMSL':
        return self

    def to_agl(self, ground_elevation: int) -> 'AltitudeAGL':
        return AltitudeAGL(self.feet - ground_elevation, ground_elevation)

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'msl', 'feet': self.feet}

    def __str__(self) -> str:
        return f"{self.feet} ft MSL"


@dataclass(frozen=True, eq=False)
class AltitudeAGL(Altitude):
    """Height above a ground elevation which may not be known yet."""

    feet: int
    ground_elevation: Optional[int] = None

    def to_msl(self) -> AltitudeMSL:
        if self.ground_elevation is None:
            raise GuidanceError("Cannot convert AGL to MSL without knowing ground elevation")
        return AltitudeMSL(self.feet + self.ground_elevation)

    def to_agl(self, ground_elevation: int) -> 'AltitudeAGL':
        if self.ground_elevation is None:
            return AltitudeAGL(self.feet, self.ground_elevation)
        return self.to_msl().to_agl(ground_elevation)

    def _key(self) -> Any:
        if self.ground_elevation is None:
            return ('agl', self.feet)
        return self.to_msl().feet

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'agl', 'feet': self.feet, 'ground_elevation': self.ground_elevation}

    def __str__(self) -> str:
        return f"{self.feet} ft AGL"


class FlightLevel(AltitudeMSL):
    """Pressure altitude in hundreds of feet, treated as MSL."""

    def __init__(self, level: int):
        super().__init__(level * 100)

    @property
    def level(self) -> int:
        return self.feet // 100

    def to_dict(self) -> Dict[str, Any]:
        return {'type': 'fl', 'level': self.level}

    def __repr__(self) -> str:
        return f"FlightLevel(level={self.level})"

    def __str__(self) -> str:
        return f"FL{self.level:03d}"


MIN_ALTITUDE = AltitudeMSL(-(2 ** 31))
MAX_ALTITUDE = AltitudeMSL(2 ** 31 - 1)
