from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .course import Course, TrueCourse
from .path_termination import PathTermination
from .validation import GuidanceError, RecordFormatError
from ..utils import geodesy

# Distance within which an overfly fix counts as crossed, nautical miles
OVERFLY_TOLERANCE = 0.005


def _dms_to_decimal(dms: str) -> float:
    degrees = int(dms[0:3])
    minutes = int(dms[3:5]) if len(dms) > 3 else 0
    seconds = float(dms[5:7] + '.' + dms[7:]) if len(dms) > 5 else 0.0
    return degrees + (minutes + seconds / 60) / 60


def _decimal_to_dms(value: float) -> str:
    value = abs(value)
    # Whole hundredths of a second
    total = round(value * 360000)
    degrees, rest = divmod(total, 360000)
    minutes, rest = divmod(rest, 6000)
    seconds, hundredths = divmod(rest, 100)
    return f"{degrees:03d}{minutes:02d}{seconds:02d}{hundredths:02d}"


@dataclass(frozen=True)
class Coordinate:
    """
    A position in signed decimal degrees (south and west negative).

    Addition and subtraction are component-wise and only meant as a local
    linear approximation for small offsets.
    """

    latitude: float
    longitude: float

    @classmethod
    def from_dms(cls, token: str) -> 'Coordinate':
        """
        Parse a fixed-width hemisphere/degree/minute/second token.

        Examples:
            >>> Coordinate.from_dms('N33461617W118153416')
            >>> Coordinate.from_dms('N13E150')

        Raises:
            RecordFormatError: If the token is too short, lacks hemispheres
                or its halves are misaligned
        """
        data = token.strip()
        if len(data) < 7 or data[0] not in 'NS' or ('E' not in data and 'W' not in data):
            raise RecordFormatError(f"Cannot parse coordinate {data}")

        split = max(data.find('E'), data.find('W'))
        if abs(len(data) // 2 - split) > 1:
            raise RecordFormatError(f"Misaligned coordinate {data}")

        try:
            if split == 3:
                latitude = float(int(data[1:split]))
                longitude = float(int(data[split + 1:]))
            else:
                latitude = _dms_to_decimal('0' + data[1:split])
                longitude = _dms_to_decimal(data[split + 1:])
        except ValueError:
            raise RecordFormatError(f"Cannot parse coordinate {data}") from None

        if data[0] == 'S':
            latitude = -latitude
        if data[split] == 'W':
            longitude = -longitude
        return cls(latitude, longitude)

    @property
    def dms(self) -> str:
        """Token in the same format ``from_dms`` reads, to the hundredth of a second."""
        lat = _decimal_to_dms(self.latitude)[1:]
        lon = _decimal_to_dms(self.longitude)
        return f"{'S' if self.latitude < 0 else 'N'}{lat}{'W' if self.longitude < 0 else 'E'}{lon}"

    def fix_radial_distance(self, bearing: Course, distance: float) -> 'Coordinate':
        """Point ``distance`` nautical miles from here along ``bearing`` (converted to true)."""
        lat, lon = geodesy.vincenty_direct(self.latitude, self.longitude, bearing.to_true().degrees, distance)
        return Coordinate(lat, lon)

    def get_bearing_distance(self, other: 'Coordinate') -> Tuple[Optional[TrueCourse], float]:
        """True bearing (None if undefined) and ellipsoidal distance to another point."""
        bearing, distance = geodesy.vincenty_inverse(self.latitude, self.longitude, other.latitude, other.longitude)
        return (None if bearing is None else TrueCourse(bearing)), distance

    def distance_to(self, other: 'Coordinate') -> float:
        """Haversine distance in nautical miles."""
        return geodesy.haversine(self.latitude, self.longitude, other.latitude, other.longitude)

    def __add__(self, other: 'Coordinate') -> 'Coordinate':
        return Coordinate(self.latitude + other.latitude, self.longitude + other.longitude)

    def __sub__(self, other: 'Coordinate') -> 'Coordinate':
        return Coordinate(self.latitude - other.latitude, self.longitude - other.longitude)

    def is_condition_reached(self, termination: PathTermination, position: 'Coordinate',
                             reference: Any = None, tolerance: float = 0.1) -> bool:
        """
        Check whether a leg ending at this point is complete.

        For course legs with a coordinate reference, the fix counts as crossed
        once the aircraft is abeam or past it as seen from the reference.
        A reference flagged ``overfly`` requires passing directly overhead.
        """
        if termination & PathTermination.UNTIL_CROSSING:
            if termination & PathTermination.COURSE and isinstance(reference, Coordinate):
                to_reference = self.get_bearing_distance(reference)[0]
                to_position = self.get_bearing_distance(position)[0]
                if to_reference is None and to_position is None:
                    return True
                if to_reference is not None and to_position is not None:
                    return abs(to_position.angle(to_reference)) - (90 - tolerance) > 0
                if to_reference is None:
                    raise GuidanceError("Reference point should not be the same as the endpoint.")
                # Directly on top of the endpoint
                return True
            if getattr(reference, 'overfly', False):
                return self.distance_to(position) <= OVERFLY_TOLERANCE
            return self.distance_to(position) <= tolerance

        if termination & PathTermination.FOR_DISTANCE and isinstance(reference, Coordinate):
            return self.is_condition_reached(termination | PathTermination.UNTIL_CROSSING, position,
                                             reference, tolerance)

        raise GuidanceError(f"Termination {termination!r} is not supported for a fix endpoint")

    def to_dict(self) -> List[float]:
        return [self.latitude, self.longitude]

    @classmethod
    def from_dict(cls, data: List[float]) -> 'Coordinate':
        return cls(float(data[0]), float(data[1]))

    def __str__(self) -> str:
        return self.dms
