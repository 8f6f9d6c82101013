from typing import List, Optional

from .base import RecordParser
from ..models.airspace import (
    AirportMSA, BoundaryArc, BoundaryCircle, BoundaryLine, BoundaryRhumbLine, BoundarySegment, BoundaryVia,
    ControlledAirspace, GridMORA, MSASector, RestrictiveAirspace,
)
from ..models.altitude import Altitude, AltitudeAGL, AltitudeMSL, FlightLevel
from ..models.course import MagneticCourse, TrueCourse
from ..models.restrictions import AltitudeRestriction
from ..models.validation import RecordFormatError

MORA_CELLS = 30
MORA_UNKNOWN = 'UNK'
UNLIMITED_LEVEL = 999
MSA_SECTOR_WIDTH = 11
MSA_MAX_SECTORS = 7

_BOUNDARY_SHAPES = {
    'C': BoundaryVia.CIRCLE,
    'G': BoundaryVia.GREAT_CIRCLE,
    'H': BoundaryVia.RHUMB_LINE,
    'L': BoundaryVia.COUNTER_CLOCKWISE_ARC,
    'R': BoundaryVia.CLOCKWISE_ARC,
}
_BOUNDARY_ENDINGS = {
    ' ': BoundaryVia.CONTINUE,
    'E': BoundaryVia.RETURN_TO_ORIGIN,
}


def boundary_via(code: str) -> BoundaryVia:
    """
    Decode a two character boundary via code such as ``G `` or ``CE``.

    Raises:
        RecordFormatError: If either character is not a known code
    """
    if len(code) != 2 or code[0] not in _BOUNDARY_SHAPES or code[1] not in _BOUNDARY_ENDINGS:
        raise RecordFormatError(f"Invalid boundary via code {code!r}.")
    return _BOUNDARY_SHAPES[code[0]] | _BOUNDARY_ENDINGS[code[1]]


def airspace_limit(data: str) -> Optional[Altitude]:
    """
    Decode a six character airspace limit.

    Examples:
        >>> airspace_limit('GND  A')
        AltitudeAGL(feet=0, ground_elevation=None)
        >>> airspace_limit('FL180M')
        FlightLevel(level=180)
    """
    unit = data[5]
    try:
        if unit == 'A':
            return AltitudeAGL(0 if data[0:3] == 'GND' else int(data[0:5]))
        if unit == 'M':
            if data[0:2] == 'FL':
                return FlightLevel(int(data[2:5]))
            if data[0:5] == 'UNLTD':
                return FlightLevel(UNLIMITED_LEVEL)
            return AltitudeMSL(int(data[0:5]))
    except ValueError:
        raise RecordFormatError(f"Invalid airspace limit {data!r}.") from None
    if unit == ' ':
        return None
    raise RecordFormatError(f"Invalid airspace limit unit {unit!r}.")


class _BoundaryParser(RecordParser):
    """Boundary segment and vertical limits shared by controlled and restrictive airspace."""

    def parse_boundary(self, line: str) -> BoundarySegment:
        try:
            via = boundary_via(line[30:32])
        except RecordFormatError:
            raise RecordFormatError.at_column(30, line) from None

        shape = via.shape
        if shape in (BoundaryVia.CLOCKWISE_ARC, BoundaryVia.COUNTER_CLOCKWISE_ARC):
            return BoundaryArc(via, self.parse_coordinate(line, 32, 51),
                               origin=self.parse_coordinate(line, 51, 70),
                               distance=self.parse_decimal(line, 70, 74, 10),
                               bearing=TrueCourse(self.parse_decimal(line, 74, 78, 10)))
        if shape == BoundaryVia.CIRCLE:
            return BoundaryCircle(via, self.parse_coordinate(line, 51, 70),
                                  radius=self.parse_decimal(line, 70, 74, 10))
        if shape == BoundaryVia.GREAT_CIRCLE:
            return BoundaryLine(via, self.parse_coordinate(line, 32, 51))
        return BoundaryRhumbLine(via, self.parse_coordinate(line, 32, 51))

    def parse_limits(self, line: str):
        try:
            return airspace_limit(line[81:87]), airspace_limit(line[87:93])
        except RecordFormatError:
            raise RecordFormatError.at_column(81, line) from None


class GridMORAParser(RecordParser):
    def parse(self, line: str) -> GridMORA:
        self.check(line, 0, 13, 'S   AS       ')
        start_position = self.parse_coordinate(line, 13, 20)
        self.check_empty(line, 20, 30)

        moras: List[Optional[FlightLevel]] = []
        for column in range(30, 30 + 3 * MORA_CELLS, 3):
            value = line[column:column + 3]
            moras.append(None if value == MORA_UNKNOWN else FlightLevel(self.parse_int(line, column, column + 3)))

        frn, cycle = self.frn_and_cycle(line)
        return GridMORA(client='   ', file_record_number=frn, cycle=cycle,
                        start_position=start_position, mora=tuple(moras))


class ControlledAirspaceParser(_BoundaryParser):
    def parse(self, line: str) -> ControlledAirspace:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'UC')
        self.check_empty(line, 17, 19)
        sequence_number = self.parse_int(line, 20, 24)
        self.parse_int(line, 24, 25)
        self.check_empty(line, 28, 30)

        boundary = self.parse_boundary(line)
        self.check_empty(line, 78, 81)
        lower, upper = self.parse_limits(line)

        frn, cycle = self.frn_and_cycle(line)
        return ControlledAirspace(client=line[1:4], file_record_number=frn, cycle=cycle,
                                  region=line[6:8], airspace_type=line[8], center=line[9:14].rstrip(),
                                  airspace_class=line[16], multiple_code=line[19],
                                  sequence_number=sequence_number, boundary=boundary,
                                  lower_limit=lower, upper_limit=upper, name=line[93:123].rstrip())


class RestrictiveAirspaceParser(_BoundaryParser):
    """Restrictive airspace; continuation records past the first are not supported."""

    def parse(self, line: str) -> Optional[RestrictiveAirspace]:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'UR')
        sequence_number = self.parse_int(line, 20, 24)
        if self.parse_int(line, 24, 25) > 1:
            return None
        self.check_empty(line, 28, 30)

        boundary = self.parse_boundary(line)
        self.check_empty(line, 78, 81)
        lower, upper = self.parse_limits(line)

        frn, cycle = self.frn_and_cycle(line)
        return RestrictiveAirspace(client=line[1:4], file_record_number=frn, cycle=cycle,
                                   region=line[6:8], restriction_type=line[8], designation=line[9:19].rstrip(),
                                   multiple_code=line[19], sequence_number=sequence_number, boundary=boundary,
                                   lower_limit=lower, upper_limit=upper, name=line[93:123].rstrip())


class AirportMSAParser(RecordParser):
    """Minimum sector altitudes around an airport fix (``PS``)."""

    def _sector(self, line: str, start: int) -> MSASector:
        return MSASector(
            anticlockwise_limit=MagneticCourse(self.parse_int(line, start, start + 3)),
            clockwise_limit=MagneticCourse(self.parse_int(line, start + 3, start + 6)),
            altitude=AltitudeRestriction(AltitudeMSL(self.parse_int(line, start + 6, start + 9) * 100), None),
            radius=self.parse_decimal(line, start + 9, start + 11),
        )

    def parse(self, line: str) -> AirportMSA:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'P ', 'H ')
        airport = line[6:10].strip()
        self.check(line, 12, 13, 'S')
        fix = line[13:18].rstrip()
        multiple_code = line[22]

        self.check_empty(line, 23, 38)
        self.check(line, 38, 39, '0')
        self.check_empty(line, 39, 42)

        sectors = []
        start = 42
        while len(sectors) < MSA_MAX_SECTORS and line[start] != ' ':
            sectors.append(self._sector(line, start))
            start += MSA_SECTOR_WIDTH
        if len(sectors) < MSA_MAX_SECTORS:
            self.check_empty(line, start, 119)

        # Only magnetic sector bearings are published
        self.check(line, 119, 120, 'M')
        self.check_empty(line, 120, 123)

        frn, cycle = self.frn_and_cycle(line)
        return AirportMSA(client=line[1:4], file_record_number=frn, cycle=cycle,
                          airport=airport, fix=fix, multiple_code=multiple_code, sectors=tuple(sectors))
