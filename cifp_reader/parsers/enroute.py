from typing import Optional

from .base import RecordParser
from ..models.altitude import AltitudeMSL
from ..models.course import MagneticCourse
from ..models.enroute import AirwayFixLine, PathPoint, Waypoint
from ..models.restrictions import AltitudeRestriction
from ..utils.fix_resolver import UnresolvedWaypoint

AIRWAY_FIX_SECTIONS = ('D ', 'DB', 'EA')
UNKNOWN_ALTITUDE = 'UNKNN'


class WaypointParser(RecordParser):
    """Enroute (``EA``) and terminal (``PC``) waypoints."""

    def parse(self, line: str) -> Waypoint:
        self.check(line, 0, 1, 'S')
        if line[4] not in 'PH':
            self.check(line, 4, 6, 'EA')
            self.check_empty(line, 10, 13)
        else:
            self.check(line, 4, 6, 'P ', 'H ')
            self.check(line, 12, 13, 'C')
        airport = line[6:10].strip()

        identifier = line[13:18].rstrip()
        self.check_empty(line, 18, 19)
        self.check(line, 21, 22, '0')
        self.check_empty(line, 22, 26)

        waypoint_type = line[27].lower() if line[26] == ' ' else line[26]
        self.check_empty(line, 28, 30)
        usage = line[30]
        self.check_empty(line, 31, 32)

        position = self.parse_coordinate(line, 32, 51)
        self.check_empty(line, 51, 74)
        variation = self.parse_variation(line, 74, 75, 79)
        self.check_empty(line, 79, 84)
        self.check(line, 84, 87, 'NAR')
        self.check_empty(line, 87, 98)

        frn, cycle = self.frn_and_cycle(line)
        return Waypoint(client=line[1:4], file_record_number=frn, cycle=cycle,
                        identifier=identifier, airport=airport, waypoint_type=waypoint_type,
                        usage=usage, position=position, magnetic_variation=variation,
                        name=line[98:123].rstrip())


class PathPointParser(RecordParser):
    """Final approach path point; continuation records are not supported."""

    def parse(self, line: str) -> Optional[PathPoint]:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'P ')
        airport = line[6:10].strip()
        self.check(line, 12, 13, 'P')

        approach = line[13:19].rstrip()
        runway = line[19:24].rstrip()
        self.check(line, 24, 26, '00')
        if line[26] >= '2':
            return None

        threshold = self.parse_coordinate(line, 37, 60)
        glidepath_angle = self.parse_decimal(line, 66, 70, 100)
        alignment_point = self.parse_coordinate(line, 70, 93)
        crossing_height = self.parse_decimal(line, 102, 108, 10)
        self.check(line, 108, 109, 'F')

        frn, cycle = self.frn_and_cycle(line)
        return PathPoint(client=line[1:4], file_record_number=frn, cycle=cycle,
                         airport=airport, approach=approach, runway=runway, position=threshold,
                         glidepath_angle=glidepath_angle, flight_path_alignment_point=alignment_point,
                         threshold_crossing_height=crossing_height)


class AirwayFixParser(RecordParser):
    """One fix of an enroute airway (``ER``)."""

    def _altitude(self, line: str, start: int) -> Optional[AltitudeMSL]:
        data = line[start:start + 5]
        if not data.strip() or data == UNKNOWN_ALTITUDE:
            return None
        return AltitudeMSL(self.parse_int(line, start, start + 5))

    def _course(self, line: str, start: int) -> Optional[MagneticCourse]:
        degrees = self.parse_optional_decimal(line, start, start + 4, 10)
        return None if degrees is None else MagneticCourse(degrees)

    def parse(self, line: str) -> AirwayFixLine:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'ER')
        self.check_empty(line, 6, 13)

        identifier = line[13:18].rstrip()
        self.check_empty(line, 18, 25)
        sequence_number = self.parse_int(line, 25, 29)
        fix = UnresolvedWaypoint(line[29:34].rstrip())

        if line[36:38] not in AIRWAY_FIX_SECTIONS:
            self.fail(36, line)
        self.check(line, 38, 39, '0')
        if line[44] not in 'RO':
            self.fail(44, line)
        rnav = line[44] == 'R'
        level = line[45]
        self.check_empty(line, 46, 70)

        outbound_course = self._course(line, 70)
        distance = self.parse_optional_decimal(line, 74, 78, 10)
        inbound_course = self._course(line, 78)
        self.check_empty(line, 82, 83)

        outbound_minimum = self._altitude(line, 83)
        inbound_minimum = self._altitude(line, 88)
        maximum = self._altitude(line, 93)
        self.check_empty(line, 98, 123)

        frn, cycle = self.frn_and_cycle(line)
        return AirwayFixLine(client=line[1:4], file_record_number=frn, cycle=cycle,
                             airway_identifier=identifier, sequence_number=sequence_number, fix=fix,
                             rnav=rnav, level=level, outbound_course=outbound_course, distance=distance,
                             inbound_course=inbound_course,
                             outbound_altitude=AltitudeRestriction(outbound_minimum, maximum),
                             inbound_altitude=AltitudeRestriction(inbound_minimum, maximum))
