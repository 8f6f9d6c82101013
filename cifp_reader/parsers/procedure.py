"""
Parsers for procedure leg records: SIDs (``PD``), STARs (``PE``) and
approaches (``PF``).

All three share the path and terminator block (columns 47 to 81) and the
restriction block (columns 82 to 102); they differ in the route type rules,
the columns around the turn direction and the trailing fields.
"""

from typing import Any, Optional, Tuple

from .base import RecordParser
from ..models.course import MagneticCourse
from ..models.guidance import Arc, Racetrack
from ..models.path_termination import PathTermination
from ..models.procedure import ApproachLine, SIDLine, STARLine
from ..models.restrictions import AltitudeRestriction, SpeedRestriction
from ..models.validation import RecordFormatError
from ..utils.fix_resolver import UnresolvedWaypoint

SID_COMMON_ROUTES = '25'
SID_RNAV_ROUTES = '456'
STAR_COMMON_ROUTES = '25'
APPROACH_TRANSITION = 'A'
CATCH_ALL = 'ALL  '
LEFT_TURN = 'L'
TIMED_LEG = 'T'


class _ProcedureParser(RecordParser):
    """Columns shared by every procedure leg record."""

    subsection = ''

    def parse_header(self, line: str, areas: Tuple[str, ...] = ('P ',)) -> dict:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, *areas)
        self.check(line, 12, 13, self.subsection)
        return {
            'client': line[1:4],
            'airport': line[6:10].strip(),
            'name': line[13:19].strip(),
            'route_type': line[19],
            'transition': line[20:25].strip(),
        }

    def check_common_transition(self, line: str) -> None:
        """A common route names a runway, the catch-all ``ALL`` or nothing."""
        if line[20:22] != 'RW' and not self.is_blank(line, 20, 25):
            self.check(line, 20, 25, CATCH_ALL)

    def parse_sequence(self, line: str) -> Tuple[int, Optional[UnresolvedWaypoint]]:
        self.check_empty(line, 25, 26)
        sequence_number = self.parse_int(line, 26, 29)
        fix = line[29:34].strip()
        return sequence_number, UnresolvedWaypoint(fix) if fix else None

    def parse_path_segment(self, line: str, fix: Optional[UnresolvedWaypoint]) -> Tuple[PathTermination, Any]:
        """
        Decode the path and terminator and the via it implies.

        Holds and arcs need more than a course, so their missing fields are
        reported as format errors rather than silently dropped.

        Returns:
            The path termination and a ``MagneticCourse``, ``Arc``,
            ``Racetrack`` or None
        """
        try:
            termination = PathTermination.from_code(line[47:49])
        except RecordFormatError:
            raise RecordFormatError.at_column(47, line) from None
        self.check(line, 49, 50, ' ', 'Y')

        navaid = line[50:54].strip()
        if not navaid:
            self.check_empty(line, 54, 56)

        arc_radius = self.parse_optional_decimal(line, 56, 62, 1000)
        station_bearing = self.parse_optional_decimal(line, 62, 66, 10)
        station_distance = self.parse_optional_decimal(line, 66, 70, 10)
        if station_bearing == 0 and station_distance == 0:
            station_bearing = station_distance = None

        degrees = self.parse_optional_decimal(line, 70, 74, 10)
        if degrees is None and station_bearing is not None:
            degrees = station_bearing
        course = None if degrees is None else MagneticCourse(degrees)

        if line[74] == TIMED_LEG:
            distance = None
            minutes = self.parse_optional_decimal(line, 75, 78, 10)
            seconds = None if minutes is None else minutes * 60
        else:
            distance = self.parse_optional_decimal(line, 74, 78, 10)
            seconds = None
        self.check_empty(line, 80, 82)
        arc_origin = line[106:111].strip() or None

        if termination.has(PathTermination.HOLD):
            if course is None:
                raise RecordFormatError("Holding leg without an inbound course.", 70, line)
            if distance is None and seconds is None:
                raise RecordFormatError("Holding leg without a leg distance or time.", 74, line)
            return termination, Racetrack(None, fix, course, distance, seconds, left_turns=line[43] == LEFT_TURN)

        if course is not None and (termination.has(PathTermination.TRACK) or termination.has(PathTermination.COURSE)
                                   or termination.has(PathTermination.HEADING)
                                   or termination.has(PathTermination.PROCEDURE_TURN)):
            return termination, course

        if termination.has(PathTermination.ARC):
            radius = station_distance if station_distance is not None else arc_radius
            if radius is None:
                raise RecordFormatError("Missing arc radius.", 56, line)
            if course is None:
                raise RecordFormatError("Missing arc endpoint.", 70, line)
            center = arc_origin or navaid
            return termination, Arc(None, UnresolvedWaypoint(center) if center else None, radius, course)

        return termination, None

    def parse_restrictions(self, line: str, always_described: bool = False):
        """
        Altitude restriction, transition altitude and speed limit.

        SIDs and STARs leave the description blank when unrestricted;
        approaches always run the description through the decoder.
        """
        if line[82] == ' ' and not always_described:
            altitude = AltitudeRestriction.unrestricted()
        else:
            try:
                altitude = AltitudeRestriction.from_description(
                    line[82], self.parse_altitude(line, 84, 89), self.parse_altitude(line, 89, 94))
            except RecordFormatError as e:
                raise RecordFormatError(str(e), 82, line) from None

        transition_altitude = self.parse_altitude(line, 94, 99)
        if self.is_blank(line, 99, 102):
            speed = SpeedRestriction.unrestricted()
        else:
            speed = SpeedRestriction(None, self.parse_int(line, 99, 102))
        return altitude, transition_altitude, speed


class SIDParser(_ProcedureParser):
    subsection = 'D'

    def parse(self, line: str) -> SIDLine:
        header = self.parse_header(line)
        if header['route_type'] in SID_COMMON_ROUTES:
            self.check_common_transition(line)
        sequence_number, fix = self.parse_sequence(line)
        self.check(line, 38, 39, '0')

        rnav = None
        if header['route_type'] in SID_RNAV_ROUTES:
            if not self.is_blank(line, 44, 46):
                rnav = self.parse_int(line, 44, 46)
        else:
            self.check_empty(line, 44, 47)

        termination, via = self.parse_path_segment(line, fix)
        altitude, transition_altitude, speed = self.parse_restrictions(line)

        self.check_empty(line, 102, 106)
        self.check_empty(line, 111, 112)
        self.check_empty(line, 116, 117)
        self.check_empty(line, 118, 123)

        frn, cycle = self.frn_and_cycle(line)
        return SIDLine(file_record_number=frn, cycle=cycle, sequence_number=sequence_number,
                       termination=termination, endpoint=fix, via=via, altitude=altitude, speed=speed,
                       transition_altitude=transition_altitude, rnav_requirement=rnav, **header)


class STARParser(_ProcedureParser):
    subsection = 'E'

    def parse(self, line: str) -> STARLine:
        header = self.parse_header(line)
        if header['route_type'] in STAR_COMMON_ROUTES:
            self.check_common_transition(line)
        sequence_number, fix = self.parse_sequence(line)
        self.check(line, 38, 39, '0')
        self.check_empty(line, 44, 47)
        initial = line[47:49] == 'IF'

        termination, via = self.parse_path_segment(line, fix)
        altitude, transition_altitude, speed = self.parse_restrictions(line)

        self.check_empty(line, 102, 117)
        self.check_empty(line, 118, 123)

        frn, cycle = self.frn_and_cycle(line)
        return STARLine(file_record_number=frn, cycle=cycle, sequence_number=sequence_number,
                        termination=termination, endpoint=fix, via=via, altitude=altitude, speed=speed,
                        transition_altitude=transition_altitude, initial=initial, **header)


class ApproachParser(_ProcedureParser):
    """Approach legs for airports and heliports; continuation records are skipped."""

    subsection = 'F'

    def parse(self, line: str) -> Optional[ApproachLine]:
        header = self.parse_header(line, ('P ', 'H '))
        if header['route_type'] != APPROACH_TRANSITION:
            self.check_empty(line, 20, 25)
        sequence_number, fix = self.parse_sequence(line)
        if line[38] > '1':
            return None

        fix_label = line[43]
        rnp = line[44:47].strip() or None

        termination, via = self.parse_path_segment(line, fix)
        referenced_navaid = None
        if not isinstance(via, Racetrack) and termination.has(PathTermination.COURSE) \
                and not self.is_blank(line, 50, 54):
            referenced_navaid = line[50:54].strip()

        altitude, transition_altitude, speed = self.parse_restrictions(line, always_described=True)
        self.check_empty(line, 120, 123)

        frn, cycle = self.frn_and_cycle(line)
        return ApproachLine(file_record_number=frn, cycle=cycle, sequence_number=sequence_number,
                            termination=termination, endpoint=fix, via=via, altitude=altitude, speed=speed,
                            transition_altitude=transition_altitude, fix_label=fix_label,
                            required_navigation_performance=rnp, referenced_navaid=referenced_navaid,
                            **header)
