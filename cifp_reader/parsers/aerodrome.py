from .base import RecordParser
from ..models.aerodrome import Airport, Heliport, Runway, is_waterway
from ..models.altitude import AltitudeAGL, AltitudeMSL, FlightLevel
from ..models.course import MagneticCourse

DEFAULT_TRANSITION_ALTITUDE = 18000
DEFAULT_TRANSITION_LEVEL = 180


class _AerodromeParser(RecordParser):
    """Columns shared by airport and heliport reference point records."""

    def _common(self, line: str) -> dict:
        location = self.parse_coordinate(line, 32, 51)
        variation = self.parse_variation(line, 51, 52, 56)
        elevation = AltitudeMSL(self.parse_int(line, 56, 61))

        if self.is_blank(line, 70, 75):
            transition_altitude = AltitudeMSL(DEFAULT_TRANSITION_ALTITUDE)
        else:
            transition_altitude = AltitudeMSL(self.parse_int(line, 70, 75))
        if self.is_blank(line, 75, 80):
            transition_level = FlightLevel(DEFAULT_TRANSITION_LEVEL)
        else:
            transition_level = FlightLevel(self.parse_int(line, 75, 80) // 100)

        frn, cycle = self.frn_and_cycle(line)
        return {
            'client': line[1:4],
            'file_record_number': frn,
            'cycle': cycle,
            'identifier': line[6:10].strip(),
            'iata_designator': line[13:16].strip(),
            'location': location,
            'magnetic_variation': variation,
            'elevation': elevation,
            'transition_altitude': transition_altitude,
            'transition_level': transition_level,
            'ifr_capable': line[30] == 'Y',
            'usage': line[80],
            'name': line[93:123].rstrip(),
        }


class AirportParser(_AerodromeParser):
    def parse(self, line: str) -> Airport:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'P ')
        self.check(line, 12, 13, 'A')
        longest_runway = self.parse_int(line, 27, 30) * 100
        return Airport(longest_runway=longest_runway, **self._common(line))


class HeliportParser(_AerodromeParser):
    def parse(self, line: str) -> Heliport:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 5, 'H')
        self.check(line, 12, 13, 'A')
        return Heliport(pad_identifier=line[16:21].strip(), **self._common(line))


class RunwayParser(RecordParser):
    """
    Runway threshold record (``PG``).

    Waterways are published with a compass identifier instead of ``RWnn``
    and may leave the bearing blank.
    """

    def parse(self, line: str) -> Runway:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'P ')
        airport = line[6:10].strip()
        self.check(line, 12, 13, 'G')

        identifier = line[13:18].rstrip()
        waterway = is_waterway(identifier)
        if waterway:
            identifier = 'RW' + identifier
        if not identifier.startswith('RW'):
            self.fail(13, line)

        self.check_empty(line, 18, 21)
        self.check(line, 21, 22, '0')

        length = self.parse_int(line, 22, 27)
        if waterway and self.is_blank(line, 27, 31):
            course = MagneticCourse(0)
        else:
            course = MagneticCourse(self.parse_decimal(line, 27, 31, 10))
        self.check_empty(line, 31, 32)

        endpoint = self.parse_coordinate(line, 32, 51)
        self.check_empty(line, 51, 60)

        touchdown_elevation = self.parse_int(line, 66, 71)
        displacement = self.parse_int(line, 71, 75)
        crossing_height = self.parse_int(line, 75, 77)
        width = self.parse_int(line, 77, 80)

        approach = None if self.is_blank(line, 81, 85) else line[81:85].rstrip()
        category = line[85]
        self.check_empty(line, 86, 90)
        second_approach = None if self.is_blank(line, 90, 94) else line[90:94].rstrip()
        self.check_empty(line, 95, 101)

        frn, cycle = self.frn_and_cycle(line)
        return Runway(client=line[1:4], file_record_number=frn, cycle=cycle,
                      airport=airport, identifier=identifier[2:], length=length, width=width,
                      course=course, endpoint=endpoint,
                      tdze=AltitudeAGL(0, touchdown_elevation),
                      threshold_crossing_height=AltitudeAGL(crossing_height, touchdown_elevation),
                      threshold_displacement=displacement, approach=approach,
                      approach_category=category, second_approach=second_approach)
