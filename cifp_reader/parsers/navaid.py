from typing import Optional

from .base import RecordParser
from ..models.altitude import AltitudeMSL
from ..models.course import MagneticCourse
from ..models.navaid import (
    DME, DME_MARKERS, FACILITY_VOR, ILS, MARKER_DME, MARKER_ILS, MARKER_TACAN, NDB, Navaid, NavaidClass,
    NavaidILS, VOR,
)

# Frequency bands (tenths of MHz) mapped to the first DME channel of each band
DME_CHANNEL_BANDS = (
    (1344, 1360, 1),
    (1080, 1123, 17),
    (1333, 1343, 60),
    (1123, 1180, 70),
)

WGS84 = 'NAR'


def dme_channel(tenths: int) -> Optional[int]:
    """DME channel paired with a frequency given in tenths of MHz."""
    for low, high, first in DME_CHANNEL_BANDS:
        if low <= tenths < high:
            return tenths - low + first
    return None


def _navaid_class(line: str, on_field: bool = False) -> NavaidClass:
    return NavaidClass(facility=line[27], marker=line[28], power=line[29], voice=line[30], on_field=on_field)


class NDBParser(RecordParser):
    """Enroute (``DB``) and terminal (``PN``) NDB records."""

    def parse(self, line: str) -> NDB:
        self.check(line, 0, 1, 'S')
        if line[4:6] != 'PN':
            self.check(line, 4, 6, 'DB')
        self.check_empty(line, 12, 13)
        identifier = line[13:17].rstrip()
        self.check_empty(line, 17, 19)
        self.check(line, 21, 22, '0')
        self.check(line, 22, 23, '0')
        channel = self.parse_int(line, 23, 26)
        self.check(line, 26, 27, '0')
        self.check_empty(line, 31, 32)

        position = self.parse_coordinate(line, 32, 51)
        self.check_empty(line, 51, 74)
        variation = self.parse_variation(line, 74, 75, 79)
        self.check_empty(line, 79, 90)
        self.check(line, 90, 93, WGS84)

        frn, cycle = self.frn_and_cycle(line)
        return NDB(client=line[1:4], file_record_number=frn, cycle=cycle,
                   identifier=identifier, position=position, magnetic_variation=variation,
                   name=line[93:123].rstrip(), channel=channel, navaid_class=_navaid_class(line))


class DMEParser(RecordParser):
    """
    DME part of a VHF navaid record.

    Also used for the DME collocated with a VOR or localizer, whose position
    and identifier sit in the DME columns of the same line.
    """

    def parse(self, line: str) -> DME:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'D ')
        self.check_empty(line, 17, 19)
        self.check(line, 21, 22, '0')

        raw = self.parse_int(line, 22, 27)
        tenths = raw // 10 if raw >= 10000 else raw
        channel = dme_channel(tenths)
        if channel is None:
            self.fail(22, line)

        navaid_class = _navaid_class(line)
        if navaid_class.marker not in DME_MARKERS:
            self.fail(28, line)

        identifier = line[51:55].rstrip()
        position = self.parse_coordinate(line, 55, 74)
        elevation = AltitudeMSL(int(self.parse_decimal(line, 79, 85, 10)))
        self.check_empty(line, 85, 90)
        self.check(line, 90, 93, WGS84)

        frn, cycle = self.frn_and_cycle(line)
        return DME(client=line[1:4], file_record_number=frn, cycle=cycle,
                   identifier=identifier, position=position, magnetic_variation=None,
                   name=line[93:123].rstrip(), channel=channel, navaid_class=navaid_class,
                   elevation=elevation)


class VORParser(RecordParser):
    def parse(self, line: str) -> VOR:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 13, 'D        ')
        identifier = line[13:17].rstrip()
        self.check(line, 17, 19, '  ')
        self.check(line, 21, 22, '0')
        frequency = self.parse_decimal(line, 22, 27, 100)

        navaid_class = _navaid_class(line)
        self.check(line, 31, 32, ' ')
        if navaid_class.facility != FACILITY_VOR:
            self.fail(27, line)

        position = self.parse_coordinate(line, 32, 51)

        collocated_dme = None
        if navaid_class.marker in (MARKER_DME, MARKER_TACAN):
            if not self.is_blank(line, 51, 55):
                self.check(line, 51, 55, identifier.ljust(4))
            collocated_dme = DMEParser().parse(line)
        else:
            self.check_empty(line, 51, 74)

        variation = self.parse_variation(line, 74, 75, 79)
        elevation = AltitudeMSL(int(self.parse_decimal(line, 79, 85, 10)))
        self.check_empty(line, 85, 90)
        self.check(line, 90, 93, WGS84)

        frn, cycle = self.frn_and_cycle(line)
        return VOR(client=line[1:4], file_record_number=frn, cycle=cycle,
                   identifier=identifier, position=position, magnetic_variation=variation,
                   name=line[93:123].rstrip(), frequency=frequency, navaid_class=navaid_class,
                   elevation=elevation, collocated_dme=collocated_dme)


class NavaidILSParser(RecordParser):
    """Localizer DME listed among the VHF navaids."""

    def parse(self, line: str) -> NavaidILS:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'D ')
        identifier = line[13:17].rstrip()
        self.check_empty(line, 17, 19)
        self.check(line, 21, 22, '0')
        frequency = self.parse_decimal(line, 22, 27, 100)

        navaid_class = _navaid_class(line, on_field=line[31] == ' ')
        if navaid_class.marker != MARKER_ILS:
            self.fail(28, line)

        if not self.is_blank(line, 51, 55):
            self.check(line, 51, 55, identifier.ljust(4))
        collocated_dme = DMEParser().parse(line)

        variation = self.parse_variation(line, 74, 75, 79)
        elevation = AltitudeMSL(int(self.parse_decimal(line, 79, 85, 10)))
        self.check_empty(line, 85, 90)
        self.check(line, 90, 93, WGS84)

        frn, cycle = self.frn_and_cycle(line)
        return NavaidILS(client=line[1:4], file_record_number=frn, cycle=cycle,
                         identifier=identifier, position=collocated_dme.position, magnetic_variation=variation,
                         name=line[93:123].rstrip(), frequency=frequency, navaid_class=navaid_class,
                         elevation=elevation, collocated_dme=collocated_dme)


class VHFNavaidParser(RecordParser):
    """
    Dispatches ``D`` section records on their class columns.

    A marker of ``I`` is a localizer, a facility of ``V`` a VOR and
    anything else a standalone DME.
    """

    def parse(self, line: str) -> Navaid:
        if line[28] == MARKER_ILS:
            return NavaidILSParser().parse(line)
        if line[27] == FACILITY_VOR:
            return VORParser().parse(line)
        return DMEParser().parse(line)


class ILSParser(RecordParser):
    """Airport localizer and glideslope record (``PI``)."""

    def parse(self, line: str) -> ILS:
        self.check(line, 0, 1, 'S')
        self.check(line, 4, 6, 'P ')
        airport = line[6:10].strip()
        self.check(line, 12, 13, 'I')
        identifier = line[13:17].strip()
        category = line[17]
        self.check_empty(line, 18, 21)
        self.check(line, 21, 22, '0')

        frequency = self.parse_decimal(line, 22, 27, 100)
        runway = line[27:32].rstrip()

        localizer_position = self.parse_coordinate(line, 32, 51)
        bearing = self.parse_decimal(line, 51, 55, 10)
        glideslope_position = None if self.is_blank(line, 55, 74) else self.parse_coordinate(line, 55, 74)
        variation = self.parse_variation(line, 90, 91, 95)
        localizer_course = MagneticCourse(bearing, variation)

        frn, cycle = self.frn_and_cycle(line)
        return ILS(client=line[1:4], file_record_number=frn, cycle=cycle,
                   identifier=identifier, position=localizer_position, magnetic_variation=variation,
                   name=f"{identifier} ({airport} - {runway})", airport=airport, category=category,
                   frequency=frequency, runway=runway, localizer_course=localizer_course,
                   glideslope_position=glideslope_position)
