import pytest

from cifp_reader.models.altitude import AltitudeMSL
from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import MagneticCourse
from cifp_reader.models.navaid import DME, ILS, NDB, VOR
from cifp_reader.models.validation import RecordFormatError
from cifp_reader.parsers.navaid import ILSParser, NDBParser, VHFNavaidParser, dme_channel
from cifp_reader.parsers.record_factory import RecordParserFactory


@pytest.mark.parametrize('line, identifier, channel, name, position', [
    ('SUSADB       UAD   K2002630H MW N36292727W121282967                       E0160           NARCHUALAR                       256521703',
     'UAD', 263, 'CHUALAR', 'N36292727W121282967'),
    ('SUSADB       ATS   K2004140H MW N32510972W104273786                       E0090           NARARTESIA                       252001712',
     'ATS', 414, 'ARTESIA', 'N32510972W104273786'),
])
def test_ndb(line, identifier, channel, name, position):
    """Enroute NDB records parse into identifier, channel, name and position."""
    ndb = NDBParser().parse(line)

    assert isinstance(ndb, NDB)
    assert ndb.identifier == identifier
    assert ndb.channel == channel
    assert ndb.name == name
    assert ndb.position == Coordinate.from_dms(position)
    assert ndb.navaid_class.facility == 'H'
    assert ndb.magnetic_variation < 0, "East variation is negative"


def test_ndb_bad_channel():
    line = 'SUSADB       UAD   K2002X30H MW N36292727W121282967                       E0160           NARCHUALAR                       256521703'
    with pytest.raises(RecordFormatError) as excinfo:
        NDBParser().parse(line)
    assert excinfo.value.column == 23


def test_vor_with_collocated_dme(make_record):
    line = make_record(0, 'SUSAD        ATL   K7', 21, '011690VDHW', 32, 'N33375624W084264120',
                       51, 'ATL N33375624W084264120', 74, 'W0050010260', 90, 'NARATLANTA')
    vor = RecordParserFactory.parse_line(line)

    assert isinstance(vor, VOR)
    assert vor.identifier == 'ATL'
    assert vor.frequency == pytest.approx(116.90)
    assert vor.magnetic_variation == pytest.approx(5.0)
    assert vor.elevation == AltitudeMSL(1026)
    assert vor.name == 'ATLANTA'
    assert isinstance(vor.collocated_dme, DME)
    assert vor.collocated_dme.channel == 116
    assert vor.collocated_dme.position == vor.position


def test_vor_without_dme(make_record):
    line = make_record(0, 'SUSAD        SBA   K2', 21, '011430V HW', 32, 'N34302975W119462073',
                       74, 'E0150009500', 90, 'NARSAN MARCUS')
    vor = VHFNavaidParser().parse(line)

    assert isinstance(vor, VOR)
    assert vor.collocated_dme is None
    assert vor.magnetic_variation == pytest.approx(-15.0)


def test_vor_dme_identifier_must_match(make_record):
    line = make_record(0, 'SUSAD        ATL   K7', 21, '011690VDHW', 32, 'N33375624W084264120',
                       51, 'XYZ N33375624W084264120', 74, 'W0050010260', 90, 'NARATLANTA')
    with pytest.raises(RecordFormatError) as excinfo:
        VHFNavaidParser().parse(line)
    assert excinfo.value.column == 51


def test_standalone_dme(make_record):
    line = make_record(0, 'SUSAD        LAX   K2', 21, '011350 DHW', 51, 'LAX N33560000W118240000',
                       74, 'E0130001200', 90, 'NARLOS ANGELES')
    dme = VHFNavaidParser().parse(line)

    assert isinstance(dme, DME)
    assert dme.channel == 1135 - 1123 + 70
    assert dme.position == Coordinate.from_dms('N33560000W118240000')
    assert dme.magnetic_variation is None


def test_ils(make_record):
    line = make_record(0, 'SUSAP KATLK7IIATL3', 21, '010990RW27R', 32, 'N33380587W084252890',
                       51, '2750N33380000W084240000', 90, 'W0050')
    ils = ILSParser().parse(line)

    assert isinstance(ils, ILS)
    assert ils.identifier == 'IATL'
    assert ils.airport == 'KATL'
    assert ils.runway == 'RW27R'
    assert ils.category == '3'
    assert ils.frequency == pytest.approx(109.90)
    assert ils.localizer_course == MagneticCourse(275.0, 5.0)
    assert ils.glideslope_position == Coordinate.from_dms('N33380000W084240000')
    assert ils.name == 'IATL (KATL - RW27R)'


@pytest.mark.parametrize('tenths, channel', [
    (1344, 1),
    (1359, 16),
    (1080, 17),
    (1122, 59),
    (1333, 60),
    (1123, 70),
    (1179, 126),
])
def test_dme_channel_bands(tenths, channel):
    assert dme_channel(tenths) == channel


def test_dme_channel_outside_bands():
    assert dme_channel(1000) is None
    assert dme_channel(1180) is None
