import pytest

from cifp_reader.models.aerodrome import Aerodrome, Airport, Heliport, Runway, is_waterway
from cifp_reader.models.altitude import AltitudeAGL, AltitudeMSL, FlightLevel
from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import MagneticCourse
from cifp_reader.models.validation import RecordFormatError
from cifp_reader.parsers.aerodrome import RunwayParser


def runway(identifier):
    return Runway(client='USA', file_record_number=1, cycle=1705, airport='KXYZ', identifier=identifier,
                  length=9000, width=150, course=MagneticCourse(80), endpoint=Coordinate(33.5, -84.5),
                  tdze=AltitudeAGL(0, 1000), threshold_crossing_height=AltitudeAGL(50, 1000))


@pytest.mark.parametrize('identifier, opposite', [
    ('08L', '26R'),
    ('26R', '08L'),
    ('36C', '18C'),
    ('18', '36'),
    ('01', '19'),
    ('NE', 'SW'),
    ('N', 'S'),
])
def test_opposite_identifier(identifier, opposite):
    assert runway(identifier).opposite_identifier == opposite


@pytest.mark.parametrize('identifier, waterway', [
    ('NE', True),
    ('W', True),
    ('08L', False),
    ('NES', False),
    ('', False),
])
def test_is_waterway(identifier, waterway):
    assert is_waterway(identifier) is waterway


def test_waterway_record(make_record):
    """Waterways drop the RW prefix and may leave the bearing blank."""
    line = make_record(0, 'SUSAP 2W8 K1GNE      003500', 32, 'N47361200W122203000', 66, '00010000000200')

    parsed = RunwayParser().parse(line)

    assert parsed.identifier == 'NE'
    assert parsed.is_waterway
    assert parsed.course == MagneticCourse(360)
    assert parsed.length == 3500
    assert parsed.width == 200
    assert parsed.opposite_identifier == 'SW'


def test_runway_record_needs_rw_prefix(make_record):
    line = make_record(0, 'SUSAP 2W8 K1GXX08L   003500', 32, 'N47361200W122203000', 66, '00010000000200')

    with pytest.raises(RecordFormatError) as excinfo:
        RunwayParser().parse(line)
    assert excinfo.value.column == 13


def test_runway_dict_round_trip():
    original = runway('08L')

    assert Runway.from_dict(original.to_dict()) == original


def test_aerodrome_dict_round_trip():
    common = dict(client='USA', file_record_number=3, cycle=1705, iata_designator='',
                  location=Coordinate(33.5, -84.5), magnetic_variation=-2.5, elevation=AltitudeMSL(310),
                  transition_altitude=AltitudeMSL(18000), transition_level=FlightLevel(180),
                  ifr_capable=False, usage='P', name='TEST')
    airport = Airport(identifier='KXYZ', longest_runway=4500, **common)
    heliport = Heliport(identifier='8GA1', pad_identifier='H1', **common)

    assert Aerodrome.from_dict(airport.to_dict()) == airport
    assert Aerodrome.from_dict(heliport.to_dict()) == heliport


def test_unknown_aerodrome_kind():
    with pytest.raises(ValueError):
        Aerodrome.from_dict({'header': 'PG', 'identifier': 'KXYZ'})


def test_sample_runway(sample_model):
    parsed = sample_model.get_runways('KATL')[0]

    assert parsed.course == MagneticCourse(270)
    assert parsed.tdze.to_msl() == AltitudeMSL(1000)
    assert parsed.threshold_crossing_height.to_msl() == AltitudeMSL(1050)
    assert parsed.approach == 'I27R'
    assert parsed.opposite_identifier == '09L'
