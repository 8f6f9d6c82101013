import pytest

from cifp_reader.models.altitude import Altitude, AltitudeAGL, AltitudeMSL, FlightLevel
from cifp_reader.models.restrictions import AltitudeRestriction, SpeedRestriction
from cifp_reader.models.validation import GuidanceError, RecordFormatError


def test_flight_level_is_msl():
    assert FlightLevel(50) == AltitudeMSL(5000)
    assert FlightLevel(180).level == 180
    assert str(FlightLevel(50)) == 'FL050'
    assert hash(FlightLevel(50)) == hash(AltitudeMSL(5000))


def test_agl_conversion():
    height = AltitudeAGL(500, 1026)

    assert height.to_msl() == AltitudeMSL(1526)
    assert AltitudeMSL(1526).to_agl(1026) == height
    with pytest.raises(GuidanceError):
        AltitudeAGL(500).to_msl()


def test_agl_without_elevation_compares_by_height():
    assert AltitudeAGL(0) == AltitudeAGL(0)
    assert AltitudeAGL(0) != AltitudeMSL(0)


def test_ordering():
    assert AltitudeMSL(2000) < FlightLevel(30) < AltitudeAGL(2000, 1500)
    assert max(AltitudeMSL(5000), FlightLevel(45)) == AltitudeMSL(5000)


@pytest.mark.parametrize('altitude', [AltitudeMSL(1200), AltitudeAGL(300, 100), FlightLevel(180), AltitudeAGL(0)])
def test_altitude_dict_round_trip(altitude):
    assert Altitude.from_dict(altitude.to_dict()) == altitude


@pytest.mark.parametrize('code, alt1, alt2, minimum, maximum', [
    ('+', 6000, None, 6000, None),
    ('-', 11000, None, None, 11000),
    ('@', 3000, None, 3000, 3000),
    (' ', 3000, None, 3000, 3000),
    ('B', 10000, 6000, 10000, 6000),
    # Intercept altitude is informational only
    ('I', 2300, 1800, 2300, 2300),
    ('G', 2300, 1800, 2300, None),
    # Loose "between" codes with one altitude mean at or above
    ('J', 4000, None, 4000, None),
    ('V', 4000, 6000, 4000, 6000),
    # At or above with two altitudes
    ('+', 5000, 8000, 5000, 8000),
    ('+', 8000, 5000, 8000, None),
    # At or below with a higher second altitude
    ('-', 5000, 8000, 5000, 8000),
])
def test_from_description(code, alt1, alt2, minimum, maximum):
    def msl(feet):
        return None if feet is None else AltitudeMSL(feet)

    restriction = AltitudeRestriction.from_description(code, msl(alt1), msl(alt2))

    assert restriction == AltitudeRestriction(msl(minimum), msl(maximum))


def test_from_description_without_altitudes():
    assert AltitudeRestriction.from_description('+', None, None).is_unrestricted


@pytest.mark.parametrize('code, alt1, alt2', [
    ('B', AltitudeMSL(5000), None),
    ('@', AltitudeMSL(5000), AltitudeMSL(6000)),
    ('+', None, AltitudeMSL(6000)),
    ('X', AltitudeMSL(5000), None),
])
def test_from_description_invalid(code, alt1, alt2):
    with pytest.raises(RecordFormatError):
        AltitudeRestriction.from_description(code, alt1, alt2)


def test_altitude_in_range():
    restriction = AltitudeRestriction(AltitudeMSL(6000), FlightLevel(180))

    assert restriction.is_in_range(AltitudeMSL(6000))
    assert restriction.is_in_range(FlightLevel(100))
    assert not restriction.is_in_range(AltitudeMSL(5999))
    assert not restriction.is_in_range(FlightLevel(190))
    assert AltitudeRestriction.unrestricted().is_in_range(AltitudeMSL(60000))


@pytest.mark.parametrize('restriction, text', [
    (AltitudeRestriction(AltitudeMSL(6000), None), '\\60'),
    (AltitudeRestriction(None, AltitudeMSL(11000)), '110\\'),
    (AltitudeRestriction(AltitudeMSL(6000), AltitudeMSL(10000)), '\\60 100\\'),
    (AltitudeRestriction.unrestricted(), 'Unrestricted'),
])
def test_altitude_text(restriction, text):
    assert str(restriction) == text
    assert AltitudeRestriction.parse(text) == restriction


def test_speed_restriction():
    limit = SpeedRestriction(None, 250)

    assert limit.is_in_range(250)
    assert not limit.is_in_range(251)
    assert str(limit) == '250K\\'
    assert SpeedRestriction.parse('\\180K 250K\\') == SpeedRestriction(180, 250)
    assert SpeedRestriction.unrestricted().is_unrestricted
