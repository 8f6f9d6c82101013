import json

import pytest

from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import MagneticCourse, TrueCourse
from cifp_reader.models.path_termination import PathTermination
from cifp_reader.models.validation import GuidanceError, RecordFormatError
from cifp_reader.utils import geodesy

NM_PER_METER = 1 / 1852

RADIAL_CASES = [
    # fix, radial, distance, magnetic variation of the fix, point reached
    ('N33465988W118031713', 251, 10, -15.0000221, 'N33461617W118153416'),
    ('N33555934W118255525', 123, 13, -15.0001852, 'N33461617W118153416'),
]


def test_parse_full_token():
    point = Coordinate.from_dms('N33461617W118153416')

    assert point.latitude == pytest.approx(33 + 46 / 60 + 16.17 / 3600)
    assert point.longitude == pytest.approx(-(118 + 15 / 60 + 34.16 / 3600))


def test_parse_short_tokens():
    assert Coordinate.from_dms('N13E150') == Coordinate(13, 150)
    assert Coordinate.from_dms('S28W090') == Coordinate(-28, -90)

    point = Coordinate.from_dms('N334538W1184156')
    assert point.latitude == pytest.approx(33 + 45 / 60 + 38 / 3600)
    assert point.longitude == pytest.approx(-(118 + 41 / 60 + 56 / 3600))


@pytest.mark.parametrize('token', ['N33W', 'X33461617W118153416', 'N33461617118153416', 'N3346W118153416'])
def test_parse_invalid_token(token):
    with pytest.raises(RecordFormatError):
        Coordinate.from_dms(token)


@pytest.mark.parametrize('token', ['N33461617W118153416', 'S12000000E045302550', 'N00000001E000000001'])
def test_dms_round_trip(token):
    assert Coordinate.from_dms(token).dms == token


@pytest.mark.parametrize('fix, radial, distance, variation, expected', RADIAL_CASES)
def test_fix_radial_distance(fix, radial, distance, variation, expected):
    """A magnetic radial is flown as true course radial - variation."""
    reached = Coordinate.from_dms(fix).fix_radial_distance(MagneticCourse(radial, variation), distance)

    assert reached.distance_to(Coordinate.from_dms(expected)) < 1


@pytest.mark.parametrize('fix, radial, distance, variation, expected', RADIAL_CASES)
def test_get_bearing_distance(fix, radial, distance, variation, expected):
    bearing, measured = Coordinate.from_dms(fix).get_bearing_distance(Coordinate.from_dms(expected))

    assert measured == pytest.approx(distance, abs=0.5)
    assert bearing.angle(TrueCourse(radial - variation)) == pytest.approx(0, abs=0.5)


def test_sector_offsets_commute():
    """Moving west then north lands close to moving north then west over a small area."""
    start = Coordinate(33.9652, -118.0208)
    west = 204278.68 * NM_PER_METER
    north = 63763.13 * NM_PER_METER
    expected = Coordinate(34.52, -120.230556)

    west_first = start.fix_radial_distance(TrueCourse(270), west).fix_radial_distance(TrueCourse(360), north)
    north_first = start.fix_radial_distance(TrueCourse(360), north).fix_radial_distance(TrueCourse(270), west)

    assert west_first.distance_to(expected) < 1
    assert north_first.distance_to(expected) < 1


def test_bearing_to_same_point_is_undefined():
    point = Coordinate(34.0, -118.0)

    assert point.get_bearing_distance(point) == (None, 0.0)


def test_haversine_and_vincenty_agree():
    lax = Coordinate.from_dms('N33563300W118242900')
    atl = Coordinate.from_dms('N33383667W084254278')

    ellipsoidal = lax.get_bearing_distance(atl)[1]
    assert lax.distance_to(atl) == pytest.approx(ellipsoidal, rel=0.005)
    assert 1650 < ellipsoidal < 1720


def test_vincenty_direct_inverse_agree():
    lat, lon = geodesy.vincenty_direct(45.0, 7.0, 123.0, 250.0)
    bearing, distance = geodesy.vincenty_inverse(45.0, 7.0, lat, lon)

    assert bearing == pytest.approx(123.0, abs=1e-5)
    assert distance == pytest.approx(250.0, abs=1e-4)


def test_arithmetic():
    offset = Coordinate(34.5, -118.5) - Coordinate(34.0, -118.0)

    assert offset == Coordinate(0.5, -0.5)
    assert Coordinate(34.0, -118.0) + offset == Coordinate(34.5, -118.5)


def test_dict_round_trip():
    point = Coordinate.from_dms('N33461617W118153416')
    restored = Coordinate.from_dict(json.loads(json.dumps(point.to_dict())))

    assert restored == point


class TestConditionReached:
    fix = Coordinate(34.0, -118.0)

    def test_crossing_within_tolerance(self):
        track_to_fix = PathTermination.from_code('TF')

        assert self.fix.is_condition_reached(track_to_fix, Coordinate(34.0, -118.001))
        assert not self.fix.is_condition_reached(track_to_fix, Coordinate(34.0, -118.1))

    def test_course_leg_passes_abeam(self):
        """With a reference, a course leg ends once the fix is abeam or behind."""
        course_to_fix = PathTermination.from_code('CF')
        reference = Coordinate(34.0, -118.5)

        assert not self.fix.is_condition_reached(course_to_fix, Coordinate(34.05, -118.2), reference)
        assert self.fix.is_condition_reached(course_to_fix, Coordinate(34.05, -117.9), reference)

    def test_reference_on_endpoint(self):
        course_to_fix = PathTermination.from_code('CF')

        with pytest.raises(GuidanceError):
            self.fix.is_condition_reached(course_to_fix, Coordinate(34.1, -118.0), self.fix)

    def test_altitude_termination_unsupported(self):
        with pytest.raises(GuidanceError):
            self.fix.is_condition_reached(PathTermination.from_code('VA'), self.fix)
