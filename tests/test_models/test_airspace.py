import pytest

from cifp_reader.models.airspace import (
    Airspace, ArcRegion, BoundaryLine, BoundaryVia, CircularRegion, ControlledAirspace, LineRegion, Region,
    orient3,
)
from cifp_reader.models.altitude import AltitudeMSL
from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import TrueCourse
from cifp_reader.models.validation import GeometryError
from cifp_reader.parsers.airspace import ControlledAirspaceParser

CONTAINMENT_CASES = [
    ('airspace_ksba.txt',
     ['N34262100W119513600', 'N34283900W120005200'],
     ['N34289700W119565200', 'N34151200W119461800']),
    ('airspace_ktoa.txt',
     ['N33504000W118242300', 'N33471500W118213700'],
     ['N33501000W118250000', 'N34151200W119461800']),
    ('airspace_klax.txt',
     ['N334538W1184156', 'N335930W1180923'],
     ['N335209W1182122', 'N340235W1180924']),
]


def parse_segments(lines):
    parser = ControlledAirspaceParser()
    return [parser.parse(line) for line in lines]


def read_lines(test_assets_dir, asset):
    return (test_assets_dir / asset).read_text().splitlines()


def square_segments(size=1.0):
    """Closed square loop of great circle segments with its south-west corner at 0, 0."""
    corners = [Coordinate(0, 0), Coordinate(0, size), Coordinate(size, size), Coordinate(size, 0)]
    segments = []
    for index, corner in enumerate(corners):
        via = BoundaryVia.GREAT_CIRCLE
        if index == len(corners) - 1:
            via |= BoundaryVia.RETURN_TO_ORIGIN
        segments.append(ControlledAirspace(
            client='USA', file_record_number=index + 1, cycle=1705, region='K2', airspace_type='C',
            center='TEST', airspace_class='D', multiple_code='A', sequence_number=(index + 1) * 10,
            boundary=BoundaryLine(via, corner),
            lower_limit=AltitudeMSL(0) if index == 0 else None,
            upper_limit=AltitudeMSL(2500) if index == 0 else None,
            name='TEST'))
    return segments


@pytest.mark.parametrize('asset, inside, outside', CONTAINMENT_CASES)
def test_containment(test_assets_dir, asset, inside, outside):
    """Points inside the lateral limits are contained only below the ceiling."""
    airspace = Airspace(parse_segments(read_lines(test_assets_dir, asset)))

    for token in inside:
        point = Coordinate.from_dms(token)
        assert airspace.contains(point, AltitudeMSL(2100)), f"{token} should be inside {airspace}"
        assert not airspace.contains(point, AltitudeMSL(20000)), f"{token} is above the ceiling of {airspace}"

    for token in outside:
        assert not airspace.contains(Coordinate.from_dms(token), AltitudeMSL(2100)), \
            f"{token} should be outside {airspace}"


def test_region_kinds(test_assets_dir):
    ksba = Airspace(parse_segments(read_lines(test_assets_dir, 'airspace_ksba.txt')))
    ktoa = Airspace(parse_segments(read_lines(test_assets_dir, 'airspace_ktoa.txt')))
    klax = Airspace(parse_segments(read_lines(test_assets_dir, 'airspace_klax.txt')))

    assert [type(r) for r in ksba.regions] == [CircularRegion, ArcRegion]
    assert [type(r) for r in ktoa.regions] == [ArcRegion]
    assert len(klax.regions) == 14
    assert all(isinstance(r, LineRegion) for r in klax.regions)
    assert ksba.center == 'KSBA'
    assert ksba.airspace_class == 'C'
    assert ksba.name == 'SANTA BARBARA MUNI'


def test_shelf_floor(test_assets_dir):
    """The outer ring of KSBA starts at 1500 ft MSL."""
    shelf = Airspace(parse_segments(read_lines(test_assets_dir, 'airspace_ksba.txt')[1:]))
    point = Coordinate.from_dms('N34283900W120005200')

    assert not shelf.contains(point, AltitudeMSL(1400))
    assert shelf.contains(point, AltitudeMSL(1500))
    assert shelf.contains(point, AltitudeMSL(4000))
    assert not shelf.contains(point, AltitudeMSL(4001))


def test_surface_area_floor_is_open(test_assets_dir):
    """A floor given above ground does not exclude any MSL altitude."""
    circle = Airspace(parse_segments(read_lines(test_assets_dir, 'airspace_ksba.txt')[:1]))
    center = Coordinate.from_dms('N34253400W119502600')

    assert circle.contains(center, AltitudeMSL(-100))
    assert circle.contains(center.fix_radial_distance(TrueCourse(90), 4.5), AltitudeMSL(1000))
    assert not circle.contains(center.fix_radial_distance(TrueCourse(90), 5.5), AltitudeMSL(1000))


def test_open_loop_is_rejected(test_assets_dir):
    segments = parse_segments(read_lines(test_assets_dir, 'airspace_ktoa.txt'))
    with pytest.raises(GeometryError):
        Airspace(segments[:-1])


def test_empty_airspace_is_rejected():
    with pytest.raises(GeometryError):
        Airspace([])


def test_first_segment_needs_limits(test_assets_dir):
    lines = read_lines(test_assets_dir, 'airspace_ktoa.txt')
    lines[0] = lines[0][:81] + ' ' * 12 + lines[0][93:]
    airspace = Airspace(parse_segments(lines))

    with pytest.raises(GeometryError):
        airspace.contains(Coordinate.from_dms('N33504000W118242300'), AltitudeMSL(2100))


def test_rhumb_lines_have_no_region(test_assets_dir):
    line = read_lines(test_assets_dir, 'airspace_ktoa.txt')[0]
    rhumb = line[:30] + 'HE' + line[32:]

    with pytest.raises(GeometryError):
        Region.from_segments(parse_segments([rhumb]))


def test_arc_must_end_on_next_vertex(test_assets_dir):
    lines = read_lines(test_assets_dir, 'airspace_ksba.txt')
    # Vertex following the clockwise arc, moved about four miles north
    lines[3] = lines[3][:32] + 'N34340000W120012340' + lines[3][51:]

    with pytest.raises(GeometryError):
        Airspace(parse_segments(lines[1:]))


@pytest.mark.parametrize('point, inside', [
    (Coordinate(0.5, 0.5), True),
    (Coordinate(0, 0.5), True),
    (Coordinate(1, 1), True),
    (Coordinate(1.5, 0.5), False),
    (Coordinate(0.5, -0.1), False),
])
def test_polygon_edges_count_as_inside(point, inside):
    airspace = Airspace(square_segments())

    assert airspace.contains(point, AltitudeMSL(1000)) is inside


def test_polygon_ceiling():
    airspace = Airspace(square_segments())

    assert not airspace.contains(Coordinate(0.5, 0.5), AltitudeMSL(3000))
    assert airspace.multiple_code == 'A'


@pytest.mark.parametrize('c, sign', [
    (Coordinate(0, 1), -1),
    (Coordinate(1, 0), 1),
    (Coordinate(2, 2), 0),
])
def test_orient3(c, sign):
    value = orient3(Coordinate(0, 0), Coordinate(1, 1), c)
    assert (value > 0) - (value < 0) == sign


def test_orient3_nearly_collinear():
    """Points a rounding error off a line are resolved exactly."""
    a = Coordinate(0.5, 0.5)
    b = Coordinate(12.0, 12.0)
    c = Coordinate(24.0, 24.0 + 2 ** -48)

    value = orient3(a, b, c)
    assert value != 0
    assert value == -orient3(b, a, c)
