import pytest

from cifp_reader.models.aerodrome import Airport
from cifp_reader.models.altitude import AltitudeMSL, FlightLevel
from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import MagneticCourse
from cifp_reader.models.guidance import Arc, Racetrack
from cifp_reader.models.navaid import ILS
from cifp_reader.models.path_termination import PathTermination
from cifp_reader.models.procedure import SID, STAR, Approach, ApproachLine, SIDLine, STARLine
from cifp_reader.models.procedure_builder import ProcedureBuilder, group_procedure_lines
from cifp_reader.models.restrictions import AltitudeRestriction, SpeedRestriction
from cifp_reader.models.validation import ResolutionError
from cifp_reader.utils.fix_resolver import UnresolvedWaypoint

KATL = Coordinate(33.64, -84.43)

FIXES = {
    'CPARK': {Coordinate(33.64, -84.53)},
    'ZELAN': {Coordinate(33.47, -84.5)},
    'BOBBD': {Coordinate(32.5, -84.0)},
    'CFZJF': {Coordinate(33.58, -84.57)},
    # Same name on two continents
    'DUPEE': {Coordinate(33.7, -84.3), Coordinate(48.1, 11.5)},
}


def airport(identifier='KATL', location=KATL, variation=5.0):
    return Airport(client='USA', file_record_number=1, cycle=1705, identifier=identifier,
                   iata_designator='', location=location, magnetic_variation=variation,
                   elevation=AltitudeMSL(1026), transition_altitude=AltitudeMSL(18000),
                   transition_level=FlightLevel(180), ifr_capable=True, usage='C', name=identifier)


def leg(kind, route_type, transition, sequence, code, fix=None, via=None, airport_id='KATL', name='ZELAN4',
        **kwargs):
    return kind(client='USA', file_record_number=sequence, cycle=1705, airport=airport_id, name=name,
                route_type=route_type, transition=transition, sequence_number=sequence,
                termination=PathTermination.from_code(code),
                endpoint=None if fix is None else UnresolvedWaypoint(fix), via=via,
                altitude=AltitudeRestriction.unrestricted(), speed=SpeedRestriction.unrestricted(), **kwargs)


@pytest.fixture
def builder():
    return ProcedureBuilder(FIXES, {}, {'KATL': airport()})


def test_build_sid(builder):
    lines = [
        leg(SIDLine, '4', 'RW27R', 10, 'CF', 'CPARK', MagneticCourse(275)),
        leg(SIDLine, '2', 'ALL', 20, 'TF', 'ZELAN'),
        leg(SIDLine, '3', 'BOBBD', 30, 'TF', 'BOBBD'),
    ]

    sid = builder.build(lines)

    assert isinstance(sid, SID)
    assert list(sid.runway_transitions) == ['RW27R']
    assert list(sid.enroute_transitions) == ['BOBBD']
    assert len(sid.common_route) == 1
    route = sid.select_route('RW27R', 'BOBBD')
    assert [i.endpoint for i in route] == [Coordinate(33.64, -84.53), Coordinate(33.47, -84.5),
                                           Coordinate(32.5, -84.0)]
    # Variation filled in from the nearest aerodrome
    assert route[0].via == MagneticCourse(275, 5.0)


def test_build_star(builder):
    lines = [
        leg(STARLine, '1', 'BOBBD', 10, 'IF', 'BOBBD', name='HOBTT2'),
        leg(STARLine, '2', '', 20, 'TF', 'ZELAN', name='HOBTT2'),
        leg(STARLine, '3', 'RW27R', 30, 'TF', 'CPARK', name='HOBTT2'),
    ]

    star = builder.build(lines)

    assert isinstance(star, STAR)
    assert star.transitions == ['BOBBD', 'RW27R']
    assert len(star.select_route('BOBBD', 'RW27R')) == 3


def test_split_transition_is_joined(builder):
    lines = [
        leg(SIDLine, '4', 'RW27R', 10, 'IF', 'CPARK'),
        leg(SIDLine, '2', '', 20, 'TF', 'ZELAN'),
        leg(SIDLine, '4', 'RW27R', 30, 'TF', 'CFZJF'),
    ]

    sid = builder.build(lines)

    assert [i.endpoint for i in sid.runway_transitions['RW27R']] == [Coordinate(33.64, -84.53),
                                                                     Coordinate(33.58, -84.57)]


def test_unknown_route_type_is_skipped(builder, caplog):
    lines = [
        leg(SIDLine, '4', 'RW27R', 10, 'IF', 'CPARK'),
        leg(SIDLine, 'Z', 'RW27R', 20, 'TF', 'ZELAN'),
    ]

    sid = builder.build(lines)

    assert len(sid.select_route('RW27R')) == 1
    assert "route type 'Z'" in caplog.text


def test_duplicate_names_resolve_near_airport(builder):
    sid = builder.build([leg(SIDLine, '2', '', 10, 'IF', 'DUPEE')])

    assert sid.common_route[0].endpoint == Coordinate(33.7, -84.3)


def test_unknown_fix(builder):
    with pytest.raises(ResolutionError):
        builder.build([leg(SIDLine, '2', '', 10, 'IF', 'NOFIX')])


def test_reference_without_airport():
    """Without a known airport, the first named fix is placed near the second."""
    builder = ProcedureBuilder(FIXES, {}, {})
    lines = [
        leg(SIDLine, '2', '', 10, 'IF', 'DUPEE', airport_id='KXYZ'),
        leg(SIDLine, '2', '', 20, 'TF', 'ZELAN', airport_id='KXYZ'),
    ]

    assert builder.reference_point(lines) == Coordinate(33.7, -84.3)


def test_variation_needs_nearby_aerodrome():
    builder = ProcedureBuilder(FIXES, {}, {'EDDM': airport('EDDM', Coordinate(48.35, 11.78), -3.0)})
    lines = [leg(SIDLine, '4', 'RW27R', 10, 'CF', 'CPARK', MagneticCourse(275), airport_id='KATL')]

    with pytest.raises(ResolutionError):
        builder.build(lines)


def test_arc_center_is_resolved(builder):
    arc = Arc(None, UnresolvedWaypoint('CFZJF'), 5.5, MagneticCourse(346))
    sid = builder.build([leg(SIDLine, '4', 'RW27R', 10, 'RF', 'ZELAN', arc)])

    built = sid.runway_transitions['RW27R'][0].via
    assert built.centerpoint == Coordinate(33.58, -84.57)
    assert built.arc_to == MagneticCourse(346, 5.0)


def test_approach_uses_referenced_navaid_variation():
    localizer = ILS(client='USA', file_record_number=1, cycle=1705, identifier='IATL',
                    position=Coordinate(33.63, -84.45), magnetic_variation=4.0, name='IATL (KATL - RW27R)')
    builder = ProcedureBuilder(FIXES, {'IATL': {localizer}}, {'KATL': airport()})
    lines = [
        leg(ApproachLine, 'A', 'BOBBD', 10, 'IF', 'BOBBD', name='I27R'),
        leg(ApproachLine, 'I', '', 20, 'CF', 'CPARK', MagneticCourse(275), name='I27R', referenced_navaid='IATL'),
        leg(ApproachLine, 'I', '', 30, 'CF', 'ZELAN', MagneticCourse(275), name='I27R'),
    ]

    approach = builder.build(lines)

    assert isinstance(approach, Approach)
    assert approach.transitions == ['BOBBD']
    assert approach.common_route[0].via == MagneticCourse(275, 4.0)
    assert approach.common_route[1].via == MagneticCourse(275, 5.0)


def test_approach_hold_needs_a_fix(builder):
    hold = Racetrack(None, None, MagneticCourse(90), time=60.0)
    lines = [leg(ApproachLine, 'I', '', 10, 'HM', None, hold, name='I27R')]

    with pytest.raises(ResolutionError):
        builder.build(lines)


def test_hold_fix_and_course_are_resolved(builder):
    hold = Racetrack(None, UnresolvedWaypoint('ZELAN'), MagneticCourse(90), time=60.0)
    sid = builder.build([leg(SIDLine, '3', 'BOBBD', 10, 'HM', 'ZELAN', hold)])

    built = sid.enroute_transitions['BOBBD'][0].via
    assert built.point == Coordinate(33.47, -84.5)
    assert built.inbound_course == MagneticCourse(90, 5.0)


@pytest.mark.parametrize('lines', [
    [],
    [leg(SIDLine, '2', '', 10, 'IF', 'ZELAN'), leg(SIDLine, '2', '', 20, 'TF', 'BOBBD', name='OTHER1')],
])
def test_invalid_leg_sets(builder, lines):
    with pytest.raises(ValueError):
        builder.build(lines)


def test_group_procedure_lines():
    lines = [
        leg(SIDLine, '2', '', 10, 'IF', 'ZELAN'),
        leg(STARLine, '2', '', 10, 'IF', 'ZELAN'),
        leg(SIDLine, '2', '', 20, 'TF', 'BOBBD'),
        leg(SIDLine, '2', '', 10, 'IF', 'ZELAN', airport_id='KPDK'),
    ]

    grouped = group_procedure_lines(lines)

    assert list(grouped) == [('PD', 'KATL', 'ZELAN4'), ('PE', 'KATL', 'ZELAN4'), ('PD', 'KPDK', 'ZELAN4')]
    assert [line.sequence_number for line in grouped[('PD', 'KATL', 'ZELAN4')]] == [10, 20]
