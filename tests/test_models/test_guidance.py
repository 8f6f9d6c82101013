import pytest

from cifp_reader.models.coordinate import Coordinate
from cifp_reader.models.course import MagneticCourse, TrueCourse
from cifp_reader.models.guidance import (
    Arc, EntryType, HoldState, Racetrack, Radial, condition_reached, next_true_course,
)
from cifp_reader.models.navaid import DME, VOR
from cifp_reader.models.path_termination import PathTermination
from cifp_reader.models.validation import GuidanceError, ResolutionError
from cifp_reader.utils.fix_resolver import UnresolvedWaypoint

STATION = Coordinate(34.0, -118.0)


def vor(variation=0.0):
    return VOR(client='USA', file_record_number=1, cycle=1705, identifier='TST',
               position=STATION, magnetic_variation=variation, name='TEST')


def assert_course(actual, degrees):
    assert actual.angle(TrueCourse(degrees)) == pytest.approx(0, abs=0.01), f"{actual} is not {degrees}"


class TestRacetrackEntry:

    @pytest.mark.parametrize('heading, left_turns, entry', [
        (90, False, EntryType.DIRECT),
        (355, False, EntryType.TEARDROP),  # 95 degrees left of inbound
        (185, True, EntryType.TEARDROP),  # 95 degrees right, left-hand hold
        (90, True, EntryType.DIRECT),
        (180, False, EntryType.DIRECT),
        (20, False, EntryType.DIRECT),
        (360, False, EntryType.TEARDROP),
        (270, False, EntryType.TEARDROP),
        (210, False, EntryType.PARALLEL),
        (360, True, EntryType.DIRECT),
        (210, True, EntryType.TEARDROP),
        (320, True, EntryType.PARALLEL),
    ])
    def test_classify_entry(self, heading, left_turns, entry):
        hold = Racetrack(STATION, None, MagneticCourse(90, 0.0), time=60.0, left_turns=left_turns)

        assert hold.classify_entry(TrueCourse(heading)) == entry

    @pytest.mark.parametrize('heading, left_turns, outbound', [
        (360, False, 240),
        (210, False, 270),
        (210, True, 300),
    ])
    def test_entry_leg_course(self, heading, left_turns, outbound):
        """After crossing the fix, teardrop entries fly 30 degrees off the outbound course."""
        hold = Racetrack(STATION, None, MagneticCourse(90, 0.0), time=60.0, left_turns=left_turns)
        position = STATION.fix_radial_distance(TrueCourse(270), 0.05)

        next_true_course(hold, position, TrueCourse(heading), 1, on_ground=True)
        assert hold.state == HoldState.OUTBOUND

        assert_course(next_true_course(hold, position, TrueCourse(heading), 1, on_ground=True), outbound)


class TestRacetrackPattern:

    def fly(self, hold, position, course, ticks, speed=0.05):
        """Fly ``ticks`` one second ticks; return the first tick each state was seen."""
        first_seen = {}
        for tick in range(ticks):
            course = next_true_course(hold, position, course, 1)
            first_seen.setdefault(hold.state, tick)
            position = position.fix_radial_distance(course, speed)
        return first_seen

    def test_direct_entry_timed_hold(self):
        hold = Racetrack(STATION, None, MagneticCourse(90, 0.0), time=60.0)
        start = STATION.fix_radial_distance(TrueCourse(270), 2)

        first_seen = self.fly(hold, start, TrueCourse(90), 200)

        assert hold.entry is None
        assert first_seen[HoldState.ENTRY] == 0
        assert 35 <= first_seen[HoldState.OUTBOUND] <= 41
        # Outbound turn of 180 degrees at 3 degrees per second, then one minute
        elapsed = first_seen[HoldState.INBOUND] - first_seen[HoldState.OUTBOUND]
        assert 118 <= elapsed <= 124

    def test_outbound_turn_direction(self):
        """The outbound turn follows the hold's turn direction."""
        for left_turns, expected in ((False, 93), (True, 87)):
            hold = Racetrack(STATION, None, MagneticCourse(90, 0.0), time=60.0, left_turns=left_turns)
            position = STATION.fix_radial_distance(TrueCourse(270), 0.05)

            next_true_course(hold, position, TrueCourse(90), 1)
            assert_course(next_true_course(hold, STATION.fix_radial_distance(TrueCourse(90), 0.1),
                                           TrueCourse(90), 1), expected)

    def test_reset(self):
        hold = Racetrack(STATION, None, MagneticCourse(90, 0.0), distance=4.0)
        next_true_course(hold, STATION.fix_radial_distance(TrueCourse(270), 2), TrueCourse(90), 1)
        assert hold.state == HoldState.ENTRY

        hold.reset()
        assert hold.state is None
        assert hold.entry is None

    def test_hold_without_leg_length(self):
        hold = Racetrack(STATION, None, MagneticCourse(90, 0.0))
        with pytest.raises(GuidanceError):
            next_true_course(hold, STATION, TrueCourse(90), 1)

    def test_floating_hold(self):
        hold = Racetrack(None, UnresolvedWaypoint('HOLDS'), MagneticCourse(90, 0.0), time=60.0)
        with pytest.raises(GuidanceError):
            next_true_course(hold, STATION, TrueCourse(90), 1)

    def test_resolved_copy_starts_fresh(self):
        hold = Racetrack(None, UnresolvedWaypoint('HOLDS'), MagneticCourse(90), time=60.0)
        resolved = hold.with_point(STATION).with_inbound_course(MagneticCourse(90, 5.0))

        assert resolved.point == STATION
        assert resolved.inbound_course.variation == 5.0
        assert resolved.state is None
        assert resolved != hold


class TestArc:
    arc_clockwise = Arc(STATION, None, 10.0, MagneticCourse(270, 0.0))
    arc_counter = Arc(STATION, None, 10.0, MagneticCourse(90, 0.0))

    @pytest.mark.parametrize('distance, expected', [
        (10.0, 270),
        (5.0, 180),
        (15.0, 360),
    ])
    def test_clockwise(self, distance, expected):
        position = STATION.fix_radial_distance(TrueCourse(180), distance)

        assert_course(next_true_course(self.arc_clockwise, position, TrueCourse(90), 1, on_ground=True), expected)

    def test_counter_clockwise(self):
        position = STATION.fix_radial_distance(TrueCourse(180), 10.0)

        assert_course(next_true_course(self.arc_counter, position, TrueCourse(90), 1, on_ground=True), 90)

    def test_floating_arc(self):
        arc = Arc(None, UnresolvedWaypoint('CENTR'), 10.0, MagneticCourse(270, 0.0))
        with pytest.raises(GuidanceError):
            next_true_course(arc, STATION, TrueCourse(90), 1)

    def test_zero_radius(self):
        arc = Arc(STATION, None, 0.0, MagneticCourse(270, 0.0))
        with pytest.raises(GuidanceError):
            next_true_course(arc, STATION, TrueCourse(90), 1)

    def test_dict_round_trip(self):
        arc = Arc(None, UnresolvedWaypoint('CENTR'), 5.5, MagneticCourse(346, 5.0))
        assert Arc.from_dict(arc.to_dict()) == arc


class TestRadial:

    @pytest.mark.parametrize('bearing, expected', [
        (90, 90),
        (80, 135),
        (100, 45),
    ])
    def test_intercept(self, bearing, expected):
        """Off the radial, the aircraft intercepts at 45 degrees."""
        radial = Radial(vor(), None, MagneticCourse(90, 0.0))
        position = STATION.fix_radial_distance(TrueCourse(bearing), 10)

        assert_course(next_true_course(radial, position, TrueCourse(90), 1, on_ground=True), expected)

    def test_radial_of_dme(self):
        dme = DME(client='USA', file_record_number=1, cycle=1705, identifier='TST',
                  position=STATION, magnetic_variation=None, name='TEST')
        radial = Radial(dme, None, MagneticCourse(90, 0.0))

        with pytest.raises(GuidanceError):
            next_true_course(radial, STATION.fix_radial_distance(TrueCourse(90), 10), TrueCourse(90), 1)

    def test_floating_radial(self):
        radial = Radial(None, UnresolvedWaypoint('TST'), MagneticCourse(90, 0.0))
        with pytest.raises(GuidanceError):
            next_true_course(radial, STATION, TrueCourse(90), 1)

    def test_crossing_with_reference(self):
        radial = Radial(vor(), None, MagneticCourse(90, 0.0))
        termination = PathTermination.from_code('CF')
        reference = STATION.fix_radial_distance(TrueCourse(80), 10)

        assert condition_reached(radial, termination, STATION.fix_radial_distance(TrueCourse(100), 10),
                                 reference=reference)
        assert not condition_reached(radial, termination, STATION.fix_radial_distance(TrueCourse(85), 10),
                                     reference=reference)

    def test_crossing_without_reference(self):
        radial = Radial(vor(), None, MagneticCourse(90, 0.0))
        termination = PathTermination.from_code('TF')

        assert condition_reached(radial, termination, STATION.fix_radial_distance(TrueCourse(90.2), 10))
        assert not condition_reached(radial, termination, STATION.fix_radial_distance(TrueCourse(92), 10))

    def test_unsupported_termination(self):
        radial = Radial(vor(), None, MagneticCourse(90, 0.0))
        with pytest.raises(GuidanceError):
            condition_reached(radial, PathTermination.from_code('CR'), STATION.fix_radial_distance(TrueCourse(90), 10))


def test_course_guidance_converts_magnetic():
    assert next_true_course(MagneticCourse(95, 5.0), STATION, TrueCourse(80), 2) == TrueCourse(86)


def test_unknown_via():
    with pytest.raises(GuidanceError):
        next_true_course('direct', STATION, TrueCourse(90), 1)


def test_unresolved_endpoint():
    with pytest.raises(ResolutionError):
        condition_reached(UnresolvedWaypoint('ZELAN'), PathTermination.from_code('TF'), STATION)
