"""
Lateral guidance for procedure legs.

A leg's ``via`` is one of a course, an arc, a racetrack (hold) or a radial.
``next_true_course`` turns an aircraft's position and course into the next
commanded true course, and ``condition_reached`` checks a leg endpoint. Both
dispatch on the via or endpoint kind in one place.

Racetracks keep state between calls. Callers pass the simulated time since
the previous call as ``tick_seconds``; the hold timers accumulate it, so a
replayed sequence of ticks always produces the same commands.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .altitude import Altitude
from .coordinate import Coordinate
from .course import Course, MagneticCourse, TrueCourse, turn_towards
from .navaid import Navaid
from .path_termination import PathTermination
from .validation import GuidanceError, ResolutionError
from ..utils.fix_resolver import UnresolvedWaypoint

logger = logging.getLogger(__name__)

RADIAL_TRACKING_TOLERANCE = 0.5
RADIAL_INTERCEPT_ANGLE = 45
ARC_RADIUS_TOLERANCE = 0.1
FIX_CROSSING_MAX_ERROR = 0.1
ENTRY_LEG_SECONDS = 60.0
TEARDROP_OFFSET = 30
STABLE_COURSE_ERROR = 1.0


@dataclass(frozen=True)
class Radial:
    """A magnetic radial from a VOR, usable both as a via and as an endpoint."""

    station: Optional[Navaid]
    waypoint: Optional[UnresolvedWaypoint]
    bearing: MagneticCourse

    @property
    def magnetic_variation(self) -> float:
        if self.station is None or self.station.magnetic_variation is None:
            raise GuidanceError("Cannot fly radials of DME.")
        return self.station.magnetic_variation


@dataclass(frozen=True)
class Arc:
    """DME arc of ``radius`` nautical miles around a center, flown until ``arc_to``."""

    centerpoint: Optional[Coordinate]
    center_waypoint: Optional[UnresolvedWaypoint]
    radius: float
    arc_to: MagneticCourse

    def to_dict(self):
        return {
            'centerpoint': None if self.centerpoint is None else self.centerpoint.to_dict(),
            'center_waypoint': None if self.center_waypoint is None else self.center_waypoint.to_dict(),
            'radius': self.radius,
            'arc_to': self.arc_to.to_dict(),
        }

    @classmethod
    def from_dict(cls, data):
        centerpoint = data.get('centerpoint')
        waypoint = data.get('center_waypoint')
        arc_to = data['arc_to']
        return cls(
            None if centerpoint is None else Coordinate.from_dict(centerpoint),
            None if waypoint is None else UnresolvedWaypoint.from_dict(waypoint),
            data['radius'],
            MagneticCourse(arc_to[0], arc_to[1]),
        )


class HoldState(Enum):
    ENTRY = 'entry'
    OUTBOUND = 'outbound'
    INBOUND = 'inbound'


class EntryType(Enum):
    DIRECT = 'direct'
    PARALLEL = 'parallel'
    TEARDROP = 'teardrop'


class Racetrack:
    """
    Holding pattern around a fix.

    Args:
        point: Holding fix, once resolved
        waypoint: Holding fix name awaiting resolution
        inbound_course: Course flown toward the fix
        distance: Outbound leg length in nautical miles
        time: Outbound leg duration in seconds
        left_turns: Non-standard (left hand) pattern

    The state below is advanced only by ``next_true_course``.
    """

    def __init__(self, point: Optional[Coordinate], waypoint: Optional[UnresolvedWaypoint],
                 inbound_course: Course, distance: Optional[float] = None,
                 time: Optional[float] = None, left_turns: bool = False):
        self.point = point
        self.waypoint = waypoint
        self.inbound_course = inbound_course
        self.distance = distance
        self.time = time
        self.left_turns = left_turns

        self.state: Optional[HoldState] = None
        self.entry: Optional[EntryType] = None
        self.abeam_point: Optional[Coordinate] = None
        self.elapsed_outbound: Optional[float] = None
        self.stable = True

    def with_point(self, point: Coordinate) -> 'Racetrack':
        """Copy of this hold, fix resolved, with its state reset."""
        return Racetrack(point, self.waypoint, self.inbound_course, self.distance, self.time, self.left_turns)

    def with_inbound_course(self, inbound_course: Course) -> 'Racetrack':
        return Racetrack(self.point, self.waypoint, inbound_course, self.distance, self.time, self.left_turns)

    def classify_entry(self, current_course: Course) -> EntryType:
        """
        Entry type for an aircraft on ``current_course`` reaching the hold.

        The relative angle is the current course as seen from the inbound
        course, positive to the right. Right-hand holds enter directly from
        70 degrees left to 110 degrees right, teardrop further left and
        parallel further right; left-hand holds are the mirror image.
        """
        relative = -current_course.angle(self.inbound_course)
        if self.left_turns:
            relative = -relative
        if -70 <= relative <= 110:
            return EntryType.DIRECT
        if relative < -70:
            return EntryType.TEARDROP
        return EntryType.PARALLEL

    def reset(self) -> None:
        self.state = None
        self.entry = None
        self.abeam_point = None
        self.elapsed_outbound = None
        self.stable = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Racetrack):
            return NotImplemented
        return (self.point, self.waypoint, self.inbound_course, self.distance, self.time, self.left_turns) == \
            (other.point, other.waypoint, other.inbound_course, other.distance, other.time, other.left_turns)

    def __hash__(self) -> int:
        return hash((self.point, self.inbound_course, self.distance, self.time, self.left_turns))

    def __repr__(self) -> str:
        return (f"Racetrack(point={self.point}, inbound_course={self.inbound_course}, "
                f"distance={self.distance}, time={self.time}, left_turns={self.left_turns})")

    def to_dict(self):
        return {
            'point': None if self.point is None else self.point.to_dict(),
            'waypoint': None if self.waypoint is None else self.waypoint.to_dict(),
            'inbound_course': self.inbound_course.to_dict(),
            'distance': self.distance,
            'time': self.time,
            'left_turns': self.left_turns,
        }

    @classmethod
    def from_dict(cls, data):
        point = data.get('point')
        waypoint = data.get('waypoint')
        return cls(
            None if point is None else Coordinate.from_dict(point),
            None if waypoint is None else UnresolvedWaypoint.from_dict(waypoint),
            Course.from_dict(data['inbound_course']),
            data.get('distance'),
            data.get('time'),
            data.get('left_turns', False),
        )


def next_true_course(via: Any, position: Coordinate, current_course: Course,
                     tick_seconds: float, on_ground: bool = False) -> TrueCourse:
    """
    Next commanded true course for a leg flown by ``via``.

    Raises:
        GuidanceError: If the via cannot be flown (floating arc or hold,
            hold without leg length, unknown via kind)
    """
    if isinstance(via, Course):
        return turn_towards(current_course, via.to_true(), tick_seconds, on_ground)
    if isinstance(via, Arc):
        return _arc_course(via, position, current_course, tick_seconds, on_ground)
    if isinstance(via, Racetrack):
        return _racetrack_course(via, position, current_course, tick_seconds, on_ground)
    if isinstance(via, Radial):
        return _radial_course(via, position, current_course, tick_seconds, on_ground)
    raise GuidanceError(f"Cannot produce guidance for {type(via).__name__}")


def condition_reached(endpoint: Any, termination: PathTermination, position: Coordinate,
                      altitude: Optional[Altitude] = None, reference: Any = None,
                      tolerance: float = 0.1) -> bool:
    """
    Whether a leg ending at ``endpoint`` is complete.

    Raises:
        ResolutionError: If the endpoint is still an unresolved waypoint
        GuidanceError: If the endpoint kind does not support the termination
    """
    if isinstance(endpoint, Coordinate):
        return endpoint.is_condition_reached(termination, position, reference, tolerance)
    if isinstance(endpoint, Radial):
        return _radial_crossed(endpoint, termination, position, reference)
    if isinstance(endpoint, UnresolvedWaypoint):
        raise ResolutionError("Waypoint must be resolved.")
    raise GuidanceError(f"Cannot check completion against {type(endpoint).__name__}")


def _radial_course(radial: Radial, position: Coordinate, current_course: Course,
                   tick_seconds: float, on_ground: bool) -> TrueCourse:
    if radial.station is None:
        raise GuidanceError("Cannot fly a floating radial.")

    variation = radial.magnetic_variation
    bearing, distance = radial.station.position.get_bearing_distance(position)
    current_radial = bearing.to_magnetic(variation) if bearing is not None else MagneticCourse(360, variation)
    radial_error = radial.bearing.angle(current_radial)

    if distance < 0.1:
        target = radial.bearing
    elif radial_error + RADIAL_TRACKING_TOLERANCE < 0:
        target = radial.bearing + RADIAL_INTERCEPT_ANGLE
    elif radial_error - RADIAL_TRACKING_TOLERANCE > 0:
        target = radial.bearing - RADIAL_INTERCEPT_ANGLE
    else:
        target = radial.bearing - radial_error
    return turn_towards(current_course, target, tick_seconds, on_ground)


def _radial_crossed(radial: Radial, termination: PathTermination, position: Coordinate, reference: Any) -> bool:
    if radial.station is None:
        raise GuidanceError("Cannot reach a floating radial.")
    if not termination & PathTermination.UNTIL_CROSSING:
        raise GuidanceError(f"Termination {termination!r} is not supported for a radial endpoint")

    position_bearing = radial.station.position.get_bearing_distance(position)[0]
    if position_bearing is None:
        raise GuidanceError("Reference shouldn't be on top of endpoint.")

    target = radial.bearing.to_true()
    if isinstance(reference, Coordinate):
        reference_bearing = radial.station.position.get_bearing_distance(reference)[0]
        if reference_bearing is None:
            return True
        return (reference_bearing < target) != (position_bearing < target)

    return abs(radial.bearing.angle(position_bearing)) <= RADIAL_TRACKING_TOLERANCE


def _arc_course(arc: Arc, position: Coordinate, current_course: Course,
                tick_seconds: float, on_ground: bool) -> TrueCourse:
    if arc.centerpoint is None:
        raise GuidanceError("Cannot fly a floating arc.")
    if arc.radius <= 0:
        raise GuidanceError("Cannot fly an arc with 0 radius.")

    bearing, distance = arc.centerpoint.get_bearing_distance(position)

    if bearing is None or distance + ARC_RADIUS_TOLERANCE < arc.radius:
        target = bearing if bearing is not None else arc.arc_to.to_true()
    elif distance - ARC_RADIUS_TOLERANCE > arc.radius:
        target = bearing.reciprocal
    elif bearing.angle(arc.arc_to) > 0:
        # Clockwise
        target = bearing + 90
    else:
        target = bearing - 90
    return turn_towards(current_course, target, tick_seconds, on_ground)


def _racetrack_course(hold: Racetrack, position: Coordinate, current_course: Course,
                      tick_seconds: float, on_ground: bool) -> TrueCourse:
    if hold.distance is None and hold.time is None:
        raise GuidanceError("Racetrack must have a distance or time defined.")
    if hold.point is None:
        raise GuidanceError("Cannot fly a floating racetrack.")

    if hold.state is None:
        hold.state = HoldState.ENTRY
        hold.entry = hold.classify_entry(current_course)
        hold.stable = True
        logger.debug(f"Hold at {hold.point} entered with {hold.entry.value} entry")

    # A single tick may run through several transitions; each pass either
    # returns a command or moves the hold to a new state.
    while True:
        fix_bearing, distance = position.get_bearing_distance(hold.point)
        forced_turn = None if hold.stable else hold.left_turns

        if hold.state == HoldState.ENTRY:
            if distance < FIX_CROSSING_MAX_ERROR:
                hold.state = HoldState.OUTBOUND
                hold.stable = False
                forced_turn = hold.left_turns
            return turn_towards(current_course, fix_bearing or current_course, tick_seconds, on_ground, forced_turn)

        if hold.state == HoldState.INBOUND:
            if not hold.stable and abs(current_course.angle(hold.inbound_course)) < STABLE_COURSE_ERROR:
                hold.stable = True
            if distance < FIX_CROSSING_MAX_ERROR:
                hold.state = HoldState.OUTBOUND
                hold.abeam_point = None
                hold.elapsed_outbound = None
                hold.entry = None
                hold.stable = False
            forced_turn = None if hold.stable else hold.left_turns
            return turn_towards(current_course, fix_bearing or hold.inbound_course, tick_seconds, on_ground,
                                forced_turn)

        # Outbound
        outbound = hold.inbound_course.reciprocal
        if hold.entry == EntryType.DIRECT:
            hold.entry = None

        if hold.entry in (EntryType.PARALLEL, EntryType.TEARDROP):
            if hold.elapsed_outbound is None:
                hold.elapsed_outbound = 0.0
            else:
                hold.elapsed_outbound += tick_seconds

            if hold.elapsed_outbound < ENTRY_LEG_SECONDS:
                hold.stable = True
                if hold.entry == EntryType.TEARDROP:
                    outbound = outbound + (TEARDROP_OFFSET if hold.left_turns else -TEARDROP_OFFSET)
                return turn_towards(current_course, outbound, tick_seconds, on_ground)

            hold.elapsed_outbound = None
            hold.stable = False
            hold.state = HoldState.INBOUND
            continue

        if not hold.stable and abs(current_course.angle(outbound)) < STABLE_COURSE_ERROR:
            hold.abeam_point = position
            hold.elapsed_outbound = 0.0
            hold.stable = True
        elif hold.stable and hold.elapsed_outbound is not None:
            hold.elapsed_outbound += tick_seconds

        if not hold.stable:
            return turn_towards(current_course, outbound, tick_seconds, on_ground, hold.left_turns)

        leg_flown = (hold.distance is not None and hold.abeam_point is not None
                     and hold.abeam_point.distance_to(position) >= hold.distance)
        leg_timed = (hold.time is not None and hold.elapsed_outbound is not None
                     and hold.elapsed_outbound >= hold.time)
        if leg_flown or leg_timed:
            hold.abeam_point = None
            hold.elapsed_outbound = None
            hold.stable = False
            hold.state = HoldState.INBOUND
            continue

        return turn_towards(current_course, outbound, tick_seconds, on_ground)
