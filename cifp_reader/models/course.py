import math
from dataclasses import dataclass, replace
from typing import List, Optional

from .validation import GuidanceError

# Standard rate turn, degrees per second
STANDARD_RATE = 3.0


def _normalize(degrees: float) -> float:
    if degrees == 0 or degrees == 360:
        return 360.0
    normalized = (degrees + 360) % 360
    return 360.0 if normalized == 0 else float(normalized)


@dataclass(frozen=True)
class Course:
    """
    A heading in the half-open range (0, 360].

    Two concrete kinds exist: ``TrueCourse`` and ``MagneticCourse``.
    Arithmetic keeps the kind; comparisons are made on true degrees.
    """

    degrees: float

    def __post_init__(self):
        object.__setattr__(self, 'degrees', _normalize(self.degrees))

    def to_true(self) -> 'TrueCourse':
        raise NotImplementedError

    def to_magnetic(self, variation: Optional[float]) -> 'MagneticCourse':
        raise NotImplementedError

    @property
    def reciprocal(self) -> 'Course':
        return replace(self, degrees=(self.degrees + 179) % 360 + 1)

    @property
    def radians(self) -> float:
        return math.radians(self.degrees)

    def angle(self, other: 'Course') -> float:
        """
        Signed angle to turn from this course to another.

        Returns:
            Degrees in [-180, 180], positive is clockwise, 0 when the two
            courses are within 0.001 degree of each other
        """
        tc1 = self.to_true().degrees
        tc2 = other.to_true().degrees
        if abs(tc1 - tc2) < 0.001:
            return 0.0

        if tc1 > tc2:
            clockwise = (tc2 + 360) - tc1
            anti_clockwise = tc1 - tc2
        else:
            clockwise = tc2 - tc1
            anti_clockwise = (tc1 + 360) - tc2

        return -anti_clockwise if anti_clockwise < clockwise else clockwise

    def __add__(self, degrees: float) -> 'Course':
        return replace(self, degrees=self.degrees + degrees)

    def __sub__(self, degrees: float) -> 'Course':
        return replace(self, degrees=self.degrees - degrees)

    def __lt__(self, other: 'Course') -> bool:
        return self.to_true().degrees < other.to_true().degrees

    def __gt__(self, other: 'Course') -> bool:
        return self.to_true().degrees > other.to_true().degrees

    def __str__(self) -> str:
        return f"{int(self.degrees):03d}"

    def to_dict(self) -> List[Optional[float]]:
        """Serialize as ``[degrees, variation]``; variation is None for true courses."""
        magnetic = self.to_magnetic(None)
        return [magnetic.degrees, magnetic.variation]

    @staticmethod
    def from_dict(data: List[Optional[float]]) -> 'Course':
        degrees, variation = data
        if variation is None:
            return TrueCourse(degrees)
        return MagneticCourse(degrees, variation)


@dataclass(frozen=True)
class TrueCourse(Course):

    def to_true(self) -> 'TrueCourse':
        return self

    def to_magnetic(self, variation: Optional[float]) -> 'MagneticCourse':
        return MagneticCourse(self.degrees + (variation or 0), variation)


@dataclass(frozen=True)
class MagneticCourse(Course):
    """A magnetic course; east variation is negative, so true = magnetic - variation."""

    variation: Optional[float] = None

    def to_true(self) -> TrueCourse:
        if self.variation is None:
            raise GuidanceError("Cannot convert magnetic to true course unless variation known")
        return TrueCourse(self.degrees - self.variation)

    def to_magnetic(self, variation: Optional[float]) -> 'MagneticCourse':
        if variation is None:
            return MagneticCourse(self.degrees, self.variation)
        if self.variation is None:
            return MagneticCourse(self.degrees, variation)
        return self.to_true().to_magnetic(variation)

    def with_variation(self, variation: float) -> 'MagneticCourse':
        return MagneticCourse(self.degrees, variation)


def turn_towards(current: Course, target: Course, tick_seconds: float, on_ground: bool,
                 force_left: Optional[bool] = None) -> TrueCourse:
    """
    Next true course when turning from ``current`` toward ``target`` at standard rate.

    The target is returned directly when on the ground or when it is less
    than one tick of turn away. ``force_left`` overrides the shorter-turn
    direction.
    """
    remaining = current.angle(target)
    rate = STANDARD_RATE * tick_seconds
    if on_ground or abs(remaining) < rate:
        return target.to_true()

    turn_left = force_left if force_left is not None else remaining < 0
    if turn_left:
        return TrueCourse(current.to_true().degrees - rate)
    return TrueCourse(current.to_true().degrees + rate)
