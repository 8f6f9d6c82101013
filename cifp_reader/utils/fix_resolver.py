"""
Name-to-position resolution for fixes that appear in more than one place.

CIFP identifiers are only unique within a region, so the same five letter
name may map to several coordinates. Resolution picks the candidate closest
to a reference point or to another named fix.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Set, Tuple, Union

from ..models.aerodrome import Aerodrome, Airport, Heliport
from ..models.coordinate import Coordinate
from ..models.navaid import Navaid
from ..models.path_termination import PathTermination
from ..models.validation import ResolutionError

logger = logging.getLogger(__name__)

FixTable = Dict[str, Set[Coordinate]]

MAGVAR_SEARCH_START = 50
MAGVAR_SEARCH_STEP = 50
MAGVAR_SEARCH_LIMIT = 250


def add_fix(fixes: FixTable, name: str, position: Coordinate) -> None:
    """Register ``position`` under ``name``, keeping earlier candidates."""
    fixes.setdefault(name, set()).add(position)


def concretize(fixes: FixTable, name: str, reference_coordinate: Optional[Coordinate] = None,
               reference_name: Optional[str] = None) -> Coordinate:
    """
    Pick the position for ``name``.

    Args:
        fixes: Fix table to search
        name: Fix identifier
        reference_coordinate: Nearby point used to choose among candidates
        reference_name: Another fix whose candidates are used when no
            coordinate is available; the pair closest together wins

    Returns:
        The only candidate, or the candidate nearest the reference

    Raises:
        ResolutionError: If either name is unknown, or several candidates
            exist and no reference was given
    """
    candidates = fixes.get(name)
    if not candidates:
        raise ResolutionError(f"Unknown waypoint {name}.")

    if len(candidates) == 1:
        return next(iter(candidates))

    logger.debug(f"{name} has {len(candidates)} candidates")
    if reference_coordinate is not None:
        return min(candidates, key=lambda c: c.distance_to(reference_coordinate))

    if reference_name is not None:
        references = fixes.get(reference_name)
        if not references:
            raise ResolutionError(f"Unknown waypoint {reference_name}.")
        return min(candidates, key=lambda c: min(c.distance_to(r) for r in references))

    raise ResolutionError(f"Could not resolve waypoint {name} without context.")


def _search_radii() -> Iterable[int]:
    return range(MAGVAR_SEARCH_START, MAGVAR_SEARCH_LIMIT + 1, MAGVAR_SEARCH_STEP)


def navaid_magnetic_variation(navaids: Dict[str, Set[Navaid]], reference: Coordinate) -> Tuple[Coordinate, float]:
    """
    Magnetic variation of the first navaid publishing one near ``reference``.

    The search widens from 50 to 250 nautical miles in 50 mile steps.

    Raises:
        ResolutionError: If no navaid within 250 miles publishes a variation
    """
    for radius in _search_radii():
        for group in navaids.values():
            for navaid in group:
                if navaid.magnetic_variation is None:
                    continue
                if reference.distance_to(navaid.position) < radius:
                    return navaid.position, navaid.magnetic_variation

    raise ResolutionError(f"Magnetic variation not found near {reference}.")


def local_magnetic_variation(aerodromes: Dict[str, Aerodrome], reference: Coordinate) -> Tuple[Coordinate, float]:
    """
    Magnetic variation of the first airport or heliport near ``reference``.

    Uses the same widening search as ``navaid_magnetic_variation``.

    Raises:
        ResolutionError: If no aerodrome lies within 250 miles
    """
    for radius in _search_radii():
        for aerodrome in aerodromes.values():
            if not isinstance(aerodrome, (Airport, Heliport)):
                continue
            if reference.distance_to(aerodrome.location) < radius:
                return aerodrome.location, aerodrome.magnetic_variation

    raise ResolutionError(f"Magnetic variation not found near {reference}.")


@dataclass(frozen=True)
class UnresolvedWaypoint:
    """
    Procedure endpoint known only by name (or by a coordinate awaiting resolution).

    Procedures are parsed before every fix is known, so legs carry this
    placeholder until the builder swaps it for a ``Coordinate``.
    """

    name: Optional[str] = None
    position: Optional[Coordinate] = None

    def resolve(self, fixes: FixTable,
                reference: Union[Coordinate, 'UnresolvedWaypoint', None] = None) -> Coordinate:
        if self.position is not None:
            return self.position
        if isinstance(reference, UnresolvedWaypoint):
            return concretize(fixes, self.name, reference_name=reference.name)
        return concretize(fixes, self.name, reference_coordinate=reference)

    def is_condition_reached(self, termination: PathTermination, position: Coordinate,
                             reference: Any = None, tolerance: float = 0.1) -> bool:
        raise ResolutionError("Waypoint must be resolved.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'position': None if self.position is None else self.position.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UnresolvedWaypoint':
        position = data.get('position')
        return cls(data.get('name'), None if position is None else Coordinate.from_dict(position))

    def __str__(self) -> str:
        return self.name if self.name is not None else str(self.position)
