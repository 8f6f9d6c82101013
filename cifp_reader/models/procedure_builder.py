"""
Assembly of parsed procedure legs into SID, STAR and approach objects.

Legs are read before all fixes are known, so the builder resolves every
named endpoint, arc center and holding fix against the fix table, fills in
missing magnetic variations and splits the legs into transitions.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .aerodrome import Aerodrome
from .coordinate import Coordinate
from .course import MagneticCourse
from .guidance import Arc, Racetrack
from .navaid import Navaid
from .procedure import (
    STAR, SID, Approach, ApproachLine, Instruction, InstructionGroups, Procedure, ProcedureLine,
    SIDLine, STARLine,
)
from .validation import ResolutionError
from ..utils.fix_resolver import FixTable, UnresolvedWaypoint, local_magnetic_variation

logger = logging.getLogger(__name__)

RUNWAY = 'runway'
COMMON = 'common'
ENROUTE = 'enroute'
TRANSITION = 'transition'

# Route type codes per procedure kind
SID_ROUTE_GROUPS = {'1': RUNWAY, '4': RUNWAY, 'T': RUNWAY,
                    '2': COMMON, '5': COMMON,
                    '3': ENROUTE, '6': ENROUTE, 'V': ENROUTE}
STAR_ROUTE_GROUPS = {'1': ENROUTE, '4': ENROUTE,
                     '2': COMMON, '5': COMMON,
                     '3': RUNWAY, '6': RUNWAY}
APPROACH_TRANSITION_CODE = 'A'


class ProcedureBuilder:
    """
    Builds procedures against the fixes, navaids and aerodromes of one load.

    Args:
        fixes: Fix table (name to candidate positions)
        navaids: Navaids by identifier
        aerodromes: Airports and heliports by identifier
    """

    def __init__(self, fixes: FixTable, navaids: Dict[str, Set[Navaid]], aerodromes: Dict[str, Aerodrome]):
        self.fixes = fixes
        self.navaids = navaids
        self.aerodromes = aerodromes

    def build(self, lines: Sequence[ProcedureLine]) -> Procedure:
        """
        Build one procedure from its legs, in sequence order.

        Raises:
            ValueError: If no legs are given or they span several procedures
            ResolutionError: If a fix or magnetic variation cannot be resolved
        """
        if not lines:
            raise ValueError("Cannot build a procedure without legs.")
        name, airport = lines[0].name, lines[0].airport
        if any(line.name != name or line.airport != airport for line in lines):
            raise ValueError(f"The provided lines represent multiple procedures ({airport} {name}).")

        if isinstance(lines[0], SIDLine):
            return self.build_sid(lines)
        if isinstance(lines[0], STARLine):
            return self.build_star(lines)
        if isinstance(lines[0], ApproachLine):
            return self.build_approach(lines)
        raise ValueError(f"Unknown procedure leg kind {type(lines[0]).__name__}")

    def build_sid(self, lines: Sequence[ProcedureLine]) -> SID:
        groups = self._partition(lines, lambda line: SID_ROUTE_GROUPS.get(line.route_type))
        return SID(lines[0].name, lines[0].airport, groups[RUNWAY], self._common(groups), groups[ENROUTE])

    def build_star(self, lines: Sequence[ProcedureLine]) -> STAR:
        groups = self._partition(lines, lambda line: STAR_ROUTE_GROUPS.get(line.route_type))
        return STAR(lines[0].name, lines[0].airport, groups[ENROUTE], self._common(groups), groups[RUNWAY])

    def build_approach(self, lines: Sequence[ProcedureLine]) -> Approach:
        groups = self._partition(
            lines, lambda line: TRANSITION if line.route_type == APPROACH_TRANSITION_CODE else COMMON)
        return Approach(lines[0].name, lines[0].airport, groups[TRANSITION], self._common(groups))

    @staticmethod
    def _common(groups: Dict[str, InstructionGroups]) -> List[Instruction]:
        return groups[COMMON].get('', [])

    def _partition(self, lines: Sequence[ProcedureLine], group_of) -> Dict[str, InstructionGroups]:
        """
        Normalize legs and split them by route type.

        Common route legs share one group regardless of their transition
        field. A transition split over several runs is joined in file order.
        """
        reference = self.reference_point(lines)
        groups: Dict[str, InstructionGroups] = {RUNWAY: {}, COMMON: {}, ENROUTE: {}, TRANSITION: {}}

        for line in lines:
            group = group_of(line)
            if group is None:
                logger.warning(f"{line.airport} {line.name}: ignoring leg {line.sequence_number} "
                               f"with route type {line.route_type!r}")
                continue
            key = '' if group == COMMON else line.transition
            leg = Instruction.from_line(self.normalize(line, reference))
            groups[group].setdefault(key, []).append(leg)

        return groups

    def reference_point(self, lines: Sequence[ProcedureLine]) -> Optional[Coordinate]:
        """
        Point used to pick among same-named fixes.

        The airport itself when known, else the first leg ending on a
        coordinate, else the first named endpoint resolved against the
        second one.
        """
        airport = self.aerodromes.get(lines[0].airport)
        if airport is not None:
            return airport.location

        for line in lines:
            if isinstance(line.endpoint, Coordinate):
                return line.endpoint

        named = [line.endpoint for line in lines if isinstance(line.endpoint, UnresolvedWaypoint)]
        if len(named) >= 2:
            return named[0].resolve(self.fixes, named[1])
        return None

    def normalize(self, line: ProcedureLine, reference: Optional[Coordinate]) -> ProcedureLine:
        """
        Resolve a leg's endpoint and via and give its magnetic courses a variation.

        Raises:
            ResolutionError: If a name cannot be resolved, no variation can be
                found or an approach hold has no fix
        """
        if isinstance(line.endpoint, UnresolvedWaypoint):
            line = replace(line, endpoint=line.endpoint.resolve(self.fixes, reference))

        via = line.via
        if isinstance(via, Arc):
            if isinstance(via.center_waypoint, UnresolvedWaypoint):
                via = replace(via, centerpoint=via.center_waypoint.resolve(self.fixes, reference))
            if via.arc_to.variation is None:
                via = replace(via, arc_to=self._with_variation(via.arc_to, line, reference))
        elif isinstance(via, Racetrack):
            if isinstance(via.waypoint, UnresolvedWaypoint):
                via = via.with_point(via.waypoint.resolve(self.fixes, reference))
            if isinstance(via.inbound_course, MagneticCourse) and via.inbound_course.variation is None:
                via = via.with_inbound_course(self._with_variation(via.inbound_course, line, reference))
        elif isinstance(via, MagneticCourse) and via.variation is None:
            via = self._with_variation(via, line, reference)

        if isinstance(line, ApproachLine) and isinstance(via, Racetrack) and via.point is None:
            raise ResolutionError(f"{line.airport} {line.name}: holding fix of leg {line.sequence_number} is unknown.")

        if via is not line.via:
            line = replace(line, via=via)
        return line

    def _with_variation(self, course: MagneticCourse, line: ProcedureLine,
                        reference: Optional[Coordinate]) -> MagneticCourse:
        variation = None
        if isinstance(line, ApproachLine):
            variation = self._referenced_navaid_variation(line, reference)
        if variation is None:
            variation = self._aerodrome_variation(line, reference)
        return course.with_variation(variation)

    def _anchor(self, line: ProcedureLine, reference: Optional[Coordinate], prefer_endpoint: bool) -> Coordinate:
        endpoint = line.endpoint if isinstance(line.endpoint, Coordinate) else None
        anchor = (endpoint or reference) if prefer_endpoint else (reference or endpoint)
        if anchor is None:
            raise ResolutionError(f"Unable to pin magnetic variation for {line.airport} {line.name}.")
        return anchor

    def _referenced_navaid_variation(self, line: ApproachLine, reference: Optional[Coordinate]) -> Optional[float]:
        candidates = self.navaids.get(line.referenced_navaid or '')
        if not candidates:
            return None
        anchor = self._anchor(line, reference, prefer_endpoint=False)
        for navaid in sorted(candidates, key=lambda n: n.position.distance_to(anchor)):
            if navaid.magnetic_variation is not None:
                return navaid.magnetic_variation
        return None

    def _aerodrome_variation(self, line: ProcedureLine, reference: Optional[Coordinate]) -> float:
        anchor = self._anchor(line, reference, prefer_endpoint=True)
        return local_magnetic_variation(self.aerodromes, anchor)[1]


def group_procedure_lines(lines: Sequence[ProcedureLine]) -> Dict[Tuple[str, str, str], List[ProcedureLine]]:
    """Group legs by (kind, airport, name), keeping file order inside each group."""
    grouped: Dict[Tuple[str, str, str], List[ProcedureLine]] = {}
    for line in lines:
        grouped.setdefault((line.header, line.airport, line.name), []).append(line)
    return grouped
