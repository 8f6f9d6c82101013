"""
Instrument procedures (SID, STAR and approach) and their legs.

Each procedure keeps its legs split into named transitions and a common
route; ``select_route`` stitches the requested transitions around the common
route in flying order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Type

from .altitude import Altitude, AltitudeMSL
from .coordinate import Coordinate
from .course import Course
from .guidance import Arc, Racetrack, condition_reached, next_true_course
from .path_termination import PathTermination
from .record import RecordLine
from .restrictions import AltitudeRestriction, SpeedRestriction
from .validation import ResolutionError
from ..utils.fix_resolver import UnresolvedWaypoint

logger = logging.getLogger(__name__)

CATCH_ALL_TRANSITION = 'ALL'
# Runway suffixes that may be published as a shared "both" transition
RUNWAY_SIDES = 'LCR'
BOTH_RUNWAYS_SUFFIX = 'B'


@dataclass(frozen=True)
class ProcedureLine(RecordLine):
    """
    One leg record of a procedure, before assembly.

    ``endpoint`` starts as an ``UnresolvedWaypoint`` (or None) and is
    replaced by a ``Coordinate`` when the procedure is built.
    """

    airport: str
    name: str
    route_type: str
    transition: str
    sequence_number: int
    termination: PathTermination
    endpoint: Any
    via: Any
    altitude: AltitudeRestriction
    speed: SpeedRestriction
    transition_altitude: Optional[AltitudeMSL] = None


@dataclass(frozen=True)
class SIDLine(ProcedureLine):
    rnav_requirement: Optional[int] = None

    header = 'PD'


@dataclass(frozen=True)
class STARLine(ProcedureLine):
    initial: bool = False

    header = 'PE'


@dataclass(frozen=True)
class ApproachLine(ProcedureLine):
    fix_label: str = ' '
    required_navigation_performance: Optional[str] = None
    referenced_navaid: Optional[str] = None

    header = 'PF'


def _endpoint_to_dict(endpoint: Any) -> Optional[Dict[str, Any]]:
    if endpoint is None:
        return None
    if isinstance(endpoint, Coordinate):
        return {'type': 'coordinate', 'value': endpoint.to_dict()}
    if isinstance(endpoint, UnresolvedWaypoint):
        return {'type': 'waypoint', 'value': endpoint.to_dict()}
    raise ValueError(f"Cannot serialize endpoint {type(endpoint).__name__}")


def _endpoint_from_dict(data: Optional[Dict[str, Any]]) -> Any:
    if data is None:
        return None
    if data['type'] == 'coordinate':
        return Coordinate.from_dict(data['value'])
    return UnresolvedWaypoint.from_dict(data['value'])


def _via_to_dict(via: Any) -> Optional[Dict[str, Any]]:
    if via is None:
        return None
    if isinstance(via, Course):
        return {'type': 'course', 'value': via.to_dict()}
    if isinstance(via, Arc):
        return {'type': 'arc', 'value': via.to_dict()}
    if isinstance(via, Racetrack):
        return {'type': 'racetrack', 'value': via.to_dict()}
    raise ValueError(f"Cannot serialize via {type(via).__name__}")


def _via_from_dict(data: Optional[Dict[str, Any]]) -> Any:
    if data is None:
        return None
    kind = data['type']
    if kind == 'course':
        return Course.from_dict(data['value'])
    if kind == 'arc':
        return Arc.from_dict(data['value'])
    if kind == 'racetrack':
        return Racetrack.from_dict(data['value'])
    raise ValueError(f"Unknown via type {kind}")


@dataclass(frozen=True)
class Instruction:
    """A leg as flown: how it ends, where it ends, how to get there and its restrictions."""

    termination: PathTermination
    endpoint: Any = None
    via: Any = None
    speed: SpeedRestriction = field(default_factory=SpeedRestriction.unrestricted)
    altitude: AltitudeRestriction = field(default_factory=AltitudeRestriction.unrestricted)
    on_ground: bool = False

    @classmethod
    def from_line(cls, line: ProcedureLine) -> 'Instruction':
        return cls(line.termination, line.endpoint, line.via, line.speed, line.altitude)

    def is_complete(self, position: Coordinate, altitude: Optional[Altitude] = None,
                    tolerance: float = 0.1) -> bool:
        """
        Whether the leg has been flown.

        Legs flown until terminated never complete on their own; legs
        without an endpoint cannot be checked and report False.
        """
        if self.termination & PathTermination.UNTIL_TERMINATED:
            return False
        if self.endpoint is None:
            return False
        return condition_reached(self.endpoint, self.termination, position, altitude, None, tolerance)

    def next_true_course(self, position: Coordinate, current_course: Course, tick_seconds: float):
        return next_true_course(self.via, position, current_course, tick_seconds, self.on_ground)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'termination': int(self.termination),
            'endpoint': _endpoint_to_dict(self.endpoint),
            'via': _via_to_dict(self.via),
            'speed': self.speed.to_dict(),
            'altitude': self.altitude.to_dict(),
            'on_ground': self.on_ground,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Instruction':
        return cls(
            termination=PathTermination(data['termination']),
            endpoint=_endpoint_from_dict(data.get('endpoint')),
            via=_via_from_dict(data.get('via')),
            speed=SpeedRestriction.from_dict(data.get('speed', {})),
            altitude=AltitudeRestriction.from_dict(data.get('altitude', {})),
            on_ground=data.get('on_ground', False),
        )


InstructionGroups = Dict[str, List[Instruction]]


def _groups_to_dict(groups: InstructionGroups) -> Dict[str, List[Dict[str, Any]]]:
    return {name: [i.to_dict() for i in legs] for name, legs in groups.items()}


def _groups_from_dict(data: Dict[str, List[Dict[str, Any]]]) -> InstructionGroups:
    return {name: [Instruction.from_dict(i) for i in legs] for name, legs in data.items()}


def _runway_transition_key(transitions: InstructionGroups, requested: str) -> str:
    """
    Key of the runway transition serving ``requested``.

    A runway published only as a shared transition (``RW08B`` for both
    ``RW08L`` and ``RW08R``) is found from either side's name.

    Raises:
        ResolutionError: If neither the name nor its shared form exists
    """
    if requested in transitions:
        return requested
    if requested and requested[-1] in RUNWAY_SIDES:
        shared = requested[:-1] + BOTH_RUNWAYS_SUFFIX
        if shared in transitions:
            return shared
    raise ResolutionError(f"Runway transition {requested} was not found.")


class Procedure:
    """
    Base class for SIDs, STARs and approaches.

    Args:
        name: Procedure identifier (``ZELAN4``, ``I08L``)
        airport: Airport identifier
    """

    kind = 'procedure'

    def __init__(self, name: str, airport: Optional[str] = None,
                 instructions: Optional[Iterable[Instruction]] = None):
        self.name = name
        self.airport = airport
        self._instructions = list(instructions or [])

    def select_route(self, inbound: Optional[str] = None, outbound: Optional[str] = None) -> List[Instruction]:
        return list(self._instructions)

    @property
    def transitions(self) -> List[str]:
        """Names of every transition that can be passed to ``select_route``."""
        return []

    def has_transition(self, name: str) -> bool:
        return name in self.transitions

    def __len__(self) -> int:
        return len(self.select_route())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.airport} {self.name})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'airport': self.airport,
            'instructions': [i.to_dict() for i in self._instructions],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Procedure':
        procedure_class = _PROCEDURE_KINDS.get(data.get('type'))
        if procedure_class is None:
            raise ValueError(f"Unknown procedure type: {data.get('type')}")
        return procedure_class._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Procedure':
        return cls(data['name'], data.get('airport'),
                   [Instruction.from_dict(i) for i in data.get('instructions', [])])


class SID(Procedure):
    """Departure: runway transition, common route, enroute transition."""

    kind = 'SID'

    def __init__(self, name: str, airport: Optional[str] = None,
                 runway_transitions: Optional[InstructionGroups] = None,
                 common_route: Optional[List[Instruction]] = None,
                 enroute_transitions: Optional[InstructionGroups] = None):
        super().__init__(name, airport)
        self.runway_transitions = runway_transitions or {}
        self.common_route = common_route or []
        self.enroute_transitions = enroute_transitions or {}

    @property
    def transitions(self) -> List[str]:
        return list(self.runway_transitions) + list(self.enroute_transitions)

    def select_route(self, inbound: Optional[str] = None, outbound: Optional[str] = None) -> List[Instruction]:
        """
        Legs from runway ``inbound`` through the common route to enroute ``outbound``.

        Missing transition names fall back to the ``ALL`` group when one is
        published.

        Raises:
            ResolutionError: If a named transition does not exist
        """
        if outbound is not None and outbound not in self.enroute_transitions:
            raise ResolutionError(f"Enroute transition {outbound} was not found.")

        route: List[Instruction] = []
        if inbound is None:
            route.extend(self.runway_transitions.get(CATCH_ALL_TRANSITION, []))
        else:
            route.extend(self.runway_transitions[_runway_transition_key(self.runway_transitions, inbound)])

        route.extend(self.common_route)

        if outbound is None:
            route.extend(self.enroute_transitions.get(CATCH_ALL_TRANSITION, []))
        else:
            route.extend(self.enroute_transitions[outbound])
        return route

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'airport': self.airport,
            'runway_transitions': _groups_to_dict(self.runway_transitions),
            'common_route': [i.to_dict() for i in self.common_route],
            'enroute_transitions': _groups_to_dict(self.enroute_transitions),
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'SID':
        return cls(
            data['name'], data.get('airport'),
            _groups_from_dict(data.get('runway_transitions', {})),
            [Instruction.from_dict(i) for i in data.get('common_route', [])],
            _groups_from_dict(data.get('enroute_transitions', {})),
        )


class STAR(Procedure):
    """Arrival: enroute transition, common route, runway transition."""

    kind = 'STAR'

    def __init__(self, name: str, airport: Optional[str] = None,
                 enroute_transitions: Optional[InstructionGroups] = None,
                 common_route: Optional[List[Instruction]] = None,
                 runway_transitions: Optional[InstructionGroups] = None):
        super().__init__(name, airport)
        self.enroute_transitions = enroute_transitions or {}
        self.common_route = common_route or []
        self.runway_transitions = runway_transitions or {}

    @property
    def transitions(self) -> List[str]:
        return list(self.enroute_transitions) + list(self.runway_transitions)

    def select_route(self, inbound: Optional[str] = None, outbound: Optional[str] = None) -> List[Instruction]:
        """
        Legs from enroute ``inbound`` through the common route to runway ``outbound``.

        Raises:
            ResolutionError: If a named transition does not exist
        """
        if inbound is not None and inbound not in self.enroute_transitions:
            raise ResolutionError(f"Enroute transition {inbound} was not found.")
        runway_key = None if outbound is None else _runway_transition_key(self.runway_transitions, outbound)

        route: List[Instruction] = []
        if inbound is None:
            route.extend(self.enroute_transitions.get(CATCH_ALL_TRANSITION, []))
        else:
            route.extend(self.enroute_transitions[inbound])

        route.extend(self.common_route)

        if runway_key is None:
            route.extend(self.runway_transitions.get(CATCH_ALL_TRANSITION, []))
        else:
            route.extend(self.runway_transitions[runway_key])
        return route

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'airport': self.airport,
            'enroute_transitions': _groups_to_dict(self.enroute_transitions),
            'common_route': [i.to_dict() for i in self.common_route],
            'runway_transitions': _groups_to_dict(self.runway_transitions),
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'STAR':
        return cls(
            data['name'], data.get('airport'),
            _groups_from_dict(data.get('enroute_transitions', {})),
            [Instruction.from_dict(i) for i in data.get('common_route', [])],
            _groups_from_dict(data.get('runway_transitions', {})),
        )


class Approach(Procedure):
    """Instrument approach: an optional named transition followed by the common route."""

    kind = 'Approach'

    def __init__(self, name: str, airport: Optional[str] = None,
                 transitions: Optional[InstructionGroups] = None,
                 common_route: Optional[List[Instruction]] = None):
        super().__init__(name, airport)
        self.approach_transitions = transitions or {}
        self.common_route = common_route or []

    @property
    def transitions(self) -> List[str]:
        return list(self.approach_transitions)

    def select_route(self, inbound: Optional[str] = None, outbound: Optional[str] = None) -> List[Instruction]:
        """
        Legs of transition ``inbound`` (if any) followed by the common route.

        Raises:
            ResolutionError: If ``outbound`` is given or ``inbound`` is unknown
        """
        if outbound is not None:
            raise ResolutionError("Outbound transitions don't make sense for an approach.")

        route: List[Instruction] = []
        if inbound is not None:
            if inbound not in self.approach_transitions:
                raise ResolutionError(f"Approach transition {inbound} was not found.")
            route.extend(self.approach_transitions[inbound])

        route.extend(self.common_route)
        return route

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'name': self.name,
            'airport': self.airport,
            'transitions': _groups_to_dict(self.approach_transitions),
            'common_route': [i.to_dict() for i in self.common_route],
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Approach':
        return cls(
            data['name'], data.get('airport'),
            _groups_from_dict(data.get('transitions', {})),
            [Instruction.from_dict(i) for i in data.get('common_route', [])],
        )


_PROCEDURE_KINDS: Dict[Optional[str], Type[Procedure]] = {
    Procedure.kind: Procedure,
    SID.kind: SID,
    STAR.kind: STAR,
    Approach.kind: Approach,
}
