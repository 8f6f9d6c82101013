from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Any
import logging
import math

import pandas as pd

from .aerodrome import Aerodrome, Runway
from .airspace import Airspace, AirportMSA, GridMORA
from .altitude import AltitudeMSL
from .coordinate import Coordinate
from .enroute import Airway
from .navaid import Navaid
from .procedure import Procedure
from .procedure_collection import ProcedureCollection
from ..utils.fix_resolver import FixTable, add_fix, concretize

logger = logging.getLogger(__name__)


@dataclass
class CifpModel:
    """
    Everything loaded from one CIFP file.

    Entities are keyed the way they are looked up while flying procedures:
    fixes and navaids by identifier (identifiers are not unique worldwide,
    so each key holds every candidate), procedures by name, runways by
    airport.
    """

    moras: List[GridMORA] = field(default_factory=list)
    airspaces: List[Airspace] = field(default_factory=list)
    aerodromes: Dict[str, Aerodrome] = field(default_factory=dict)
    fixes: FixTable = field(default_factory=dict)
    navaids: Dict[str, Set[Navaid]] = field(default_factory=dict)
    airways: Dict[str, List[Airway]] = field(default_factory=dict)
    procedures: Dict[str, List[Procedure]] = field(default_factory=dict)
    runways: Dict[str, List[Runway]] = field(default_factory=dict)
    airport_msas: Dict[str, List[AirportMSA]] = field(default_factory=dict)

    @property
    def cycle(self) -> int:
        """AIRAC cycle of the data, taken as the newest aerodrome cycle."""
        return max((a.cycle for a in self.aerodromes.values()), default=0)

    @property
    def procedure_collection(self) -> ProcedureCollection:
        """
        Queryable collection of every procedure.

        Examples:
            model.procedure_collection.sids().by_airport('KATL').all()
        """
        return ProcedureCollection([p for group in self.procedures.values() for p in group])

    # ========================================================================
    # Registration
    # ========================================================================

    def add_fix(self, name: str, position: Coordinate) -> None:
        add_fix(self.fixes, name, position)

    def add_navaid(self, navaid: Navaid) -> None:
        self.navaids.setdefault(navaid.identifier, set()).add(navaid)
        self.add_fix(navaid.identifier, navaid.position)

    def add_aerodrome(self, aerodrome: Aerodrome) -> None:
        self.aerodromes[aerodrome.identifier] = aerodrome
        self.add_fix(aerodrome.identifier, aerodrome.location)

    def add_runway(self, runway: Runway) -> None:
        self.runways.setdefault(runway.airport, []).append(runway)
        self.add_fix(f"RW{runway.identifier}", runway.endpoint)
        self.add_fix(f"{runway.airport}/{runway.identifier}", runway.endpoint)

    def add_airway(self, airway: Airway) -> None:
        self.airways.setdefault(airway.identifier, []).append(airway)

    def add_procedure(self, procedure: Procedure) -> None:
        self.procedures.setdefault(procedure.name, []).append(procedure)

    def add_airport_msa(self, msa: AirportMSA) -> None:
        self.airport_msas.setdefault(msa.airport, []).append(msa)

    def merge(self, other: 'CifpModel') -> None:
        """
        Add every entity of ``other`` to this model.

        Aerodromes from ``other`` replace those with the same identifier;
        everything else is appended.
        """
        self.moras.extend(other.moras)
        self.airspaces.extend(other.airspaces)
        self.aerodromes.update(other.aerodromes)
        for name, positions in other.fixes.items():
            self.fixes.setdefault(name, set()).update(positions)
        for identifier, navaids in other.navaids.items():
            self.navaids.setdefault(identifier, set()).update(navaids)
        for target, source in ((self.airways, other.airways), (self.procedures, other.procedures),
                               (self.runways, other.runways), (self.airport_msas, other.airport_msas)):
            for key, values in source.items():
                target.setdefault(key, []).extend(values)
        logger.info(f"Merged model for cycle {other.cycle}: {len(other.aerodromes)} aerodromes, "
                    f"{sum(len(p) for p in other.procedures.values())} procedures")

    # ========================================================================
    # Lookups
    # ========================================================================

    def get_fix(self, name: str, reference: Optional[Coordinate] = None) -> Coordinate:
        """
        Resolve a fix name to one position.

        Raises:
            ResolutionError: If the name is unknown, or ambiguous without a reference
        """
        return concretize(self.fixes, name, reference_coordinate=reference)

    def get_navaids(self, identifier: str) -> List[Navaid]:
        return list(self.navaids.get(identifier.upper(), ()))

    def get_aerodrome(self, identifier: str) -> Optional[Aerodrome]:
        return self.aerodromes.get(identifier.upper())

    def get_runways(self, airport: str) -> List[Runway]:
        return list(self.runways.get(airport.upper(), []))

    def get_airways(self, identifier: str) -> List[Airway]:
        return list(self.airways.get(identifier.upper(), []))

    def get_procedures(self, name: str, airport: Optional[str] = None) -> List[Procedure]:
        """
        Procedures called ``name``, optionally restricted to one airport.

        Names such as ``RNAV`` approaches are reused by many airports, so
        ``airport`` is usually needed to get a single result.
        """
        procedures = self.procedures.get(name.upper(), [])
        if airport is not None:
            procedures = [p for p in procedures if p.airport == airport.upper()]
        return list(procedures)

    def airspaces_containing(self, point: Coordinate, altitude: AltitudeMSL) -> List[Airspace]:
        return [airspace for airspace in self.airspaces if airspace.contains(point, altitude)]

    def mora_at(self, point: Coordinate):
        """Grid MORA of the one-degree cell holding ``point``, or None if unknown."""
        for mora in self.moras:
            start = mora.start_position
            offset = math.floor(point.longitude - start.longitude)
            if start.latitude <= point.latitude < start.latitude + 1 and 0 <= offset < len(mora.mora):
                return mora.mora_at(offset)
        return None

    # ========================================================================
    # Reporting
    # ========================================================================

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the model.

        Returns:
            Dictionary with entity counts and the data cycle
        """
        procedure_types: Dict[str, int] = {}
        for procedure in self.procedure_collection:
            procedure_types[procedure.kind] = procedure_types.get(procedure.kind, 0) + 1

        return {
            'cycle': self.cycle,
            'total_moras': len(self.moras),
            'total_airspaces': len(self.airspaces),
            'total_aerodromes': len(self.aerodromes),
            'total_fixes': len(self.fixes),
            'total_navaids': sum(len(n) for n in self.navaids.values()),
            'total_airways': sum(len(a) for a in self.airways.values()),
            'total_procedures': sum(procedure_types.values()),
            'total_runways': sum(len(r) for r in self.runways.values()),
            'procedure_types': procedure_types,
        }

    def to_dataframe(self, kind: str) -> pd.DataFrame:
        """
        Tabular view of one entity kind.

        Args:
            kind: One of ``navaids``, ``aerodromes``, ``runways`` or ``fixes``

        Returns:
            DataFrame with one row per entity and latitude/longitude columns
        """
        if kind == 'navaids':
            rows = [{
                'identifier': n.identifier,
                'type': type(n).__name__,
                'name': n.name,
                'latitude': n.position.latitude,
                'longitude': n.position.longitude,
                'magnetic_variation': n.magnetic_variation,
            } for group in self.navaids.values() for n in group]
        elif kind == 'aerodromes':
            rows = [{
                'identifier': a.identifier,
                'type': type(a).__name__,
                'name': a.name,
                'latitude': a.location.latitude,
                'longitude': a.location.longitude,
                'elevation': a.elevation.feet,
                'magnetic_variation': a.magnetic_variation,
            } for a in self.aerodromes.values()]
        elif kind == 'runways':
            rows = [{
                'airport': r.airport,
                'identifier': r.identifier,
                'length': r.length,
                'width': r.width,
                'course': r.course.degrees,
                'latitude': r.endpoint.latitude,
                'longitude': r.endpoint.longitude,
            } for group in self.runways.values() for r in group]
        elif kind == 'fixes':
            rows = [{
                'name': name,
                'latitude': position.latitude,
                'longitude': position.longitude,
            } for name, positions in self.fixes.items() for position in positions]
        else:
            raise ValueError(f"Unknown entity kind: {kind}")

        return pd.DataFrame(rows)

    def __repr__(self):
        return (f"CifpModel(cycle={self.cycle}, aerodromes={len(self.aerodromes)}, "
                f"procedures={sum(len(p) for p in self.procedures.values())})")
