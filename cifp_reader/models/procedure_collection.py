"""
Queryable collection of assembled procedures.
"""

from typing import TYPE_CHECKING

from .queryable_collection import QueryableCollection

if TYPE_CHECKING:
    from .procedure import Procedure


class ProcedureCollection(QueryableCollection['Procedure']):
    """
    Procedures with CIFP-specific filters.

    Examples:
        # Departures from one airport
        collection.sids().by_airport('KATL')

        # Approaches offering a given transition
        collection.approaches().with_transition('CHINS')
    """

    def sids(self) -> 'ProcedureCollection':
        return self._of_kind('SID')

    def stars(self) -> 'ProcedureCollection':
        return self._of_kind('STAR')

    def approaches(self) -> 'ProcedureCollection':
        return self._of_kind('Approach')

    def _of_kind(self, kind: str) -> 'ProcedureCollection':
        return self.filter(lambda p: p.kind == kind)

    def by_airport(self, airport: str) -> 'ProcedureCollection':
        """
        Procedures published for ``airport``.

        Args:
            airport: Airport identifier, matched without regard to case
        """
        airport = airport.upper()
        return self.filter(lambda p: (p.airport or '').upper() == airport)

    def by_name(self, name: str) -> 'ProcedureCollection':
        name = name.upper()
        return self.filter(lambda p: p.name.upper() == name)

    def with_transition(self, transition: str) -> 'ProcedureCollection':
        """Procedures where ``select_route`` accepts ``transition`` by name."""
        return self.filter(lambda p: p.has_transition(transition))
