"""
AIRAC cycle utilities.

CIFP records close with a four digit cycle (``YYNN``): the two digit year
and the number of the AIRAC effective date within that year, starting at 01.
Effective dates follow a 28 day cycle and always fall on Thursdays.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

DateLike = Union[str, datetime]


class AIRACDateCalculator:
    """
    Convert between AIRAC cycles and effective dates.

    Args:
        reference_airac_date: Any known AIRAC effective date in YYYY-MM-DD format

    Raises:
        ValueError: If the reference date is invalid or not a Thursday
    """

    AIRAC_CYCLE_DAYS = 28
    THURSDAY_WEEKDAY = 3

    def __init__(self, reference_airac_date: str = '2025-10-02'):
        self.reference_date = self._parse_date(reference_airac_date)
        if self.reference_date.weekday() != self.THURSDAY_WEEKDAY:
            raise ValueError(f"Reference AIRAC date must be a Thursday, but "
                             f"{self.reference_date.strftime('%Y-%m-%d')} is a {self.reference_date.strftime('%A')}")

    @staticmethod
    def _parse_date(date: DateLike) -> datetime:
        if isinstance(date, datetime):
            return date
        try:
            return datetime.strptime(date, '%Y-%m-%d')
        except ValueError:
            raise ValueError(f"Invalid date format: {date}. Expected YYYY-MM-DD") from None

    def _effective(self, date: datetime) -> datetime:
        """Most recent AIRAC date on or before ``date``."""
        cycles = (date - self.reference_date).days // self.AIRAC_CYCLE_DAYS
        return self.reference_date + timedelta(days=cycles * self.AIRAC_CYCLE_DAYS)

    def _first_of_year(self, year: int) -> datetime:
        first = self._effective(datetime(year, 1, 1))
        if first.year < year:
            first += timedelta(days=self.AIRAC_CYCLE_DAYS)
        return first

    def is_airac_date(self, date: DateLike) -> bool:
        date = self._parse_date(date)
        return (date - self.reference_date).days % self.AIRAC_CYCLE_DAYS == 0

    def current_airac_date(self, from_date: Optional[DateLike] = None) -> str:
        """
        Effective AIRAC date on ``from_date`` (defaults to today).

        Returns:
            AIRAC date in YYYY-MM-DD format
        """
        date = datetime.now() if from_date is None else self._parse_date(from_date)
        return self._effective(date).strftime('%Y-%m-%d')

    def next_airac_date(self, from_date: Optional[DateLike] = None) -> str:
        """First AIRAC date strictly after ``from_date`` (defaults to today)."""
        date = datetime.now() if from_date is None else self._parse_date(from_date)
        return (self._effective(date) + timedelta(days=self.AIRAC_CYCLE_DAYS)).strftime('%Y-%m-%d')

    def cycle_to_date(self, cycle: Union[str, int]) -> str:
        """
        Effective date of a ``YYNN`` cycle.

        Examples:
            >>> AIRACDateCalculator().cycle_to_date('2510')
            '2025-10-02'

        Raises:
            ValueError: If the cycle is malformed or its number is past the
                last cycle of the year
        """
        text = str(cycle).zfill(4)
        if len(text) != 4 or not text.isdigit() or text[2:] == '00':
            raise ValueError(f"Invalid AIRAC cycle: {cycle}")

        year = 2000 + int(text[:2])
        date = self._first_of_year(year) + timedelta(days=(int(text[2:]) - 1) * self.AIRAC_CYCLE_DAYS)
        if date.year != year:
            raise ValueError(f"AIRAC cycle {cycle} does not exist; {year} has fewer cycles")
        return date.strftime('%Y-%m-%d')

    def date_to_cycle(self, date: Optional[DateLike] = None) -> str:
        """
        ``YYNN`` cycle effective on ``date`` (defaults to today).

        Examples:
            >>> AIRACDateCalculator().date_to_cycle('2025-10-15')
            '2510'
        """
        effective = self._parse_date(self.current_airac_date(date))
        number = (effective - self._first_of_year(effective.year)).days // self.AIRAC_CYCLE_DAYS + 1
        return f"{effective.year % 100:02d}{number:02d}"


def cycle_to_date(cycle: Union[str, int], reference_date: str = '2025-10-02') -> str:
    """Effective date of a ``YYNN`` cycle using a default reference."""
    return AIRACDateCalculator(reference_date).cycle_to_date(cycle)


def date_to_cycle(date: Optional[DateLike] = None, reference_date: str = '2025-10-02') -> str:
    """``YYNN`` cycle effective on ``date`` using a default reference."""
    return AIRACDateCalculator(reference_date).date_to_cycle(date)
