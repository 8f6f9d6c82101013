from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..models.altitude import AltitudeMSL, FlightLevel
from ..models.coordinate import Coordinate
from ..models.record import RecordLine
from ..models.validation import RecordFormatError

RECORD_LENGTH = 132


class RecordParser(ABC):
    """
    Base interface for fixed-column CIFP record parsers.

    Columns are 0-based and ranges are half-open, so ``check(line, 4, 6, 'UC')``
    compares ``line[4:6]``. Every helper raises ``RecordFormatError`` naming
    the first column of the failed field.
    """

    @abstractmethod
    def parse(self, line: str) -> Optional[RecordLine]:
        """
        Parse one 132 column record.

        Args:
            line: Raw record line without its line terminator

        Returns:
            The parsed record, or None for a recognised but unsupported shape

        Raises:
            RecordFormatError: If a column does not hold what the layout requires
        """
        pass

    @staticmethod
    def fail(column: int, line: Optional[str] = None) -> None:
        raise RecordFormatError.at_column(column, line)

    @classmethod
    def check(cls, line: str, start: int, end: int, *expected: str) -> None:
        if line[start:end] not in expected:
            cls.fail(start, line)

    @classmethod
    def check_empty(cls, line: str, start: int, end: int) -> None:
        cls.check(line, start, end, ' ' * (end - start))

    @staticmethod
    def is_blank(line: str, start: int, end: int) -> bool:
        return not line[start:end].strip()

    @classmethod
    def parse_int(cls, line: str, start: int, end: int) -> int:
        try:
            return int(line[start:end])
        except ValueError:
            raise RecordFormatError.at_column(start, line) from None

    @classmethod
    def parse_decimal(cls, line: str, start: int, end: int, scale: float = 1) -> float:
        """Read a numeric field with an implied decimal point, dividing by ``scale``."""
        try:
            return float(line[start:end]) / scale
        except ValueError:
            raise RecordFormatError.at_column(start, line) from None

    @classmethod
    def parse_optional_decimal(cls, line: str, start: int, end: int, scale: float = 1) -> Optional[float]:
        if cls.is_blank(line, start, end):
            return None
        return cls.parse_decimal(line, start, end, scale)

    @classmethod
    def parse_coordinate(cls, line: str, start: int, end: int) -> Coordinate:
        try:
            return Coordinate.from_dms(line[start:end])
        except RecordFormatError:
            raise RecordFormatError.at_column(start, line) from None

    @classmethod
    def parse_variation(cls, line: str, hemisphere: int, start: int, end: int, scale: float = 10) -> float:
        """Magnetic variation in degrees, west positive; ``hemisphere`` holds ``E`` or ``W``."""
        variation = cls.parse_decimal(line, start, end, scale)
        return -variation if line[hemisphere] == 'E' else variation

    @classmethod
    def parse_altitude(cls, line: str, start: int, end: int) -> Optional[AltitudeMSL]:
        """Five column altitude: blank, feet, or ``FLnnn``."""
        data = line[start:end]
        if not data.strip():
            return None
        if data.startswith('FL'):
            return FlightLevel(cls.parse_int(line, start + 2, end))
        return AltitudeMSL(cls.parse_int(line, start, end))

    @classmethod
    def frn_and_cycle(cls, line: str) -> Tuple[int, int]:
        """File record number and AIRAC cycle that close every record."""
        return cls.parse_int(line, 123, 128), cls.parse_int(line, 128, 132)
