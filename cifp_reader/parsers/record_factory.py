import logging
from typing import Dict, Type, List, Optional

from .base import RecordParser, RECORD_LENGTH
from ..models.record import RecordLine
from ..models.validation import RecordFormatError

logger = logging.getLogger(__name__)

_AIRSPACE_SUBSECTIONS = {'S': 'AS', 'C': 'UC', 'R': 'UR'}
_ENROUTE_SUBSECTIONS = {'A': 'EA', 'R': 'ER'}
# Airport and heliport subsections read from column 12; heliport variants
# share the airport parser where the record layout allows it
_AIRPORT_SUBSECTIONS = {
    ('P', 'A'): 'PA',
    ('P', 'G'): 'PG',
    ('H', 'A'): 'HA',
    ('P', 'D'): 'PD',
    ('P', 'E'): 'PE',
    ('P', 'F'): 'PF',
    ('H', 'F'): 'PF',
    ('P', 'C'): 'PC',
    ('H', 'C'): 'PC',
    ('P', 'P'): 'PP',
    ('P', 'S'): 'PS',
    ('H', 'S'): 'PS',
    ('P', 'I'): 'PI',
}


def section_code(line: str) -> Optional[str]:
    """
    Section code a record is dispatched on, or None for an unsupported section.

    Examples:
        >>> section_code('SUSADB       UAD   K2002630H MW N36292727W121282967 ...')
        'DB'
    """
    if len(line) < 13:
        return None

    family = line[4]
    if family in 'AU':
        return _AIRSPACE_SUBSECTIONS.get(line[5])
    if family == 'D':
        if line[5] == 'B':
            return 'DB'
        return 'D ' if line[5] == ' ' else None
    if family == 'E':
        return _ENROUTE_SUBSECTIONS.get(line[5])
    if family in 'PH':
        code = _AIRPORT_SUBSECTIONS.get((family, line[12]))
        if code is None and family == 'P' and line[5] == 'N':
            return 'PN'
        return code
    return None


class RecordParserFactory:
    """Factory for record parsers keyed by section code."""

    _parsers: Dict[str, Type[RecordParser]] = {}

    @classmethod
    def register_parser(cls, section: str, parser_class: Type[RecordParser]) -> None:
        """
        Register a parser for a section code.

        Args:
            section: Two character section code (e.g. 'UC', 'PD')
            parser_class: Parser class to register
        """
        cls._parsers[section] = parser_class

    @classmethod
    def get_parser(cls, section: str) -> RecordParser:
        """
        Get a parser for a section code.

        Raises:
            ValueError: If no parser is registered for the section
        """
        parser_class = cls._parsers.get(section)
        if parser_class is None:
            raise ValueError(f"No parser registered for section: {section!r}")
        return parser_class()

    @classmethod
    def get_supported_sections(cls) -> List[str]:
        return list(cls._parsers.keys())

    @classmethod
    def parse_line(cls, line: str) -> Optional[RecordLine]:
        """
        Parse one line of a CIFP file.

        Returns:
            The parsed record, or None for header lines, unsupported sections
            and unsupported record shapes

        Raises:
            RecordFormatError: If the record belongs to a supported section
                but does not match its layout
        """
        line = line.rstrip('\r\n')
        if line.startswith('HDR'):
            return None

        section = section_code(line)
        if section is None or section not in cls._parsers:
            return None
        if len(line) < RECORD_LENGTH:
            raise RecordFormatError.at_column(len(line), line)

        logger.debug(f"Parsing {section!r} record {line[123:128]}")
        return cls.get_parser(section).parse(line)
