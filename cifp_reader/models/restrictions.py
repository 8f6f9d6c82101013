"""
Altitude and speed restrictions attached to procedure legs and airways.

``AltitudeRestriction.from_description`` decodes the ARINC 424 altitude
description character. The FAA distribution uses some codes irregularly;
each irregularity is handled by one of the named policies below rather
than folded into the general mapping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .altitude import Altitude, AltitudeMSL, MAX_ALTITUDE, MIN_ALTITUDE
from .validation import RecordFormatError

AT_OR_ABOVE = '+'
AT_OR_BELOW = '-'
AT = '@'
BETWEEN = 'B'

# Intercept altitude, given for information only
INTERCEPT = 'I'
# Glideslope intercept; the second altitude is a warning
ABOVE_GLIDESLOPE = 'G'
# Codes documented as "between" variants but also found with a single
# altitude where "at or above" was meant (KCOS, KILM)
LOOSE_BETWEEN_CODES = 'JHV'


def _drop_informational_altitude(description: str, alt2: Optional[Altitude]) -> Optional[Altitude]:
    if description in (INTERCEPT, ABOVE_GLIDESLOPE):
        return None
    return alt2


def _normalize_description(description: str, alt2: Optional[Altitude]) -> str:
    if description in LOOSE_BETWEEN_CODES and alt2 is None:
        return AT_OR_ABOVE
    if description == ' ' or description == INTERCEPT:
        return AT
    if description == ABOVE_GLIDESLOPE:
        return AT_OR_ABOVE
    if description in LOOSE_BETWEEN_CODES:
        return BETWEEN
    return description


def _reinterpret_two_altitudes(description: str, alt1: Altitude, alt2: Optional[Altitude]):
    """Handle at-or-above with two altitudes (KDTW) and at-or-below with a higher second altitude (KMEM)."""
    if description == AT_OR_ABOVE and alt2 is not None:
        if alt1 < alt2:
            return BETWEEN, alt1, alt2
        return AT_OR_ABOVE, alt1, None
    if description == AT_OR_BELOW and alt2 is not None and alt2 > alt1:
        return BETWEEN, alt1, alt2
    return description, alt1, alt2


@dataclass(frozen=True)
class AltitudeRestriction:
    minimum: Optional[Altitude] = None
    maximum: Optional[Altitude] = None

    @classmethod
    def unrestricted(cls) -> 'AltitudeRestriction':
        return cls(None, None)

    @property
    def is_unrestricted(self) -> bool:
        return self.minimum is None and self.maximum is None

    @classmethod
    def from_description(cls, description: str, alt1: Optional[Altitude],
                         alt2: Optional[Altitude]) -> 'AltitudeRestriction':
        """
        Decode a description code and up to two altitudes.

        Args:
            description: ARINC 424 altitude description character
            alt1: First altitude field
            alt2: Second altitude field

        Returns:
            The decoded restriction, unrestricted when no altitude is given

        Raises:
            RecordFormatError: If a between restriction lacks its second
                altitude, a single-sided restriction carries two, only the
                second altitude is present or the code is unknown
        """
        if alt1 is None and alt2 is None:
            return cls.unrestricted()
        if alt1 is None:
            raise RecordFormatError("Altitude restriction has a second altitude but no first altitude.")

        alt2 = _drop_informational_altitude(description, alt2)
        description = _normalize_description(description, alt2)
        description, alt1, alt2 = _reinterpret_two_altitudes(description, alt1, alt2)

        if description == BETWEEN and alt2 is None:
            raise RecordFormatError("Between altitude restrictions need two altitudes.")
        if description != BETWEEN and alt2 is not None:
            raise RecordFormatError("Single altitude restrictions should not be passed two altitudes.")

        if description == BETWEEN:
            return cls(alt1, alt2)
        if description == AT:
            return cls(alt1, alt1)
        if description == AT_OR_ABOVE:
            return cls(alt1, None)
        if description == AT_OR_BELOW:
            return cls(None, alt1)
        raise RecordFormatError(f"Unknown altitude description {description!r}.")

    def is_in_range(self, altitude: Altitude) -> bool:
        return (self.minimum or MIN_ALTITUDE) <= altitude <= (self.maximum or MAX_ALTITUDE)

    def __str__(self) -> str:
        text = ''
        if self.minimum is not None:
            text += f"\\{self.minimum.feet // 100} "
        if self.maximum is not None:
            text += f"{self.maximum.feet // 100}\\"
        text = text.strip()
        return text or 'Unrestricted'

    @classmethod
    def parse(cls, data: str) -> 'AltitudeRestriction':
        """Inverse of ``str()``; altitudes are read back as MSL."""
        if data == 'Unrestricted':
            return cls.unrestricted()
        parts = data.split()
        minimum = maximum = None
        if data.startswith('\\'):
            minimum = AltitudeMSL(int(parts[0][1:].rstrip('\\')) * 100)
        if data.endswith('\\'):
            maximum = AltitudeMSL(int(parts[-1][:-1].lstrip('\\')) * 100)
        return cls(minimum, maximum)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'minimum': None if self.minimum is None else self.minimum.to_dict(),
            'maximum': None if self.maximum is None else self.maximum.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AltitudeRestriction':
        minimum = data.get('minimum')
        maximum = data.get('maximum')
        return cls(
            None if minimum is None else Altitude.from_dict(minimum),
            None if maximum is None else Altitude.from_dict(maximum),
        )


@dataclass(frozen=True)
class SpeedRestriction:
    """Speed limits in knots."""

    minimum: Optional[int] = None
    maximum: Optional[int] = None

    @classmethod
    def unrestricted(cls) -> 'SpeedRestriction':
        return cls(None, None)

    @property
    def is_unrestricted(self) -> bool:
        return self.minimum is None and self.maximum is None

    def is_in_range(self, speed: int) -> bool:
        if self.minimum is not None and speed < self.minimum:
            return False
        if self.maximum is not None and speed > self.maximum:
            return False
        return True

    def __str__(self) -> str:
        text = ''
        if self.minimum is not None:
            text += f"\\{self.minimum}K "
        if self.maximum is not None:
            text += f"{self.maximum}K\\"
        text = text.strip()
        return text or 'Unrestricted'

    @classmethod
    def parse(cls, data: str) -> 'SpeedRestriction':
        if data == 'Unrestricted':
            return cls.unrestricted()
        parts = data.split()
        minimum = maximum = None
        if data.startswith('\\'):
            minimum = int(parts[0].strip('\\').rstrip('K'))
        if data.endswith('\\'):
            maximum = int(parts[-1].strip('\\').rstrip('K'))
        return cls(minimum, maximum)

    def to_dict(self) -> Dict[str, Any]:
        return {'minimum': self.minimum, 'maximum': self.maximum}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SpeedRestriction':
        return cls(data.get('minimum'), data.get('maximum'))
