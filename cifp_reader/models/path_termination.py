from enum import IntFlag

from .validation import RecordFormatError


class PathTermination(IntFlag):
    """
    How a procedure leg ends combined with how it is flown.

    The low bits describe the termination, the next bits the via, and
    HOLD marks a holding pattern.
    """

    # Termination
    UNTIL_CROSSING = 1
    UNTIL_ALTITUDE = 1 << 1
    UNTIL_DISTANCE = 1 << 2
    UNTIL_INTERCEPT = 1 << 3
    UNTIL_RADIAL = 1 << 4
    FOR_DISTANCE = 1 << 5
    UNTIL_TERMINATED = 1 << 6

    # Via
    HEADING = 1 << 7
    TRACK = 1 << 8
    COURSE = 1 << 9
    ARC = 1 << 10
    PROCEDURE_TURN = 1 << 11
    DIRECT = 1 << 12

    HOLD = 1 << 13

    @classmethod
    def from_code(cls, code: str) -> 'PathTermination':
        """
        Decode a two letter ARINC 424 path and terminator code.

        Raises:
            RecordFormatError: If the code is not one of the supported leg types
        """
        try:
            return _CODES[code]
        except KeyError:
            raise RecordFormatError(f"Unsupported path termination {code!r}.") from None

    @property
    def termination(self) -> 'PathTermination':
        return self & _TERMINATION_MASK

    @property
    def via(self) -> 'PathTermination':
        return self & ~_TERMINATION_MASK

    def has(self, flag: 'PathTermination') -> bool:
        return (self & flag) == flag


_TERMINATION_MASK = PathTermination((1 << 7) - 1)

_CODES = {
    'IF': PathTermination.UNTIL_CROSSING | PathTermination.DIRECT,  # initial fix
    'TF': PathTermination.UNTIL_CROSSING | PathTermination.DIRECT,  # track to a fix
    'CF': PathTermination.UNTIL_CROSSING | PathTermination.COURSE,
    'DF': PathTermination.UNTIL_CROSSING | PathTermination.DIRECT,
    'FA': PathTermination.UNTIL_ALTITUDE | PathTermination.DIRECT,
    'FC': PathTermination.FOR_DISTANCE | PathTermination.TRACK,
    'FD': PathTermination.UNTIL_DISTANCE | PathTermination.TRACK,
    'FM': PathTermination.UNTIL_TERMINATED | PathTermination.TRACK,
    'CA': PathTermination.UNTIL_ALTITUDE | PathTermination.COURSE,
    'CD': PathTermination.UNTIL_DISTANCE | PathTermination.COURSE,
    'CI': PathTermination.UNTIL_INTERCEPT | PathTermination.COURSE,
    'CR': PathTermination.UNTIL_RADIAL | PathTermination.COURSE,
    'RF': PathTermination.FOR_DISTANCE | PathTermination.ARC,  # constant radius arc
    'AF': PathTermination.UNTIL_CROSSING | PathTermination.ARC,  # arc to a fix
    'VA': PathTermination.UNTIL_ALTITUDE | PathTermination.HEADING,
    'VD': PathTermination.UNTIL_DISTANCE | PathTermination.HEADING,
    'VI': PathTermination.UNTIL_INTERCEPT | PathTermination.HEADING,
    'VM': PathTermination.UNTIL_TERMINATED | PathTermination.HEADING,
    'VR': PathTermination.UNTIL_RADIAL | PathTermination.HEADING,
    'HA': PathTermination.UNTIL_ALTITUDE | PathTermination.HOLD,
    'HF': PathTermination.UNTIL_CROSSING | PathTermination.HOLD,
    'HM': PathTermination.UNTIL_TERMINATED | PathTermination.HOLD,
    'PI': PathTermination.UNTIL_INTERCEPT | PathTermination.PROCEDURE_TURN,
}
