"""
Sequential access to the lines of a CIFP file with one line of lookahead.

Records that belong together (the segments of one airspace, the fixes of
one airway, the legs of consecutive procedures) are stored on consecutive
lines. The loader reads the first record of such a run, then keeps taking
lines while they parse and still belong to the run. The first line that
does not is left in place for the main loop to read again.
"""

from typing import Callable, List, Optional, Sequence

from ..models.airspace import ControlledAirspace
from ..models.enroute import AirwayFixLine
from ..models.procedure import ProcedureLine
from ..models.record import RecordLine
from ..models.validation import CifpError

SameGroup = Callable[[RecordLine, RecordLine], bool]


def same_airspace(head: ControlledAirspace, candidate: RecordLine) -> bool:
    """Segments of one airspace share its center and multiple code."""
    return (isinstance(candidate, ControlledAirspace)
            and candidate.center == head.center
            and candidate.multiple_code == head.multiple_code)


def same_airway(previous: AirwayFixLine, candidate: RecordLine) -> bool:
    """
    Fixes of one airway share its identifier and climb in sequence number.

    A sequence number that does not increase starts another airway with
    the same identifier.
    """
    return (isinstance(candidate, AirwayFixLine)
            and candidate.airway_identifier == previous.airway_identifier
            and candidate.sequence_number > previous.sequence_number)


def same_procedure_kind(previous: ProcedureLine, candidate: RecordLine) -> bool:
    """Any leg of the same procedure kind; legs are grouped by procedure later."""
    return type(candidate) is type(previous)


class LineCursor:
    """
    Cursor over the lines of a file.

    Args:
        lines: Lines of the file, with or without line terminators
    """

    def __init__(self, lines: Sequence[str]):
        self.lines = [line.rstrip('\r\n') for line in lines]
        self.position = 0

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.lines)

    def peek(self) -> Optional[str]:
        """The next line without consuming it, or None at the end."""
        if self.at_end:
            return None
        return self.lines[self.position]

    def advance(self) -> str:
        """
        Consume and return the next line.

        Raises:
            StopIteration: If the cursor is at the end
        """
        if self.at_end:
            raise StopIteration
        line = self.lines[self.position]
        self.position += 1
        return line

    def consume_while(self, parse: Callable[[str], Optional[RecordLine]], same_group: SameGroup,
                      head: RecordLine) -> List[RecordLine]:
        """
        Take the run of records that continues ``head``.

        Each candidate is compared with the last record taken. A line that
        fails to parse, parses to nothing or starts another group ends the
        run without being consumed.

        Returns:
            ``head`` followed by the records taken
        """
        group = [head]
        while not self.at_end:
            try:
                record = parse(self.peek())
            except CifpError:
                break
            if record is None or not same_group(group[-1], record):
                break
            group.append(record)
            self.advance()
        return group

    def __len__(self) -> int:
        return len(self.lines)
