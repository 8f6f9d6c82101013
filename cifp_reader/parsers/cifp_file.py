"""
Whole-file loader for the FAA CIFP distribution.

The file is read in one sequential pass. Self-contained records (navaids,
waypoints, aerodromes, runways) go straight into the model; runs of
airspace segments, airway fixes and procedure legs are collected and
assembled in a second pass, once every fix they refer to is known.

A group that cannot be read or assembled is skipped on its own: the
failure is logged, recorded in the ``LoadReport`` and the rest of the file
is still loaded.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .cursor import LineCursor, same_airspace, same_airway, same_procedure_kind
from .record_factory import RecordParserFactory, section_code
from ..models.aerodrome import Aerodrome, Runway
from ..models.airspace import AirportMSA, Airspace, BoundaryRhumbLine, ControlledAirspace, GridMORA, RestrictiveAirspace
from ..models.cifp_model import CifpModel
from ..models.enroute import Airway, AirwayFixLine, PathPoint, Waypoint
from ..models.navaid import Navaid
from ..models.procedure import ProcedureLine
from ..models.procedure_builder import ProcedureBuilder, group_procedure_lines
from ..models.validation import CifpError, LoadReport, ModelValidationError

logger = logging.getLogger(__name__)

AIRSPACE = 'airspace'
AIRWAY = 'airway'
PROCEDURE = 'procedure'
RECORD = 'record'

PROCEDURE_SECTIONS = ('PD', 'PE', 'PF')


def _group_key(section: str, line: str, airway_runs: 'AirwayRuns') -> Tuple[str, str]:
    """Kind and key of the group a raw line belongs to, for error reporting."""
    if section == 'UC':
        return AIRSPACE, line[9:14].rstrip() + line[19]
    if section == 'ER':
        return AIRWAY, airway_runs.label_failed_line(line)
    if section in PROCEDURE_SECTIONS:
        return PROCEDURE, _procedure_key(section, line[6:10].strip(), line[13:19].strip())
    return RECORD, line[123:128]


def _procedure_key(header: str, airport: str, name: str) -> str:
    return f"{header}/{airport}/{name}"


class AirwayRuns:
    """
    Airway fix runs in file order, each labelled ``client/identifier#n``.

    The same identifier can be published as several runs, each restarting
    its sequence numbers. A line that fails to parse splits its run in two;
    the lines after it that keep climbing in sequence share its label.
    """

    def __init__(self):
        self.runs: List[Tuple[str, List[AirwayFixLine]]] = []
        self._counts: Dict[str, int] = {}
        self._tail: Optional[Tuple[str, int]] = None

    def _label(self, base: str, sequence: Optional[int]) -> str:
        continues = (self._tail is not None and self._tail[0] == base
                     and (sequence is None or sequence > self._tail[1]))
        if not continues:
            self._counts[base] = self._counts.get(base, 0) + 1
        return f"{base}#{self._counts[base]}"

    def add_run(self, fixes: List[AirwayFixLine]) -> str:
        head = fixes[0]
        base = f"{head.client}/{head.airway_identifier}"
        label = self._label(base, head.sequence_number)
        self.runs.append((label, fixes))
        self._tail = (base, fixes[-1].sequence_number)
        return label

    def label_failed_line(self, line: str) -> str:
        base = f"{line[1:4]}/{line[13:18].rstrip()}"
        sequence = int(line[25:29]) if line[25:29].isdigit() else None
        label = self._label(base, sequence)
        if sequence is not None:
            self._tail = (base, sequence)
        elif self._tail is None or self._tail[0] != base:
            self._tail = (base, 0)
        return label


class CifpFileParser:
    """
    Parser turning the lines of a CIFP file into a ``CifpModel``.

    Args:
        strict: Raise ``ModelValidationError`` after the load when any group
            was skipped because of an error
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def parse_file(self, path: Union[str, Path]) -> Tuple[CifpModel, LoadReport]:
        path = Path(path)
        logger.info(f"Loading CIFP file {path}")
        with open(path, 'r', encoding='ascii', errors='replace') as f:
            return self.parse(f.readlines())

    def parse(self, lines: Iterable[str]) -> Tuple[CifpModel, LoadReport]:
        """
        Load every supported record of a file.

        Args:
            lines: Lines of the file in file order

        Returns:
            The loaded model and the report of what was read and skipped

        Raises:
            ModelValidationError: In strict mode, if any group was skipped
                because of an error
        """
        cursor = LineCursor(list(lines))
        model = CifpModel()
        report = LoadReport(lines_read=len(cursor))
        poisoned: Dict[str, Set[str]] = {AIRSPACE: set(), AIRWAY: set(), PROCEDURE: set(), RECORD: set()}

        airspace_segments: Dict[str, List[ControlledAirspace]] = {}
        airway_runs = AirwayRuns()
        procedure_lines: List[ProcedureLine] = []

        while not cursor.at_end:
            line = cursor.advance()
            try:
                record = RecordParserFactory.parse_line(line)
            except CifpError as e:
                kind, key = _group_key(section_code(line), line, airway_runs)
                logger.warning(f"Skipping {kind} {key}: {e}")
                if key not in poisoned[kind]:
                    report.add_skip(kind, key, e)
                poisoned[kind].add(key)
                continue
            if record is None:
                continue
            report.records_parsed += 1

            if isinstance(record, GridMORA):
                model.moras.append(record)
            elif isinstance(record, ControlledAirspace):
                segments = cursor.consume_while(RecordParserFactory.parse_line, same_airspace, record)
                report.records_parsed += len(segments) - 1
                key = record.center + record.multiple_code
                airspace_segments.setdefault(key, []).extend(segments)
            elif isinstance(record, RestrictiveAirspace):
                continue
            elif isinstance(record, Navaid):
                model.add_navaid(record)
            elif isinstance(record, ProcedureLine):
                legs = cursor.consume_while(RecordParserFactory.parse_line, same_procedure_kind, record)
                report.records_parsed += len(legs) - 1
                procedure_lines.extend(legs)
            elif isinstance(record, Waypoint):
                model.add_fix(record.identifier, record.position)
            elif isinstance(record, PathPoint):
                model.add_fix(record.runway, record.position)
                model.add_fix(f"{record.airport}/{record.runway}", record.position)
            elif isinstance(record, AirwayFixLine):
                fixes = cursor.consume_while(RecordParserFactory.parse_line, same_airway, record)
                report.records_parsed += len(fixes) - 1
                airway_runs.add_run(fixes)
            elif isinstance(record, Aerodrome):
                model.add_aerodrome(record)
            elif isinstance(record, Runway):
                model.add_runway(record)
            elif isinstance(record, AirportMSA):
                model.add_airport_msa(record)
            else:
                raise TypeError(f"No handler for record type {type(record).__name__}")

        logger.info(f"Read {report.lines_read} lines, parsed {report.records_parsed} records")

        self._assemble_airspaces(model, report, airspace_segments, poisoned[AIRSPACE])
        self._assemble_airways(model, report, airway_runs.runs, poisoned[AIRWAY])
        self._assemble_procedures(model, report, procedure_lines, poisoned[PROCEDURE])

        logger.info(f"Loaded {model}")
        if self.strict and not report.is_valid:
            raise ModelValidationError("CIFP load skipped groups because of errors", report)
        return model, report

    def _assemble_airspaces(self, model: CifpModel, report: LoadReport,
                            groups: Dict[str, List[ControlledAirspace]], poisoned: Set[str]) -> None:
        for key, segments in groups.items():
            if key in poisoned:
                continue
            if any(isinstance(s.boundary, BoundaryRhumbLine) for s in segments):
                logger.info(f"Skipping airspace {key}: rhumb line boundaries are not supported")
                report.add_warning(f"{AIRSPACE}:{key}: rhumb line boundary")
                continue
            try:
                model.airspaces.append(Airspace(segments))
            except CifpError as e:
                logger.warning(f"Skipping airspace {key}: {e}")
                report.add_skip(AIRSPACE, key, e)

    def _assemble_airways(self, model: CifpModel, report: LoadReport,
                          runs: List[Tuple[str, List[AirwayFixLine]]], poisoned: Set[str]) -> None:
        for label, run in runs:
            if label in poisoned:
                continue
            try:
                model.add_airway(Airway.from_lines(run[0].airway_identifier, run, model.fixes))
            except CifpError as e:
                logger.warning(f"Skipping airway {label}: {e}")
                report.add_skip(AIRWAY, label, e)

    def _assemble_procedures(self, model: CifpModel, report: LoadReport,
                             lines: List[ProcedureLine], poisoned: Set[str]) -> None:
        builder = ProcedureBuilder(model.fixes, model.navaids, model.aerodromes)
        for (header, airport, name), legs in group_procedure_lines(lines).items():
            key = _procedure_key(header, airport, name)
            if key in poisoned:
                continue
            try:
                model.add_procedure(builder.build(legs))
            except CifpError as e:
                logger.warning(f"Skipping procedure {airport} {name}: {e}")
                report.add_skip(PROCEDURE, key, e)
