"""
Data models for the cifp_reader library.

This package contains the records read from a CIFP file, the assembled
airspaces, airways and procedures built from them, the guidance used to
fly procedure legs, and the ``CifpModel`` holding everything loaded.
"""

from .altitude import Altitude, AltitudeAGL, AltitudeMSL, FlightLevel
from .coordinate import Coordinate
from .course import Course, MagneticCourse, TrueCourse
from .path_termination import PathTermination
from .restrictions import AltitudeRestriction, SpeedRestriction
from .record import RecordLine
from .navaid import DME, ILS, NDB, VOR, Navaid, NavaidClass, NavaidILS
from .aerodrome import Aerodrome, Airport, Heliport, Runway
from .enroute import Airway, AirwayFix, AirwayFixLine, PathPoint, Waypoint
from .airspace import (
    Airspace, AirportMSA, BoundaryArc, BoundaryCircle, BoundaryLine, BoundaryRhumbLine, BoundaryVia,
    ControlledAirspace, GridMORA, MSASector, RestrictiveAirspace,
)
from .guidance import Arc, Racetrack, Radial
from .procedure import (
    STAR, SID, Approach, ApproachLine, Instruction, Procedure, ProcedureLine, SIDLine, STARLine,
)
from .procedure_builder import ProcedureBuilder
from .queryable_collection import QueryableCollection
from .procedure_collection import ProcedureCollection
from .cifp_model import CifpModel
from .validation import (
    CifpError, GeometryError, GuidanceError, LoadReport, ModelValidationError, RecordFormatError,
    ResolutionError, ValidationError, ValidationResult,
)

__all__ = [
    # Primitives
    'Altitude',
    'AltitudeAGL',
    'AltitudeMSL',
    'FlightLevel',
    'Coordinate',
    'Course',
    'MagneticCourse',
    'TrueCourse',
    'PathTermination',
    'AltitudeRestriction',
    'SpeedRestriction',
    # Records
    'RecordLine',
    'Navaid',
    'NavaidClass',
    'NDB',
    'VOR',
    'DME',
    'NavaidILS',
    'ILS',
    'Aerodrome',
    'Airport',
    'Heliport',
    'Runway',
    'Waypoint',
    'PathPoint',
    'AirwayFixLine',
    'GridMORA',
    'ControlledAirspace',
    'RestrictiveAirspace',
    'AirportMSA',
    'MSASector',
    'BoundaryVia',
    'BoundaryLine',
    'BoundaryRhumbLine',
    'BoundaryCircle',
    'BoundaryArc',
    'ProcedureLine',
    'SIDLine',
    'STARLine',
    'ApproachLine',
    # Assembled
    'Airspace',
    'Airway',
    'AirwayFix',
    'Radial',
    'Arc',
    'Racetrack',
    'Instruction',
    'Procedure',
    'SID',
    'STAR',
    'Approach',
    'ProcedureBuilder',
    'CifpModel',
    # Queryable collections
    'QueryableCollection',
    'ProcedureCollection',
    # Errors
    'CifpError',
    'RecordFormatError',
    'ResolutionError',
    'GeometryError',
    'GuidanceError',
    'ValidationResult',
    'ValidationError',
    'ModelValidationError',
    'LoadReport',
]
