from .base import RecordParser, RECORD_LENGTH
from .record_factory import RecordParserFactory, section_code
from .aerodrome import AirportParser, HeliportParser, RunwayParser
from .airspace import AirportMSAParser, ControlledAirspaceParser, GridMORAParser, RestrictiveAirspaceParser
from .enroute import AirwayFixParser, PathPointParser, WaypointParser
from .navaid import ILSParser, NDBParser, VHFNavaidParser
from .procedure import ApproachParser, SIDParser, STARParser
from .cursor import LineCursor
from .cifp_file import CifpFileParser

# Airspace
RecordParserFactory.register_parser('AS', GridMORAParser)
RecordParserFactory.register_parser('UC', ControlledAirspaceParser)
RecordParserFactory.register_parser('UR', RestrictiveAirspaceParser)

# Navaids
RecordParserFactory.register_parser('D ', VHFNavaidParser)
RecordParserFactory.register_parser('DB', NDBParser)
RecordParserFactory.register_parser('PN', NDBParser)
RecordParserFactory.register_parser('PI', ILSParser)

# Enroute and terminal fixes
RecordParserFactory.register_parser('EA', WaypointParser)
RecordParserFactory.register_parser('PC', WaypointParser)
RecordParserFactory.register_parser('ER', AirwayFixParser)
RecordParserFactory.register_parser('PP', PathPointParser)

# Aerodromes
RecordParserFactory.register_parser('PA', AirportParser)
RecordParserFactory.register_parser('HA', HeliportParser)
RecordParserFactory.register_parser('PG', RunwayParser)
RecordParserFactory.register_parser('PS', AirportMSAParser)

# Procedures
RecordParserFactory.register_parser('PD', SIDParser)
RecordParserFactory.register_parser('PE', STARParser)
RecordParserFactory.register_parser('PF', ApproachParser)

__all__ = [
    'RecordParser',
    'RECORD_LENGTH',
    'RecordParserFactory',
    'section_code',
    'LineCursor',
    'CifpFileParser',
    'GridMORAParser',
    'ControlledAirspaceParser',
    'RestrictiveAirspaceParser',
    'AirportMSAParser',
    'VHFNavaidParser',
    'NDBParser',
    'ILSParser',
    'WaypointParser',
    'AirwayFixParser',
    'PathPointParser',
    'AirportParser',
    'HeliportParser',
    'RunwayParser',
    'SIDParser',
    'STARParser',
    'ApproachParser',
]
