"""
FAA Coded Instrument Flight Procedures (CIFP) reading library.

This package parses the fixed-column ARINC 424 records of the FAA CIFP
distribution and assembles them into airspaces, airways and instrument
procedures that can be queried and flown.

The main public API includes:
- CifpModel: Everything loaded from one CIFP file
- CifpFileParser: Whole-file loader producing a CifpModel and a LoadReport
- RecordParserFactory: Per-record parser registry
- CifpSource: Cached download of the FAA distribution
"""

from .models import CifpModel, LoadReport
from .parsers import CifpFileParser, RecordParserFactory
from .sources import CifpSource

__version__ = '0.1.0'
__all__ = [
    'CifpModel',
    'LoadReport',
    'CifpFileParser',
    'RecordParserFactory',
    'CifpSource',
]
