from typing import List, Type, TypeVar, Any, Dict, Union
import json
import logging
from pathlib import Path

from .aerodrome import Aerodrome, Runway
from .airspace import AirportMSA, GridMORA
from .cifp_model import CifpModel
from .coordinate import Coordinate
from .enroute import Airway
from .navaid import Navaid
from .procedure import Procedure

logger = logging.getLogger(__name__)

T = TypeVar('T')

MORA_FILE = 'mora.json'
AERODROME_FILE = 'aerodrome.json'
FIX_FILE = 'fix.json'
NAVAID_FILE = 'navaid.json'
AIRWAY_FILE = 'airway.json'
PROCEDURE_FILE = 'procedure.json'
RUNWAY_FILE = 'runway.json'
MSA_FILE = 'msa.json'


class PersistenceManager:
    """
    Manager for persisting a loaded model as a directory of JSON files.

    Airport MSAs are written with the other records. Airspace geometry is
    not written; a model loaded back from disk has no airspaces and must be
    re-parsed from the source file if containment queries are needed.
    """

    @staticmethod
    def save_json(data: List[Any], filepath: Union[str, Path]) -> None:
        """Save data to JSON file."""
        with open(filepath, 'w') as f:
            json.dump([item.to_dict() for item in data], f, indent=2)

    @staticmethod
    def load_json(filepath: Union[str, Path], cls: Type[T]) -> List[T]:
        """Load data from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return [cls.from_dict(item) for item in data]

    @classmethod
    def save_model(cls, model: CifpModel, directory: Union[str, Path]) -> None:
        """
        Write every persisted entity kind of ``model`` into ``directory``.

        Args:
            model: Model to save
            directory: Target directory, created if missing
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        cls.save_json(model.moras, directory / MORA_FILE)
        cls.save_json(list(model.aerodromes.values()), directory / AERODROME_FILE)
        cls.save_json([n for group in model.navaids.values() for n in group], directory / NAVAID_FILE)
        cls.save_json([a for group in model.airways.values() for a in group], directory / AIRWAY_FILE)
        cls.save_json(list(model.procedure_collection), directory / PROCEDURE_FILE)
        cls.save_json([r for group in model.runways.values() for r in group], directory / RUNWAY_FILE)
        cls.save_json([m for group in model.airport_msas.values() for m in group], directory / MSA_FILE)

        fixes: Dict[str, List[List[float]]] = {
            name: [position.to_dict() for position in positions] for name, positions in model.fixes.items()
        }
        with open(directory / FIX_FILE, 'w') as f:
            json.dump(fixes, f, indent=2)

        logger.info(f"Saved cycle {model.cycle} to {directory}")

    @classmethod
    def load_model(cls, directory: Union[str, Path]) -> CifpModel:
        """
        Rebuild a model written by ``save_model``.

        Raises:
            FileNotFoundError: If one of the JSON files is missing
        """
        directory = Path(directory)
        model = CifpModel()

        model.moras = cls.load_json(directory / MORA_FILE, GridMORA)
        for aerodrome in cls.load_json(directory / AERODROME_FILE, Aerodrome):
            model.aerodromes[aerodrome.identifier] = aerodrome
        for navaid in cls.load_json(directory / NAVAID_FILE, Navaid):
            model.navaids.setdefault(navaid.identifier, set()).add(navaid)
        for airway in cls.load_json(directory / AIRWAY_FILE, Airway):
            model.add_airway(airway)
        for procedure in cls.load_json(directory / PROCEDURE_FILE, Procedure):
            model.add_procedure(procedure)
        for runway in cls.load_json(directory / RUNWAY_FILE, Runway):
            model.runways.setdefault(runway.airport, []).append(runway)
        for msa in cls.load_json(directory / MSA_FILE, AirportMSA):
            model.add_airport_msa(msa)

        with open(directory / FIX_FILE, 'r') as f:
            fixes = json.load(f)
        model.fixes = {name: {Coordinate.from_dict(p) for p in positions} for name, positions in fixes.items()}

        logger.info(f"Loaded cycle {model.cycle} from {directory}")
        return model
