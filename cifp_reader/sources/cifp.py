"""
Source for the FAA Coded Instrument Flight Procedures distribution.

The FAA publishes one ``CIFP_<yymmdd>.zip`` archive per AIRAC cycle; the
record file inside it (``FAACIFP18``) is the 132 column ARINC 424 file read
by ``CifpFileParser``. The source caches the archive, the extracted record
file and the parsed model (as JSON), each refreshed once per cycle.
"""

import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Optional, Union

import requests

from .base import SourceInterface
from .cached import CachedSource
from ..models.cifp_model import CifpModel
from ..models.persistence import FIX_FILE, PersistenceManager
from ..models.validation import LoadReport
from ..parsers.cifp_file import CifpFileParser
from ..utils.airac_date_calculator import AIRACDateCalculator, cycle_to_date

logger = logging.getLogger(__name__)

DEFAULT_CIFP_URL = 'https://aeronav.faa.gov/Upload_313-d/cifp/'
CIFP_ENTRY = 'FAACIFP18'
ARCHIVE_PATTERN = re.compile(r'CIFP_\d+\.zip')
MODEL_DIRECTORY = 'model'
LATEST = 'latest'


class CifpSource(CachedSource, SourceInterface):
    """
    Source for CIFP data, downloaded from the FAA or read from a local file.

    Args:
        cache_dir: Base directory for caching
        source_file: Local ``.zip`` archive or extracted record file to read
            instead of downloading
        base_url: Directory listing the published archives
        entry_name: Name of the record file inside the archive
        timeout: Timeout in seconds for each HTTP request
        max_age_days: Age after which cached data is refreshed
    """

    def __init__(self, cache_dir: str, source_file: Optional[Union[str, Path]] = None,
                 base_url: str = DEFAULT_CIFP_URL, entry_name: str = CIFP_ENTRY, timeout: int = 60,
                 max_age_days: int = AIRACDateCalculator.AIRAC_CYCLE_DAYS):
        super().__init__(cache_dir)
        self.source_file = Path(source_file) if source_file is not None else None
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.entry_name = entry_name
        self.timeout = timeout
        self.max_age_days = max_age_days
        self.last_report: Optional[LoadReport] = None

    def get_source_name(self) -> str:
        return 'cifp'

    def _get(self, url: str) -> requests.Response:
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            raise

    def find_latest_archive(self) -> str:
        """
        Name of the newest archive in the FAA listing.

        Raises:
            requests.RequestException: If the listing cannot be fetched
            ValueError: If the listing names no archive
        """
        matches = ARCHIVE_PATTERN.findall(self._get(self.base_url).text)
        if not matches:
            raise ValueError(f"No CIFP archive listed at {self.base_url}")
        logger.info(f"Latest CIFP archive is {matches[-1]}")
        return matches[-1]

    def fetch_archive(self, archive_name: str) -> bytes:
        """Download one archive from the FAA."""
        logger.info(f"Downloading {archive_name} from {self.base_url}")
        return self._get(self.base_url + archive_name).content

    def fetch_cifp(self, archive_name: Optional[str]) -> str:
        """
        Record file text of ``archive_name``, or of the newest archive when None.

        Archives are immutable once published so they are cached without
        an age limit.
        """
        if archive_name is None:
            archive_name = self.find_latest_archive()
        archive = self.get_data('archive', 'zip', archive_name, cache_param=Path(archive_name).stem)
        return self.extract(archive)

    def extract(self, archive: bytes) -> str:
        """
        Raises:
            FileNotFoundError: If the archive has no record file
        """
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            try:
                data = zf.read(self.entry_name)
            except KeyError:
                raise FileNotFoundError(f"ZIP archive doesn't contain {self.entry_name}.") from None
        return data.decode('ascii', errors='replace')

    def read_cifp(self) -> str:
        """Record file text, from ``source_file`` when given, else from the FAA."""
        if self.source_file is None:
            return self.get_data('cifp', 'txt', None, cache_param=LATEST, max_age_days=self.max_age_days)

        logger.info(f"Reading CIFP from {self.source_file}")
        if zipfile.is_zipfile(self.source_file):
            return self.extract(self.source_file.read_bytes())
        return self.source_file.read_text(encoding='ascii', errors='replace')

    def load_model(self) -> CifpModel:
        """
        Parsed model, reloaded from the JSON cache when it is still valid.

        A model reloaded from JSON has no controlled airspaces; use ``set_force_refresh``
        to parse the record file again when airspace queries are needed.
        """
        directory = self.cache_path / MODEL_DIRECTORY
        is_valid, _ = self._is_cache_valid(directory / FIX_FILE, self.max_age_days)
        if is_valid and self.source_file is None:
            logger.info(f"CIFP model retrieved from cache {directory}")
            return PersistenceManager.load_model(directory)

        model, report = CifpFileParser().parse(self.read_cifp().splitlines())
        self.last_report = report
        if not report.is_valid:
            logger.warning(f"CIFP load skipped {len(report.errors)} groups")
        if model.cycle:
            logger.info(f"CIFP cycle {model.cycle} effective {cycle_to_date(model.cycle)}")

        PersistenceManager.save_model(model, directory)
        return model

    def update_model(self, model: CifpModel) -> None:
        """
        Merge the CIFP data into ``model``.

        Args:
            model: The CifpModel to update
        """
        model.merge(self.load_model())
