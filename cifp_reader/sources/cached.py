from abc import ABC
import json
import inspect
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

# Supported cache file kinds: binary downloads, extracted text, JSON and tables
BINARY_EXTENSIONS = ('zip',)
TEXT_EXTENSIONS = ('txt',)


class CachedSource(ABC):
    """
    Base class for sources that keep what they download on disk.

    Key Format:
    The cache key follows the format ``{base_key}_{parameter}`` where
    ``base_key`` names the kind of data and ``parameter`` selects one
    instance of it, for example:
    - ``archive_CIFP_250904``: the distribution archive of one cycle
    - ``cifp_latest``: the record file extracted from the newest archive

    The base_key must correspond to a fetch method in the implementing class:
    the key ``archive_CIFP_250904`` is filled by calling ``fetch_archive``.

    Args:
        cache_dir: Base directory for caching; each source uses a
            sub-directory named after its class
    """

    def __init__(self, cache_dir: str):
        self.cache_dir = Path(cache_dir)
        self.source_name = self.__class__.__name__.lower()
        self.cache_path = self.cache_dir / self.source_name
        self.cache_path.mkdir(parents=True, exist_ok=True)
        self._force_refresh = False
        self._never_refresh = False

    def set_force_refresh(self, force_refresh: bool = True) -> None:
        """Ignore cached data and fetch again."""
        self._force_refresh = force_refresh

    def set_never_refresh(self, never_refresh: bool = True) -> None:
        """
        Use cached data whenever it exists, regardless of age.

        Args:
            never_refresh: Whether to never refresh cached data
        """
        self._never_refresh = never_refresh

    def _get_cache_file(self, key: str, ext: str) -> Path:
        return self.cache_path / f"{key}.{ext}"

    def _is_cache_valid(self, cache_file: Path, max_age_days: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """
        Check if a cache file or directory exists and is recent enough.

        Args:
            cache_file: Path to the cached file
            max_age_days: Maximum age of cache in days (None for no limit)

        Returns:
            Tuple[bool, Optional[str]]: (is_valid, reason if invalid)
        """
        if self._force_refresh:
            return False, "force refresh"
        if not cache_file.exists():
            return False, "missing"
        if self._never_refresh:
            return True, None
        if max_age_days is None:
            return True, None
        file_age = datetime.now() - datetime.fromtimestamp(cache_file.stat().st_mtime)
        if file_age.days <= max_age_days:
            return True, None
        return False, "expired"

    def _save_to_cache(self, data: Any, key: str, ext: str) -> None:
        cache_file = self._get_cache_file(key, ext)
        if ext == 'json':
            with open(cache_file, 'w') as f:
                json.dump(data, f)
        elif ext == 'csv':
            if isinstance(data, pd.DataFrame):
                data.to_csv(cache_file, index=False)
            else:
                pd.DataFrame(data).to_csv(cache_file, index=False)
        elif ext in BINARY_EXTENSIONS:
            with open(cache_file, 'wb') as f:
                f.write(data)
        elif ext in TEXT_EXTENSIONS:
            with open(cache_file, 'w', encoding='ascii', errors='replace') as f:
                f.write(data)
        else:
            raise ValueError(f"Unsupported file extension: {ext}")

    def _load_from_cache(self, key: str, ext: str) -> Any:
        cache_file = self._get_cache_file(key, ext)
        if ext == 'json':
            with open(cache_file, 'r') as f:
                return json.load(f)
        elif ext == 'csv':
            return pd.read_csv(cache_file)
        elif ext in BINARY_EXTENSIONS:
            with open(cache_file, 'rb') as f:
                return f.read()
        elif ext in TEXT_EXTENSIONS:
            with open(cache_file, 'r', encoding='ascii', errors='replace') as f:
                return f.read()
        else:
            raise ValueError(f"Unsupported file extension: {ext}")

    def _validate_fetch_method(self, base_key: str) -> None:
        """
        Raises:
            NotImplementedError: If the class has no ``fetch_<base_key>`` method
        """
        method_name = f"fetch_{base_key}"
        if not hasattr(self, method_name):
            raise NotImplementedError(
                f"No fetch method found for key '{base_key}'. "
                f"Class {self.__class__.__name__} must implement a method named '{method_name}'."
            )

    def get_data(self, key: str, ext: str, param: str, cache_param: Optional[str] = None,
                 max_age_days: Optional[int] = None, **kwargs) -> Any:
        """
        Get data from cache or fetch it if not available.

        Args:
            key: Base key for the data type (e.g., 'archive', 'cifp')
            ext: File extension (json, csv, zip or txt)
            param: Parameter to pass to the fetch method (ignored if fetch method takes no arguments)
            cache_param: Optional parameter to use in the cache key (if None, uses param)
            max_age_days: Maximum age of cache in days (None for no limit)
            **kwargs: Additional arguments to pass to the fetch method

        Returns:
            The requested data

        Raises:
            NotImplementedError: If the fetch method doesn't exist
            ValueError: If the file extension is not supported
        """
        cache_key = f"{key}_{cache_param if cache_param is not None else param}"
        cache_file = self._get_cache_file(cache_key, ext)

        is_valid, reason = self._is_cache_valid(cache_file, max_age_days)
        if is_valid:
            logger.info(f"{cache_file.name} retrieved from cache {self.source_name}")
            return self._load_from_cache(cache_key, ext)

        self._validate_fetch_method(key)
        fetch_method = getattr(self, f"fetch_{key}")

        sig = inspect.signature(fetch_method)
        if len(sig.parameters) == 0:
            data = fetch_method()
        else:
            data = fetch_method(param, **kwargs)

        self._save_to_cache(data, cache_key, ext)
        logger.info(f"{cache_file.name} [{reason}] fetched using {fetch_method.__name__}")

        return data
