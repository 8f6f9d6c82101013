import pytest
from pathlib import Path

from cifp_reader.parsers import CifpFileParser


def record(*fields, frn: int = 1, cycle: int = 1705) -> str:
    """
    Build a 132 column record line.

    Args:
        fields: Alternating column and text pairs, columns 0-based
    """
    line = [' '] * 132
    for column, text in zip(fields[::2], fields[1::2]):
        line[column:column + len(text)] = list(text)
    line[123:128] = f"{frn:05d}"
    line[128:132] = f"{cycle:04d}"
    return ''.join(line)


@pytest.fixture
def test_assets_dir() -> Path:
    """Return the path to the test assets directory."""
    return Path(__file__).parent / 'assets'


@pytest.fixture
def test_cache_dir(tmp_path) -> Path:
    """Return a temporary directory for cache testing."""
    return tmp_path / 'cache'


@pytest.fixture
def sample_file(test_assets_dir) -> Path:
    """Small CIFP file around KATL: navaids, fixes, an airway, ZELAN4 and KSBA airspace."""
    return test_assets_dir / 'cifp_sample.txt'


@pytest.fixture
def sample_load(sample_file):
    """Model and report loaded from the sample file."""
    return CifpFileParser().parse_file(sample_file)


@pytest.fixture
def sample_model(sample_load):
    return sample_load[0]


@pytest.fixture
def make_record():
    """Return the record line builder."""
    return record
