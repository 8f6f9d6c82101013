import zipfile
from unittest.mock import patch

import pytest
import requests

from cifp_reader.models.cifp_model import CifpModel
from cifp_reader.sources.cifp import CIFP_ENTRY, CifpSource

LISTING = """
<html><body>
<a href="CIFP_250807.zip">CIFP_250807.zip</a>
<a href="CIFP_250904.zip">CIFP_250904.zip</a>
</body></html>
"""


class MockResponse:
    """Minimal mock for requests.Response."""

    def __init__(self, text='', content=b'', status_code=200):
        self.text = text
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")


def make_archive(path, sample_file, entry=CIFP_ENTRY):
    with zipfile.ZipFile(path, 'w') as zf:
        zf.writestr(entry, sample_file.read_text())
    return path


@pytest.fixture
def archive(tmp_path, sample_file):
    return make_archive(tmp_path / 'CIFP_250904.zip', sample_file)


def test_local_archive(test_cache_dir, archive):
    source = CifpSource(str(test_cache_dir), source_file=archive)

    model = source.load_model()

    assert model.get_statistics()['total_procedures'] == 1
    assert len(model.airspaces) == 2
    assert source.last_report.records_parsed == 29
    assert (test_cache_dir / 'cifpsource' / 'model' / 'fix.json').exists()


def test_local_text_file(test_cache_dir, sample_file):
    source = CifpSource(str(test_cache_dir), source_file=sample_file)

    assert source.read_cifp().startswith('HDR01FAACIFP18')
    assert source.load_model().get_aerodrome('KATL') is not None


def test_archive_without_record_file(test_cache_dir, tmp_path, sample_file):
    archive = make_archive(tmp_path / 'CIFP_250904.zip', sample_file, entry='IN_CIFP.txt')
    source = CifpSource(str(test_cache_dir), source_file=archive)

    with pytest.raises(FileNotFoundError):
        source.read_cifp()


def test_download_latest(test_cache_dir, archive):
    responses = {
        'https://example.com/cifp/': MockResponse(text=LISTING),
        'https://example.com/cifp/CIFP_250904.zip': MockResponse(content=archive.read_bytes()),
    }
    source = CifpSource(str(test_cache_dir), base_url='https://example.com/cifp')

    with patch('cifp_reader.sources.cifp.requests.get', side_effect=lambda url, timeout: responses[url]) as get:
        model = source.load_model()

        assert [c.args[0] for c in get.call_args_list] == [
            'https://example.com/cifp/', 'https://example.com/cifp/CIFP_250904.zip']

    cache = test_cache_dir / 'cifpsource'
    assert (cache / 'archive_CIFP_250904.zip').exists()
    assert (cache / 'cifp_latest.txt').exists()
    assert model.get_statistics()['total_navaids'] == 2


def test_cached_model_is_reused(test_cache_dir, archive):
    """A second load comes from the JSON cache without any request."""
    responses = {
        'https://example.com/cifp/': MockResponse(text=LISTING),
        'https://example.com/cifp/CIFP_250904.zip': MockResponse(content=archive.read_bytes()),
    }
    with patch('cifp_reader.sources.cifp.requests.get', side_effect=lambda url, timeout: responses[url]):
        first = CifpSource(str(test_cache_dir), base_url='https://example.com/cifp').load_model()

    with patch('cifp_reader.sources.cifp.requests.get', side_effect=AssertionError('no request expected')):
        second = CifpSource(str(test_cache_dir), base_url='https://example.com/cifp').load_model()

    assert second.get_statistics() == dict(first.get_statistics(), total_airspaces=0)


def test_listing_without_archive(test_cache_dir):
    source = CifpSource(str(test_cache_dir), base_url='https://example.com/cifp/')

    with patch('cifp_reader.sources.cifp.requests.get', return_value=MockResponse(text='<html></html>')):
        with pytest.raises(ValueError):
            source.find_latest_archive()


def test_http_error_propagates(test_cache_dir):
    source = CifpSource(str(test_cache_dir), base_url='https://example.com/cifp/')

    with patch('cifp_reader.sources.cifp.requests.get', return_value=MockResponse(status_code=404)):
        with pytest.raises(requests.exceptions.HTTPError):
            source.load_model()


def test_update_model(test_cache_dir, archive):
    model = CifpModel()
    source = CifpSource(str(test_cache_dir), source_file=archive)

    source.update_model(model)

    assert model.get_procedures('ZELAN4', 'KATL')
    assert source.get_source_name() == 'cifp'
