"""Pytest configuration and shared fixtures.

Tag files are written into temporary directories; the process-wide index
and configuration are reset around every test.
"""

import os
import sys
import pytest
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tagcore.index import clear_index
from tag_index_mcp.config import reset_config


GO_TAGS = (
    "!_TAG_FILE_FORMAT\t2\t/extended format/\n"
    "!_TAG_FILE_SORTED\t0\t/0=unsorted, 1=sorted/\n"
    "!_TAG_PROGRAM_NAME\tgotags\n"
    "HandleRequest\tserver/http.go\t42;\"\tf\tpackage:main\n"
    "Server\tserver/http.go\t12;\"\tt\tpackage:main\ttype:struct\n"
    "Start\tserver/http.go\t30;\"\tf\tpackage:main\tctype:Server\n"
    "Start\tworker/pool.go\t18;\"\tf\tpackage:worker\tctype:Pool\n"
    "Pool\tworker/pool.go\t8;\"\tt\tpackage:worker\n"
    "main\tcmd/app/main.go\t5;\"\tf\tpackage:main\n"
)


@pytest.fixture
def write_tags(tmp_path):
    """Write text to a tag file under a fresh directory and return its path."""
    def _write(content: str, name: str = "tags") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def go_tags_file(write_tags):
    """Tag file as gotags writes it, headers included."""
    return write_tags(GO_TAGS)


@pytest.fixture
def go_project(tmp_path, go_tags_file):
    """Project tree with the tag file at its root."""
    for relative in ("server", "worker", "cmd/app"):
        (tmp_path / relative).mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """No index, no TAG_INDEX_* variables, fresh config."""
    for key in list(os.environ):
        if key.startswith("TAG_INDEX_"):
            monkeypatch.delenv(key)
    clear_index()
    reset_config()
    yield
    clear_index()
    reset_config()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Mark tests by module: server and tool tests are integration."""
    for item in items:
        if "test_server" in item.nodeid or "test_tools" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
