import pytest

from mimic.common import source_buffers
from mimic.test_utils.workspace import WorkspaceFactory


@pytest.fixture
def workspace_factory(tmp_path, monkeypatch):
    # Use a fixture to ensure a clean workspace and chdir for each test
    factory = WorkspaceFactory(tmp_path)
    monkeypatch.chdir(tmp_path)
    source_buffers.clear()
    yield factory
    source_buffers.clear()
