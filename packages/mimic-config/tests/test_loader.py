import pytest
from pathlib import Path
from textwrap import dedent

from mimic.config import load_config_from_path
from mimic.spec import ConfigError


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "pyproject.toml").write_text(
        dedent("""
        [tool.mimic]
        scan_paths = ["Sources/App"]
        mock_files = ["Vendor/ParentMocks.swift"]
        output = "Tests/Mocks.swift"
        backend = "syntax"
        max_concurrency = 4
        header = "// Generated"
    """)
    )
    nested = tmp_path / "Sources" / "App"
    nested.mkdir(parents=True)
    return tmp_path


def test_load_config_reads_tool_table(workspace: Path):
    config = load_config_from_path(workspace)

    assert config.scan_paths == ["Sources/App"]
    assert config.mock_files == ["Vendor/ParentMocks.swift"]
    assert config.output == "Tests/Mocks.swift"
    assert config.backend == "syntax"
    assert config.max_concurrency == 4
    assert config.header == "// Generated"
    # Untouched keys fall back to defaults
    assert config.annotation == "@mockable"


def test_load_config_searches_parent_directories(workspace: Path):
    config = load_config_from_path(workspace / "Sources" / "App")
    assert config.backend == "syntax"


def test_load_config_without_pyproject_uses_defaults(tmp_path: Path, monkeypatch):
    # Keep the upward search from escaping into the real filesystem.
    def missing(search_path):
        raise FileNotFoundError()

    monkeypatch.setattr("mimic.config.loader._find_pyproject_toml", missing)
    config = load_config_from_path(tmp_path)
    assert config.scan_paths == []
    assert config.backend == "sourcekit"


def test_load_config_rejects_unknown_backend(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text('[tool.mimic]\nbackend = "clang"\n')
    with pytest.raises(ConfigError, match="backend"):
        load_config_from_path(tmp_path)


def test_load_config_rejects_negative_concurrency(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text("[tool.mimic]\nmax_concurrency = -1\n")
    with pytest.raises(ConfigError, match="max_concurrency"):
        load_config_from_path(tmp_path)
