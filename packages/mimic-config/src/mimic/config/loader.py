import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from mimic.spec import ConfigError

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

BACKENDS = ("sourcekit", "syntax")


@dataclass
class MimicConfig:
    scan_paths: List[str] = field(default_factory=list)
    # Previously generated mock files whose members are passed through verbatim.
    mock_files: List[str] = field(default_factory=list)
    output: Optional[str] = None
    backend: str = "sourcekit"
    max_concurrency: Optional[int] = field(default_factory=os.cpu_count)
    annotation: str = "@mockable"
    header: str = ""
    exclude_suffixes: List[str] = field(default_factory=lambda: ["Mocks", "Tests"])


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while current_dir.parent != current_dir:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def _validate(data: Dict[str, Any]) -> None:
    backend = data.get("backend", "sourcekit")
    if backend not in BACKENDS:
        raise ConfigError(f"backend must be one of {BACKENDS}, got '{backend}'")

    concurrency = data.get("max_concurrency")
    if concurrency is not None and (
        not isinstance(concurrency, int) or concurrency < 0
    ):
        raise ConfigError(
            f"max_concurrency must be a non-negative integer, got '{concurrency}'"
        )

    for key in ("scan_paths", "mock_files", "exclude_suffixes"):
        if key in data and not isinstance(data[key], list):
            raise ConfigError(f"{key} must be a list of strings")


def load_config_from_path(search_path: Path) -> MimicConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return MimicConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    mimic_data: Dict[str, Any] = data.get("tool", {}).get("mimic", {})
    _validate(mimic_data)

    defaults = MimicConfig()
    return MimicConfig(
        scan_paths=mimic_data.get("scan_paths", defaults.scan_paths),
        mock_files=mimic_data.get("mock_files", defaults.mock_files),
        output=mimic_data.get("output", defaults.output),
        backend=mimic_data.get("backend", defaults.backend),
        max_concurrency=mimic_data.get("max_concurrency", defaults.max_concurrency),
        annotation=mimic_data.get("annotation", defaults.annotation),
        header=mimic_data.get("header", defaults.header),
        exclude_suffixes=mimic_data.get("exclude_suffixes", defaults.exclude_suffixes),
    )
