from pathlib import Path

from mimic.config import MimicConfig
from mimic.lang.swift import SourceKittenCLI
from mimic.mockgen import GenerateRunner, create_extractor
from mimic.spec import ErrorPolicy, StructureProviderProtocol


def get_project_root() -> Path:
    return Path.cwd()


def make_structure_provider() -> StructureProviderProtocol:
    return SourceKittenCLI()


def make_runner(
    root_path: Path, config: MimicConfig, on_error: ErrorPolicy = ErrorPolicy.ABORT
) -> GenerateRunner:
    # Composition Root: pick the parser backend named by the config
    provider = make_structure_provider() if config.backend == "sourcekit" else None
    extractor = create_extractor(config.backend, config.annotation, provider)
    return GenerateRunner(
        root_path=root_path,
        config=config,
        extractor=extractor,
        on_error=on_error,
    )
