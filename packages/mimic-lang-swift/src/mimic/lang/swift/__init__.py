__path__ = __import__("pkgutil").extend_path(__path__, __name__)

# The tree-sitter backend lives in `mimic.lang.swift.syntax` and is imported on
# demand so the SourceKit backend works without the grammar wheels.
from .imports import find_import_lines, merge_import_lines
from .structure import SourceKittenCLI, StructureNode, top_level_nodes
from . import constants, types

__all__ = [
    "constants",
    "types",
    "find_import_lines",
    "merge_import_lines",
    "SourceKittenCLI",
    "StructureNode",
    "top_level_nodes",
]
