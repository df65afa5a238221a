from .bus import SpyBus
from .structure import StaticStructureProvider, SwiftStructureBuilder, TypeStructure
from .workspace import WorkspaceFactory

__all__ = [
    "SpyBus",
    "StaticStructureProvider",
    "SwiftStructureBuilder",
    "TypeStructure",
    "WorkspaceFactory",
]
