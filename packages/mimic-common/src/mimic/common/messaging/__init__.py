from .bus import MessageBus
from .catalog import MessageCatalog, find_project_root
from .pointer import L, SemanticPointer
from .protocols import Renderer

__all__ = [
    "L",
    "MessageBus",
    "MessageCatalog",
    "Renderer",
    "SemanticPointer",
    "find_project_root",
]
