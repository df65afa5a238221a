__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from pathlib import Path

from .cache import SourceBufferCache, source_buffers
from .messaging import L, MessageBus, MessageCatalog, find_project_root
from .text import capitalize_first_letter, displayable_for_type, extract_text

# --- Composition Root for the shared services ---

# Packaged assets first, project overrides (.mimic/needle/<lang>) second.
mimic_catalog = MessageCatalog(
    roots=[Path(__file__).parent / "assets", find_project_root()]
)

bus = MessageBus(mimic_catalog)

__all__ = [
    "bus",
    "mimic_catalog",
    "L",
    "MessageBus",
    "MessageCatalog",
    "SourceBufferCache",
    "source_buffers",
    "capitalize_first_letter",
    "displayable_for_type",
    "extract_text",
]
