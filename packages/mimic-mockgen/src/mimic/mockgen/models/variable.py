from typing import Dict, List, Optional

from mimic.common import source_buffers
from mimic.spec import DeclNode, StaticKind

from ..naming import name_by_level
from ..templates.variable import apply_variable_template


class VariableModel:
    """A property requirement (`var x: T { get set }`)."""

    is_initializer = False

    def __init__(
        self, node: DeclNode, file_path: str, content: str, processed: bool = False
    ):
        self.file_path = file_path
        self.content = content
        self.processed = processed
        self.name = node.name
        self.raw_name = node.name
        self.type_name = node.type_name
        span = node.span
        self.offset = span.offset
        self.length = span.length
        self.static_kind = StaticKind.STATIC if node.is_static else StaticKind.NONE
        self.access_level = node.access_level
        # Properties cannot be overloaded; numeric levels settle clashes.
        self.signature_components: List[str] = []

    @property
    def cache_key(self) -> str:
        return (
            f"{self.file_path}_{self.raw_name}_{self.type_name}_"
            f"{self.offset}_{self.length}"
        )

    def name_by(self, level: int) -> str:
        return name_by_level(self.name, self.signature_components, level)

    def render(
        self, identifier: str, type_keys: Optional[Dict[str, str]] = None
    ) -> Optional[str]:
        if self.processed:
            return source_buffers.extract(
                self.cache_key, self.file_path, self.content, self.offset, self.length
            )
        return apply_variable_template(
            name=self.name,
            identifier=identifier,
            type_name=self.type_name,
            static_kind=self.static_kind,
            access_level=self.access_level,
            type_keys=type_keys,
        )

    def __repr__(self) -> str:
        return f"<VariableModel '{self.name}: {self.type_name}'>"
