from dataclasses import dataclass, field
from typing import List, Optional, Union

from mimic.common import extract_text
from mimic.lang.swift.constants import (
    ATTRIBUTE_AVAILABLE,
    DEFAULT_ANNOTATION,
    MOCK_SUFFIX,
)
from mimic.spec import DeclKind, DeclNode, SignatureStrategyProtocol

from .method import MethodModel, encode_source
from .variable import VariableModel

Member = Union[MethodModel, VariableModel]

_METHOD_KINDS = (DeclKind.METHOD, DeclKind.INITIALIZER, DeclKind.SUBSCRIPT)


@dataclass
class Entity:
    name: str
    kind: DeclKind
    file_path: str
    offset: int = 0
    access_level: str = ""
    attributes: List[str] = field(default_factory=list)
    inherited_types: List[str] = field(default_factory=list)
    is_annotated: bool = False
    is_processed: bool = False
    members: List[Member] = field(default_factory=list)

    @property
    def mock_name(self) -> str:
        return f"{self.name}{MOCK_SUFFIX}"


def build_entity(
    node: DeclNode,
    file_path: str,
    content: str,
    processed: bool = False,
    annotation: str = DEFAULT_ANNOTATION,
    strategy: Optional[SignatureStrategyProtocol] = None,
    buffer: Optional[bytes] = None,
) -> Entity:
    if buffer is None:
        buffer = encode_source(file_path, content, processed)
    span = node.span
    doc = extract_text(buffer, span.doc.offset, span.doc.length) if span.doc else ""
    attributes: List[str] = []
    if node.has_available_attribute:
        attributes = node.extract_attributes(buffer, ATTRIBUTE_AVAILABLE)

    members: List[Member] = []
    for sub in node.substructures:
        if sub.kind in _METHOD_KINDS:
            members.append(
                MethodModel(sub, file_path, content, processed, strategy, buffer)
            )
        elif sub.kind == DeclKind.VARIABLE:
            members.append(VariableModel(sub, file_path, content, processed))

    return Entity(
        name=node.name,
        kind=node.kind,
        file_path=file_path,
        offset=span.offset,
        access_level=node.access_level,
        attributes=attributes,
        inherited_types=node.inherited_types,
        is_annotated=bool(doc) and annotation in doc,
        is_processed=processed,
        members=members,
    )
