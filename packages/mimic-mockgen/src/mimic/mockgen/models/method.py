import re
from typing import Dict, List, Optional, Tuple

from mimic.common import extract_text, source_buffers
from mimic.lang.swift.constants import ASYNC, ATTRIBUTE_AVAILABLE, RETHROWS, THROWS
from mimic.spec import (
    DeclKind,
    DeclNode,
    InconsistentDeclarationError,
    SignatureStrategyProtocol,
    StaticKind,
)

from ..naming import name_by_level
from ..signature import DefaultSignatureStrategy
from ..templates.method import apply_method_template
from .closure import ClosureModel
from .param import ParamModel

_NAME_SEPARATORS = re.compile(r"[:()]")
_EFFECTS = (ASYNC, THROWS, RETHROWS)
# No effect keyword can follow these, spaced or not
_SIGNATURE_END = re.compile(r"->|\{|\bwhere\b")


def encode_source(file_path: str, content: str, processed: bool) -> bytes:
    """Passthrough members slice their text later, so only they use the cache."""
    if processed:
        return source_buffers.buffer(file_path, content)
    return content.encode("utf-8")


def split_declared_name(raw_name: str) -> Tuple[str, List[str]]:
    """`foo(bar:_:)` -> (`foo`, [`bar`, `_`])."""
    parts = _NAME_SEPARATORS.split(raw_name)
    return parts[0], [p for p in parts[1:] if p]


def scan_suffix(buffer: bytes, start: int, end: int) -> str:
    """
    Reads the effect keywords written between the closing parenthesis of a
    parameter list and the body (or the end of the declaration).
    """
    text = extract_text(buffer, start, end - start)
    head = _SIGNATURE_END.split(text, maxsplit=1)[0]
    effects = []
    for token in head.split():
        for effect in _EFFECTS:
            # `throws(SomeError)` is a typed throw
            if token == effect or token.startswith(effect + "("):
                effects.append(effect)
    return " ".join(effects)


class MethodModel:
    """One method, initializer or subscript requirement of a mocked type."""

    def __init__(
        self,
        node: DeclNode,
        file_path: str,
        content: str,
        processed: bool = False,
        strategy: Optional[SignatureStrategyProtocol] = None,
        buffer: Optional[bytes] = None,
    ):
        self.file_path = file_path
        self.content = content
        self.processed = processed
        self.raw_name = node.name
        self.name, labels = split_declared_name(node.name)

        span = node.span
        self.offset = span.offset
        self.length = span.length
        self.type_name = node.type_name
        self.is_initializer = node.kind == DeclKind.INITIALIZER
        self.is_subscript = node.kind == DeclKind.SUBSCRIPT
        self.static_kind = StaticKind.STATIC if node.is_static else StaticKind.NONE
        self.access_level = node.access_level

        if buffer is None:
            buffer = encode_source(file_path, content, processed)
        self.attributes: List[str] = []
        if node.has_available_attribute:
            self.attributes = node.extract_attributes(buffer, ATTRIBUTE_AVAILABLE)

        subs = node.substructures
        param_nodes = [s for s in subs if s.kind == DeclKind.PARAMETER]
        if len(labels) != len(param_nodes):
            raise InconsistentDeclarationError(
                file_path, node.name, len(labels), len(param_nodes)
            )
        self.params = [
            ParamModel(name=p.name, label=label, type_name=p.type_name)
            for label, p in zip(labels, param_nodes)
        ]
        self.generic_params = [
            ParamModel(name=g.name, type_name=g.type_name, is_generic=True)
            for g in subs
            if g.kind == DeclKind.GENERIC_PARAM
        ]

        scan_end = span.body_offset - 1 if span.body_offset >= 0 else span.end
        self.suffix = scan_suffix(buffer, span.name_end, scan_end)

        strategy = strategy or DefaultSignatureStrategy()
        self.signature_components = strategy.components(
            self.name,
            labels,
            [p.name for p in self.params],
            [p.type_name for p in self.params],
            [(g.name, g.type_name) for g in self.generic_params],
            self.type_name,
        )

        self.handler: Optional[ClosureModel] = None
        if not self.is_initializer:
            self.handler = ClosureModel(
                name=self.name,
                generic_type_names=[g.name for g in self.generic_params],
                param_names=[p.name for p in self.params],
                param_types=[p.type_name for p in self.params],
                arguments=[p.render_argument() for p in self.params],
                return_type=self.type_name,
                static_kind=self.static_kind,
                suffix=self.suffix,
            )

    @property
    def full_name(self) -> str:
        return self.name + "".join(self.signature_components)

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
            if self.is_initializer:
                return None
            return source_buffers.extract(
                self.cache_key, self.file_path, self.content, self.offset, self.length
            )

        return apply_method_template(
            name=self.name,
            identifier=identifier,
            is_initializer=self.is_initializer,
            is_subscript=self.is_subscript,
            generic_params=self.generic_params,
            params=self.params,
            return_type=self.type_name,
            static_kind=self.static_kind,
            access_level=self.access_level,
            suffix=self.suffix,
            handler=self.handler,
            type_keys=type_keys,
            attributes=self.attributes,
        )

    def __repr__(self) -> str:
        return f"<MethodModel '{self.raw_name}' at {self.offset}>"
