import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from mimic.common import extract_text
from mimic.spec import UNKNOWN_TYPE, DeclKind, DocRange, ParseError, SourceSpan

from .constants import (
    ATTRIBUTE_AVAILABLE,
    AVAILABLE_ATTRIBUTE,
    INIT_PREFIX,
    PUBLIC_ACCESS_LEVELS,
    SUBSCRIPT_NAME,
)
from .imports import find_import_lines

log = logging.getLogger(__name__)

_KIND_BY_NODE_TYPE = {
    "protocol_declaration": DeclKind.PROTOCOL,
    "function_declaration": DeclKind.METHOD,
    "protocol_function_declaration": DeclKind.METHOD,
    "init_declaration": DeclKind.INITIALIZER,
    "subscript_declaration": DeclKind.SUBSCRIPT,
    "property_declaration": DeclKind.VARIABLE,
    "protocol_property_declaration": DeclKind.VARIABLE,
    "parameter": DeclKind.PARAMETER,
    "type_parameter": DeclKind.GENERIC_PARAM,
}

# Tokens that open a declaration once its modifiers are done
_DECL_KEYWORDS = {
    "func",
    "init",
    "subscript",
    "var",
    "let",
    "protocol",
    "class",
    "struct",
    "enum",
    "actor",
    "extension",
}
_COMMENT_TYPES = {"comment", "multiline_comment"}
_CLASS_LIKE_KINDS = {"class", "actor"}
_PREFIX_TYPES = {"modifiers", "attribute"} | _COMMENT_TYPES


class SyntaxNode:
    """A tree-sitter Swift declaration viewed as a DeclNode."""

    def __init__(
        self,
        node: Node,
        source: bytes,
        doc: Optional[DocRange] = None,
        default_access: str = "",
    ):
        self._node = node
        self._source = source
        self._doc = doc
        # Protocol requirements take the access level of their protocol.
        self._default_access = default_access

    # --- helpers ---

    def _text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return extract_text(
            self._source, node.start_byte, node.end_byte - node.start_byte
        )

    def _field(self, name: str) -> Optional[Node]:
        return self._node.child_by_field_name(name)

    def _keyword(self) -> Optional[Node]:
        keywords = [c for c in self._node.children if c.type in _DECL_KEYWORDS]
        # `class` doubles as a static modifier: `class func foo()`
        primary = [c for c in keywords if c.type != "class"]
        if primary or keywords:
            return (primary or keywords)[0]
        # Property declarations wrap `var`/`let` in a binding pattern node.
        for child in self._node.children:
            if child.type not in _PREFIX_TYPES:
                return child
        return None

    def _modifier_tokens(self) -> List[str]:
        keyword = self._keyword()
        end = keyword.start_byte if keyword is not None else self._node.start_byte
        prefix = extract_text(
            self._source, self._node.start_byte, end - self._node.start_byte
        )
        return prefix.split()

    def _attribute_nodes(self) -> List[Node]:
        found: List[Node] = []
        keyword = self._keyword()
        for child in self._node.children:
            if keyword is not None and child.start_byte >= keyword.start_byte:
                break
            if child.type == "attribute":
                found.append(child)
            elif child.type == "modifiers":
                found.extend(c for c in child.children if c.type == "attribute")
        return found

    def _parameters(self) -> List[Node]:
        params = [c for c in self._node.children if c.type == "parameter"]
        if params:
            return params
        for child in self._node.children:
            if child.type.endswith("parameters") and child.type != "type_parameters":
                params.extend(c for c in child.children if c.type == "parameter")
        return params

    def _type_parameters(self) -> List[Node]:
        params: List[Node] = []
        for child in self._node.children:
            if child.type == "type_parameters":
                params.extend(c for c in child.children if c.type == "type_parameter")
        return params

    def _closing_paren(self) -> Optional[Node]:
        ret = self._field("return_type")
        closing = None
        for child in self._node.children:
            if ret is not None and child.start_byte >= ret.start_byte:
                break
            if child.type in ("function_body", "computed_property"):
                break
            if child.type == ")":
                closing = child
        return closing

    def _name_node(self) -> Optional[Node]:
        if self.kind in (DeclKind.INITIALIZER, DeclKind.SUBSCRIPT):
            return next(
                (c for c in self._node.children if c.type in ("init", "subscript")),
                None,
            )
        if self.kind == DeclKind.GENERIC_PARAM:
            return next(
                (c for c in self._node.children if c.type == "type_identifier"), None
            )
        node = self._field("name")
        if node is not None and self.kind == DeclKind.VARIABLE:
            idents = [c for c in _descendants(node) if c.type == "simple_identifier"]
            return idents[0] if idents else node
        return node

    def _after_colon(self, node: Node) -> str:
        for child in node.children:
            if child.type == ":":
                return extract_text(
                    self._source, child.end_byte, node.end_byte - child.end_byte
                ).strip()
        return ""

    def _labels(self) -> List[str]:
        labels = []
        for param in self._parameters():
            external = param.child_by_field_name("external_name")
            if external is not None:
                labels.append(self._text(external))
            elif self.kind == DeclKind.SUBSCRIPT:
                labels.append("_")
            else:
                labels.append(self._text(param.child_by_field_name("name")))
        return labels

    # --- DeclNode ---

    @property
    def node(self) -> Node:
        return self._node

    @property
    def kind(self) -> DeclKind:
        if self._node.type == "class_declaration":
            decl_kind = self._text(self._field("declaration_kind"))
            if not decl_kind:
                keyword = self._keyword()
                decl_kind = keyword.type if keyword is not None else ""
            if decl_kind == "protocol":
                return DeclKind.PROTOCOL
            if decl_kind in _CLASS_LIKE_KINDS:
                return DeclKind.CLASS
            return DeclKind.OTHER
        return _KIND_BY_NODE_TYPE.get(self._node.type, DeclKind.OTHER)

    @property
    def name(self) -> str:
        kind = self.kind
        if kind in (DeclKind.METHOD, DeclKind.INITIALIZER, DeclKind.SUBSCRIPT):
            if kind == DeclKind.INITIALIZER:
                base = INIT_PREFIX
            elif kind == DeclKind.SUBSCRIPT:
                base = SUBSCRIPT_NAME
            else:
                base = self._text(self._field("name"))
            labels = "".join(f"{label}:" for label in self._labels())
            return f"{base}({labels})"
        return self._text(self._name_node())

    @property
    def span(self) -> SourceSpan:
        start = self._node.start_byte
        name_node = self._name_node()
        name_offset = name_node.start_byte if name_node is not None else start
        name_end = name_node.end_byte if name_node is not None else start
        closing = self._closing_paren()
        if closing is not None and self.kind in (
            DeclKind.METHOD,
            DeclKind.INITIALIZER,
            DeclKind.SUBSCRIPT,
        ):
            name_end = closing.end_byte

        body = self._field("body")
        if body is None:
            body = next(
                (c for c in self._node.children if c.type == "computed_property"), None
            )
        body_offset, body_length = -1, 0
        if body is not None:
            # Like SourceKit, the body starts right after the opening brace.
            body_offset = body.start_byte + 1
            body_length = max(body.end_byte - 1 - body_offset, 0)

        return SourceSpan(
            offset=start,
            length=self._node.end_byte - start,
            name_offset=name_offset,
            name_length=name_end - name_offset,
            body_offset=body_offset,
            body_length=body_length,
            doc=self._doc,
        )

    @property
    def type_name(self) -> str:
        kind = self.kind
        if kind in (DeclKind.METHOD, DeclKind.SUBSCRIPT):
            ret = self._field("return_type")
            return self._text(ret) if ret is not None else UNKNOWN_TYPE
        if kind in (DeclKind.PARAMETER, DeclKind.GENERIC_PARAM):
            return self._after_colon(self._node) or UNKNOWN_TYPE
        if kind == DeclKind.VARIABLE:
            for child in _descendants(self._node):
                if child.type == "type_annotation":
                    return self._after_colon(child) or UNKNOWN_TYPE
        return UNKNOWN_TYPE

    @property
    def is_static(self) -> bool:
        return any(tok in ("static", "class") for tok in self._modifier_tokens())

    @property
    def access_level(self) -> str:
        tokens = self._modifier_tokens()
        if any(t in PUBLIC_ACCESS_LEVELS for t in tokens):
            return "public"
        return self._default_access

    @property
    def has_available_attribute(self) -> bool:
        return any(
            self._text(n).startswith(AVAILABLE_ATTRIBUTE)
            for n in self._attribute_nodes()
        )

    @property
    def inherited_types(self) -> List[str]:
        return [
            self._text(c).strip()
            for c in self._node.children
            if c.type == "inheritance_specifier"
        ]

    @property
    def substructures(self) -> List["SyntaxNode"]:
        kind = self.kind
        if kind in (DeclKind.PROTOCOL, DeclKind.CLASS):
            body = self._field("body")
            if body is None:
                return []
            default_access = self.access_level if kind == DeclKind.PROTOCOL else ""
            return [
                SyntaxNode(child, self._source, doc, default_access)
                for child, doc in _with_doc_comments(body.children)
                if child.type in _KIND_BY_NODE_TYPE
            ]
        if kind in (DeclKind.METHOD, DeclKind.INITIALIZER, DeclKind.SUBSCRIPT):
            nodes = self._type_parameters() + self._parameters()
            return [SyntaxNode(n, self._source) for n in nodes]
        return []

    def extract_attributes(self, buffer: bytes, filter_on: str) -> List[str]:
        prefix = AVAILABLE_ATTRIBUTE if filter_on == ATTRIBUTE_AVAILABLE else filter_on
        return [
            extract_text(buffer, n.start_byte, n.end_byte - n.start_byte)
            for n in self._attribute_nodes()
            if self._text(n).startswith(prefix)
        ]

    def __repr__(self) -> str:
        return f"<SyntaxNode {self.kind.value} '{self.name}'>"


def _descendants(node: Node):
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _with_doc_comments(children):
    """Pairs each non-comment node with the comment block right before it."""
    pending: Optional[DocRange] = None
    for child in children:
        if child.type in _COMMENT_TYPES:
            if pending is None:
                pending = DocRange(child.start_byte, child.end_byte - child.start_byte)
            else:
                pending = DocRange(pending.offset, child.end_byte - pending.offset)
            continue
        yield child, pending
        pending = None


@dataclass
class VisitResult:
    """Accumulator for one file; a fresh instance is created per walk."""

    declarations: List[SyntaxNode] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)


class EntityVisitor:
    def __init__(self, kinds=(DeclKind.PROTOCOL, DeclKind.CLASS)):
        self.kinds = tuple(kinds)

    def walk(self, root: Node, source: bytes) -> VisitResult:
        result = VisitResult()
        first_offset: Optional[int] = None
        for child, doc in _with_doc_comments(root.children):
            if child.type == "import_declaration":
                continue
            if child.type.endswith("_declaration") and first_offset is None:
                first_offset = child.start_byte
            decl = SyntaxNode(child, source, doc)
            if decl.kind in self.kinds:
                result.declarations.append(decl)
        # Same scan as the SourceKit backend, so `#if` guards survive.
        result.imports = find_import_lines(source, first_offset)
        return result


class SwiftSyntaxParser:
    """tree-sitter parser with one underlying Parser per thread."""

    def __init__(self):
        self._local = threading.local()

    def _parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = get_parser("swift")
            self._local.parser = parser
        return parser

    def parse(self, source: bytes, file_path: str = "") -> Node:
        try:
            tree = self._parser().parse(source)
        except ValueError as e:
            raise ParseError(file_path, str(e)) from e
        if tree.root_node.has_error:
            # The grammar recovers locally; declarations outside the broken
            # region are still usable.
            log.warning("Syntax errors while parsing %s", file_path)
        return tree.root_node
