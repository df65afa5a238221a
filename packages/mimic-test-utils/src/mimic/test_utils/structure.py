from textwrap import dedent
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mimic.lang.swift.constants import (
    ACCESSIBILITY_PREFIX,
    ATTRIBUTE_AVAILABLE,
    KEY_ACCESSIBILITY,
    KEY_ATTRIBUTE,
    KEY_ATTRIBUTES,
    KEY_BODY_LENGTH,
    KEY_BODY_OFFSET,
    KEY_DOC_LENGTH,
    KEY_DOC_OFFSET,
    KEY_INHERITED_TYPES,
    KEY_KIND,
    KEY_LENGTH,
    KEY_NAME,
    KEY_NAME_LENGTH,
    KEY_NAME_OFFSET,
    KEY_OFFSET,
    KEY_SUBSTRUCTURE,
    KEY_TYPE_NAME,
    KIND_CLASS,
    KIND_GENERIC_TYPE_PARAM,
    KIND_METHOD_INSTANCE,
    KIND_METHOD_STATIC,
    KIND_PROTOCOL,
    KIND_SUBSCRIPT,
    KIND_VAR_INSTANCE,
    KIND_VAR_PARAMETER,
    KIND_VAR_STATIC,
)
from mimic.spec import ParseError

_TYPE_KINDS = {"protocol": KIND_PROTOCOL, "class": KIND_CLASS}


class SwiftStructureBuilder:
    """
    Produces `sourcekitten structure`-shaped dictionaries for a Swift snippet.

    Declarations are located by searching for their text, so every offset is
    a real UTF-8 byte offset into `source`. The source is dedented the same
    way `WorkspaceFactory.with_source` dedents it.
    """

    def __init__(self, source: str):
        self.source = dedent(source)
        self.buffer = self.source.encode("utf-8")
        self._types: List[Dict[str, Any]] = []

    def find(self, snippet: str, start: int = 0, end: Optional[int] = None) -> int:
        index = self.buffer.find(
            snippet.encode("utf-8"), start, len(self.buffer) if end is None else end
        )
        if index < 0:
            raise ValueError(f"'{snippet}' not found in source")
        return index

    def matching(self, open_index: int, opening: bytes, closing: bytes) -> int:
        depth = 0
        for i in range(open_index, len(self.buffer)):
            char = self.buffer[i : i + 1]
            if char == opening:
                depth += 1
            elif char == closing:
                depth -= 1
                if depth == 0:
                    return i
        raise ValueError("unbalanced source")

    def doc_range(self, offset: int) -> Optional[Tuple[int, int]]:
        """The run of `///` lines directly above the line holding `offset`."""
        pos = self.buffer.rfind(b"\n", 0, offset) + 1
        start, end = None, None
        while pos > 0:
            prev_end = pos - 1
            prev_start = self.buffer.rfind(b"\n", 0, prev_end) + 1
            line = self.buffer[prev_start:prev_end]
            if not line.strip().startswith(b"///"):
                break
            start = prev_start + len(line) - len(line.lstrip())
            if end is None:
                end = prev_end
            pos = prev_start
        if start is None or end is None:
            return None
        return start, end - start

    def add_type(
        self,
        header: str,
        name: str,
        kind: str = "protocol",
        inherited: Sequence[str] = (),
        accessibility: str = "internal",
    ) -> "TypeStructure":
        offset = self.find(header)
        brace = self.find("{", offset)
        close = self.matching(brace, b"{", b"}")
        data: Dict[str, Any] = {
            KEY_KIND: _TYPE_KINDS[kind],
            KEY_NAME: name,
            KEY_ACCESSIBILITY: ACCESSIBILITY_PREFIX + accessibility,
            KEY_OFFSET: offset,
            KEY_LENGTH: close + 1 - offset,
            KEY_NAME_OFFSET: self.find(name, offset),
            KEY_NAME_LENGTH: len(name.encode("utf-8")),
            KEY_BODY_OFFSET: brace + 1,
            KEY_BODY_LENGTH: close - brace - 1,
            KEY_SUBSTRUCTURE: [],
        }
        if inherited:
            data[KEY_INHERITED_TYPES] = [{KEY_NAME: t} for t in inherited]
        doc = self.doc_range(offset)
        if doc:
            data[KEY_DOC_OFFSET], data[KEY_DOC_LENGTH] = doc
        self._types.append(data)
        return TypeStructure(self, data)

    def build(self) -> Dict[str, Any]:
        return {
            KEY_OFFSET: 0,
            KEY_LENGTH: len(self.buffer),
            KEY_SUBSTRUCTURE: self._types,
        }


class TypeStructure:
    def __init__(self, owner: SwiftStructureBuilder, data: Dict[str, Any]):
        self.owner = owner
        self.data = data
        self._cursor = data[KEY_BODY_OFFSET]

    @property
    def _end(self) -> int:
        return self.data[KEY_BODY_OFFSET] + self.data[KEY_BODY_LENGTH]

    def _locate(self, snippet: str) -> int:
        # Members are declared in order, so each search resumes after the last.
        offset = self.owner.find(snippet, self._cursor, self._end)
        self._cursor = offset + 1
        return offset

    def _name_offset(self, bare: str, offset: int) -> int:
        # `foo(` or `foo<`, so a short name never matches inside a keyword
        hits = [
            self.owner.buffer.find((bare + sep).encode("utf-8"), offset)
            for sep in "(<"
        ]
        return min(h for h in hits if h >= 0)

    def method(
        self,
        snippet: str,
        name: str,
        params: Sequence[Tuple[str, str]] = (),
        return_type: Optional[str] = None,
        generics: Sequence[Tuple[str, Optional[str]]] = (),
        static: bool = False,
        subscript: bool = False,
        accessibility: str = "internal",
        available: Optional[str] = None,
    ) -> "TypeStructure":
        owner = self.owner
        offset = self._locate(snippet)
        length = len(snippet.encode("utf-8"))
        bare = name.split("(")[0]
        name_offset = self._name_offset(bare, offset)
        paren = owner.find("(", name_offset + len(bare.encode("utf-8")))
        name_end = owner.matching(paren, b"(", b")") + 1

        if subscript:
            kind = KIND_SUBSCRIPT
        else:
            kind = KIND_METHOD_STATIC if static else KIND_METHOD_INSTANCE
        data: Dict[str, Any] = {
            KEY_KIND: kind,
            KEY_NAME: name,
            KEY_ACCESSIBILITY: ACCESSIBILITY_PREFIX + accessibility,
            KEY_OFFSET: offset,
            KEY_LENGTH: length,
            KEY_NAME_OFFSET: name_offset,
            KEY_NAME_LENGTH: name_end - name_offset,
        }
        if "{" in snippet:
            brace = owner.find("{", name_end)
            close = owner.matching(brace, b"{", b"}")
            data[KEY_LENGTH] = close + 1 - offset
            data[KEY_BODY_OFFSET] = brace + 1
            data[KEY_BODY_LENGTH] = close - brace - 1
            self._cursor = close + 1
        if return_type is not None:
            data[KEY_TYPE_NAME] = return_type
        if available is not None:
            attr_offset = owner.buffer.rfind(available.encode("utf-8"), 0, offset)
            data[KEY_ATTRIBUTES] = [
                {
                    KEY_ATTRIBUTE: ATTRIBUTE_AVAILABLE,
                    KEY_OFFSET: attr_offset,
                    KEY_LENGTH: len(available.encode("utf-8")),
                }
            ]

        substructure: List[Dict[str, Any]] = []
        for g, constraint in generics:
            generic = {KEY_KIND: KIND_GENERIC_TYPE_PARAM, KEY_NAME: g}
            if constraint:
                generic[KEY_TYPE_NAME] = constraint
            substructure.append(generic)
        substructure.extend(
            {KEY_KIND: KIND_VAR_PARAMETER, KEY_NAME: p, KEY_TYPE_NAME: t}
            for p, t in params
        )
        if substructure:
            data[KEY_SUBSTRUCTURE] = substructure
        self.data[KEY_SUBSTRUCTURE].append(data)
        return self

    def variable(
        self,
        snippet: str,
        name: str,
        type_name: Optional[str] = None,
        static: bool = False,
        accessibility: str = "internal",
    ) -> "TypeStructure":
        offset = self._locate(snippet)
        data: Dict[str, Any] = {
            KEY_KIND: KIND_VAR_STATIC if static else KIND_VAR_INSTANCE,
            KEY_NAME: name,
            KEY_ACCESSIBILITY: ACCESSIBILITY_PREFIX + accessibility,
            KEY_OFFSET: offset,
            KEY_LENGTH: len(snippet.encode("utf-8")),
            KEY_NAME_OFFSET: self.owner.find(" " + name, offset) + 1,
            KEY_NAME_LENGTH: len(name.encode("utf-8")),
        }
        if type_name is not None:
            data[KEY_TYPE_NAME] = type_name
        self.data[KEY_SUBSTRUCTURE].append(data)
        return self


class StaticStructureProvider:
    """Serves prepared structure dictionaries instead of running sourcekitten."""

    def __init__(self, structures: Optional[Dict[str, Dict[str, Any]]] = None):
        self.structures: Dict[str, Dict[str, Any]] = dict(structures or {})
        self.calls: List[str] = []

    def add(self, file_path: str, structure: Dict[str, Any]) -> "StaticStructureProvider":
        self.structures[file_path] = structure
        return self

    def load(self, file_path: str) -> Dict[str, Any]:
        self.calls.append(file_path)
        try:
            return self.structures[file_path]
        except KeyError:
            raise ParseError(file_path, "no structure registered")
