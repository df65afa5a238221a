import json
import logging
import subprocess
from typing import Any, Dict, List, Optional

from mimic.common import extract_text
from mimic.spec import UNKNOWN_TYPE, DeclKind, DocRange, ParseError, SourceSpan

from .constants import (
    ACCESSIBILITY_PREFIX,
    ATTRIBUTE_AVAILABLE,
    INIT_PREFIX,
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
    KIND_METHOD_CLASS,
    KIND_METHOD_INSTANCE,
    KIND_METHOD_STATIC,
    KIND_PROTOCOL,
    KIND_SUBSCRIPT,
    KIND_VAR_CLASS,
    KIND_VAR_INSTANCE,
    KIND_VAR_PARAMETER,
    KIND_VAR_STATIC,
    PUBLIC_ACCESS_LEVELS,
)

log = logging.getLogger(__name__)

_STATIC_KINDS = {KIND_METHOD_STATIC, KIND_METHOD_CLASS, KIND_VAR_STATIC, KIND_VAR_CLASS}
_METHOD_KINDS = {KIND_METHOD_INSTANCE, KIND_METHOD_STATIC, KIND_METHOD_CLASS}
_VAR_KINDS = {KIND_VAR_INSTANCE, KIND_VAR_STATIC, KIND_VAR_CLASS}


class StructureNode:
    """A `sourcekitten structure` dictionary viewed as a DeclNode."""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    @property
    def name(self) -> str:
        return self._data.get(KEY_NAME, "")

    @property
    def kind(self) -> DeclKind:
        raw_kind = self._data.get(KEY_KIND, "")
        if raw_kind == KIND_PROTOCOL:
            return DeclKind.PROTOCOL
        if raw_kind == KIND_CLASS:
            return DeclKind.CLASS
        if raw_kind in _METHOD_KINDS:
            if raw_kind == KIND_METHOD_INSTANCE and self.name.startswith(
                INIT_PREFIX + "("
            ):
                return DeclKind.INITIALIZER
            return DeclKind.METHOD
        if raw_kind.startswith(KIND_SUBSCRIPT):
            return DeclKind.SUBSCRIPT
        if raw_kind in _VAR_KINDS:
            return DeclKind.VARIABLE
        if raw_kind == KIND_VAR_PARAMETER:
            return DeclKind.PARAMETER
        if raw_kind == KIND_GENERIC_TYPE_PARAM:
            return DeclKind.GENERIC_PARAM
        return DeclKind.OTHER

    @property
    def span(self) -> SourceSpan:
        doc: Optional[DocRange] = None
        if KEY_DOC_OFFSET in self._data:
            doc = DocRange(
                self._data[KEY_DOC_OFFSET], self._data.get(KEY_DOC_LENGTH, 0)
            )
        return SourceSpan(
            offset=self._data.get(KEY_OFFSET, 0),
            length=self._data.get(KEY_LENGTH, 0),
            name_offset=self._data.get(KEY_NAME_OFFSET, 0),
            name_length=self._data.get(KEY_NAME_LENGTH, 0),
            body_offset=self._data.get(KEY_BODY_OFFSET, -1),
            body_length=self._data.get(KEY_BODY_LENGTH, 0),
            doc=doc,
        )

    @property
    def type_name(self) -> str:
        return self._data.get(KEY_TYPE_NAME, UNKNOWN_TYPE)

    @property
    def is_static(self) -> bool:
        return self._data.get(KEY_KIND, "") in _STATIC_KINDS

    @property
    def access_level(self) -> str:
        level = self._data.get(KEY_ACCESSIBILITY, "")
        level = level[len(ACCESSIBILITY_PREFIX) :] if level else ""
        # internal, fileprivate and private all collapse to the default level
        return "public" if level in PUBLIC_ACCESS_LEVELS else ""

    @property
    def _attributes(self) -> List[Dict[str, Any]]:
        return self._data.get(KEY_ATTRIBUTES, [])

    @property
    def has_available_attribute(self) -> bool:
        return any(
            attr.get(KEY_ATTRIBUTE) == ATTRIBUTE_AVAILABLE for attr in self._attributes
        )

    @property
    def inherited_types(self) -> List[str]:
        return [t[KEY_NAME] for t in self._data.get(KEY_INHERITED_TYPES, [])]

    @property
    def substructures(self) -> List["StructureNode"]:
        return [StructureNode(sub) for sub in self._data.get(KEY_SUBSTRUCTURE, [])]

    def extract_attributes(self, buffer: bytes, filter_on: str) -> List[str]:
        return [
            extract_text(buffer, attr.get(KEY_OFFSET, 0), attr.get(KEY_LENGTH, 0))
            for attr in self._attributes
            if attr.get(KEY_ATTRIBUTE) == filter_on
        ]

    def __repr__(self) -> str:
        return f"<StructureNode {self.kind.value} '{self.name}'>"


class SourceKittenCLI:
    """Obtains structure dictionaries by shelling out to `sourcekitten`."""

    def __init__(self, executable: str = "sourcekitten"):
        self.executable = executable

    def load(self, file_path: str) -> Dict[str, Any]:
        log.debug("Running %s structure on %s", self.executable, file_path)
        try:
            result = subprocess.run(
                [self.executable, "structure", "--file", file_path],
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise ParseError(file_path, f"'{self.executable}' is not installed") from e
        except subprocess.CalledProcessError as e:
            raise ParseError(file_path, e.stderr.strip() or str(e)) from e

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ParseError(file_path, f"invalid structure output: {e}") from e


def top_level_nodes(structure: Dict[str, Any]) -> List[StructureNode]:
    return StructureNode(structure).substructures
