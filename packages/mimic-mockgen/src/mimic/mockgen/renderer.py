from typing import Dict, List, Mapping, Optional, Set, Tuple

from mimic.lang.swift.constants import DONE_INIT, MOCK_SUFFIX
from mimic.lang.swift.types import is_optional

from .models import Entity, Member, MethodModel, VariableModel
from .naming import resolve_identifiers
from .templates import indent


class MockClassRenderer:
    """
    Renders one annotated protocol as a mock class.

    Inherited requirements are merged in: a parent protocol found among the
    scanned sources is synthesised like the entity itself, while a parent that
    only exists as a previously generated `<Parent>Mock` contributes that
    mock's text verbatim.
    """

    def _collect(
        self,
        entity: Entity,
        protocols: Mapping[str, Entity],
        processed: Mapping[str, Entity],
        visited: Set[str],
    ) -> Tuple[List[Member], List[Member]]:
        synthesized: List[Member] = list(entity.members)
        passthrough: List[Member] = []
        for parent in entity.inherited_types:
            if parent in visited:
                continue
            visited.add(parent)
            if parent in protocols:
                more, verbatim = self._collect(
                    protocols[parent], protocols, processed, visited
                )
                synthesized.extend(more)
                passthrough.extend(verbatim)
            elif parent + MOCK_SUFFIX in processed:
                passthrough.extend(
                    m
                    for m in processed[parent + MOCK_SUFFIX].members
                    if not m.is_initializer and m.name != DONE_INIT
                )
        return synthesized, passthrough

    def _requirement_key(self, member: Member) -> Tuple:
        if isinstance(member, MethodModel):
            return (
                member.raw_name,
                tuple(g.type_name for g in member.generic_params),
                tuple(p.type_name for p in member.params),
                member.type_name,
                member.static_kind,
            )
        return (member.raw_name, member.type_name, member.static_kind)

    def _dedupe(self, members: List[Member]) -> List[Member]:
        # Diamond inheritance reaches the same requirement more than once.
        seen: Set[Tuple] = set()
        unique = []
        for member in members:
            key = self._requirement_key(member)
            if key in seen:
                continue
            seen.add(key)
            unique.append(member)
        return unique

    def _stored_vars(self, members: List[Member], acl: str) -> List[str]:
        declared = {m.name for m in members if isinstance(m, VariableModel)}
        lines = []
        for member in members:
            if not (isinstance(member, MethodModel) and member.is_initializer):
                continue
            for param in member.params:
                if param.name in declared:
                    continue
                declared.add(param.name)
                type_name = param.type_name
                if not is_optional(type_name):
                    type_name += "!"
                lines.append(f"{acl}var {param.name}: {type_name}")
        return lines

    def render(
        self,
        entity: Entity,
        protocols: Mapping[str, Entity],
        processed: Optional[Mapping[str, Entity]] = None,
        type_keys: Optional[Dict[str, str]] = None,
    ) -> str:
        synthesized, passthrough = self._collect(
            entity, protocols, processed or {}, {entity.name}
        )
        synthesized = self._dedupe(synthesized)
        acl = f"{entity.access_level} " if entity.access_level else ""

        header: List[str] = []
        if any(m.is_initializer for m in synthesized):
            header.append(f"private var {DONE_INIT} = false")
        header.append(f"{acl}init() {{ }}")
        header.extend(self._stored_vars(synthesized, acl))

        reserved = {DONE_INIT} | {m.name for m in passthrough}
        identifiers = resolve_identifiers(synthesized, reserved)

        blocks = ["\n".join(header)]
        for member, identifier in zip(synthesized, identifiers):
            text = member.render(identifier, type_keys)
            if text:
                blocks.append(text)

        lines = list(entity.attributes)
        lines.append(f"{acl}class {entity.mock_name}: {entity.name} {{")
        lines.append("\n\n".join(indent(b) for b in blocks))
        for member in passthrough:
            text = member.render(member.name, type_keys)
            if text:
                # Verbatim text keeps its own indentation after the first line.
                first, newline, rest = text.partition("\n")
                lines.append(indent(first) + newline + rest)
        lines.append("}")
        return "\n".join(lines)
