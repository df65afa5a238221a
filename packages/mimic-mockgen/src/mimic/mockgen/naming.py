from typing import Dict, Iterable, List, Protocol, Sequence, Set


class NamedMember(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def signature_components(self) -> List[str]: ...

    def name_by(self, level: int) -> str: ...


def name_by_level(name: str, components: Sequence[str], level: int) -> str:
    """
    `level` 0 is the bare name; each further level appends the next component,
    or the distance past the last component once they run out.
    """
    if level <= 0:
        return name
    diff = level - len(components)
    postfix = str(diff) if diff > 0 else components[level - 1]
    return name_by_level(name, components, level - 1) + postfix


def _group_level(group: List[NamedMember]) -> int:
    if len(group) == 1:
        return 0
    depth = max(len(m.signature_components) for m in group)
    for level in range(1, depth + 1):
        names = {m.name_by(level) for m in group}
        if len(names) == len(group):
            return level
    return depth


def resolve_identifiers(
    members: Sequence[NamedMember], reserved: Iterable[str] = ()
) -> List[str]:
    """
    Assigns every member an identifier unique within its scope.

    Members sharing a bare name start at the shallowest level that separates
    them all; anything still clashing with a taken or reserved identifier is
    pushed to deeper levels. Numeric postfixes make every probe sequence
    strictly grow, so resolution always terminates.
    """
    groups: Dict[str, List[int]] = {}
    for index, member in enumerate(members):
        groups.setdefault(member.name, []).append(index)

    taken: Set[str] = set(reserved)
    identifiers: List[str] = [""] * len(members)
    for indices in groups.values():
        level = _group_level([members[i] for i in indices])
        for index in indices:
            member = members[index]
            probe = level
            candidate = member.name_by(probe)
            while candidate in taken:
                probe += 1
                candidate = member.name_by(probe)
            taken.add(candidate)
            identifiers[index] = candidate
    return identifiers
