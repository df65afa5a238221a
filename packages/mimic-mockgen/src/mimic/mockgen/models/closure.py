from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mimic.lang.swift.constants import ASYNC, HANDLER_SUFFIX, RETHROWS, THROWS
from mimic.lang.swift.types import default_value, is_unknown, is_void
from mimic.spec import UNKNOWN_TYPE, StaticKind


@dataclass
class ClosureModel:
    """The handler slot of a mocked member and the code that invokes it."""

    name: str
    generic_type_names: List[str] = field(default_factory=list)
    param_names: List[str] = field(default_factory=list)
    param_types: List[str] = field(default_factory=list)
    # Forwarded argument fragments, `&x` for inout parameters
    arguments: List[str] = field(default_factory=list)
    return_type: str = UNKNOWN_TYPE
    static_kind: StaticKind = StaticKind.NONE
    suffix: str = ""

    def _erase_generics(self, type_name: str) -> str:
        stripped = type_name.strip()
        bare = stripped.rstrip("?!")
        if bare in self.generic_type_names:
            return "Any" + stripped[len(bare) :]
        return type_name

    @property
    def is_throwing(self) -> bool:
        return THROWS in self.suffix.split() or RETHROWS in self.suffix.split()

    @property
    def is_async(self) -> bool:
        return ASYNC in self.suffix.split()

    @property
    def returns_generic(self) -> bool:
        return self._erase_generics(self.return_type) != self.return_type

    @property
    def type_name(self) -> str:
        params = ", ".join(self._erase_generics(t) for t in self.param_types)
        ret = "()" if is_unknown(self.return_type) else self.return_type
        ret = self._erase_generics(ret)

        effects = []
        if self.is_async:
            effects.append(ASYNC)
        if self.is_throwing:
            # A stored closure cannot rethrow
            effects.append(THROWS)
        effect_str = f" {' '.join(effects)}" if effects else ""
        return f"(({params}){effect_str} -> ({ret}))?"

    def default_return(
        self, identifier: str, type_keys: Optional[Dict[str, str]] = None
    ) -> str:
        if is_void(self.return_type):
            return ""
        value = default_value(self.return_type, type_keys)
        if value is not None:
            return f"return {value}"
        handler = f"{identifier}{HANDLER_SUFFIX}"
        return (
            f'fatalError("{handler} returns can\'t have a default value '
            f'thus its handler must be set")'
        )

    def render(
        self, identifier: str, type_keys: Optional[Dict[str, str]] = None
    ) -> str:
        handler = f"{identifier}{HANDLER_SUFFIX}"
        owner = "Self." if self.static_kind == StaticKind.STATIC else ""
        call = f"{handler}({', '.join(self.arguments)})"
        if self.is_async:
            call = f"await {call}"
        if self.is_throwing:
            call = f"try {call}"
        if self.returns_generic:
            call = f"{call} as! {self.return_type}"

        lines = [
            f"if let {handler} = {owner}{handler} {{",
            f"    return {call}",
            "}",
        ]
        default = self.default_return(identifier, type_keys)
        if default:
            lines.append(default)
        return "\n".join(lines)
