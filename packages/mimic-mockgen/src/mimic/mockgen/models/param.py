from dataclasses import dataclass

from mimic.lang.swift.types import is_inout, is_unknown
from mimic.spec import UNKNOWN_TYPE


@dataclass
class ParamModel:
    name: str
    label: str = ""
    type_name: str = UNKNOWN_TYPE
    is_generic: bool = False

    def render_decl(self) -> str:
        if self.is_generic:
            if is_unknown(self.type_name):
                return self.name
            return f"{self.name}: {self.type_name}"

        if not self.label or self.label == self.name:
            return f"{self.name}: {self.type_name}"
        return f"{self.label} {self.name}: {self.type_name}"

    def render_argument(self) -> str:
        if is_inout(self.type_name):
            return f"&{self.name}"
        return self.name
