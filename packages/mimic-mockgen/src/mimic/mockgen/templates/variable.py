from typing import Dict, Optional

from mimic.common import capitalize_first_letter
from mimic.lang.swift.constants import SET_CALL_COUNT_SUFFIX, UNDERLYING_PREFIX
from mimic.lang.swift.types import default_value, is_optional
from mimic.spec import StaticKind

from .method import INDENT


def apply_variable_template(
    name: str,
    identifier: str,
    type_name: str,
    static_kind: StaticKind,
    access_level: str,
    type_keys: Optional[Dict[str, str]] = None,
) -> str:
    acl = f"{access_level} " if access_level else ""
    static = f"{static_kind.value} " if static_kind.value else ""
    set_count = f"{identifier}{SET_CALL_COUNT_SUFFIX}"

    lines = [f"{acl}{static}var {set_count} = 0"]
    if is_optional(type_name):
        lines.append(
            f"{acl}{static}var {name}: {type_name} = nil "
            f"{{ didSet {{ {set_count} += 1 }} }}"
        )
        return "\n".join(lines)

    underlying = f"{UNDERLYING_PREFIX}{capitalize_first_letter(identifier)}"
    value = default_value(type_name, type_keys)
    if value is None:
        lines.append(f"{acl}{static}var {underlying}: {type_name}!")
    else:
        lines.append(f"{acl}{static}var {underlying}: {type_name} = {value}")
    lines.extend(
        [
            f"{acl}{static}var {name}: {type_name} {{",
            f"{INDENT}get {{ return {underlying} }}",
            f"{INDENT}set {{",
            f"{INDENT * 2}{underlying} = newValue",
            f"{INDENT * 2}{set_count} += 1",
            f"{INDENT}}}",
            "}",
        ]
    )
    return "\n".join(lines)
