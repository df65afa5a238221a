from typing import Dict, List, Optional

from mimic.spec import UNKNOWN_TYPE

_SINGULAR_DEFAULTS: Dict[str, str] = {
    "Int": "0",
    "Int8": "0",
    "Int16": "0",
    "Int32": "0",
    "Int64": "0",
    "UInt": "0",
    "UInt8": "0",
    "UInt16": "0",
    "UInt32": "0",
    "UInt64": "0",
    "Double": "0.0",
    "Float": "0.0",
    "CGFloat": "0.0",
    "TimeInterval": "0.0",
    "Bool": "false",
    "String": '""',
    "Substring": '""',
    "Data": "Data()",
    "Date": "Date()",
    "UUID": "UUID()",
    "NSObject": "NSObject()",
}


def is_unknown(type_name: str) -> bool:
    return not type_name or type_name == UNKNOWN_TYPE


def is_void(type_name: str) -> bool:
    return is_unknown(type_name) or type_name.strip() in ("Void", "()")


def is_optional(type_name: str) -> bool:
    t = type_name.strip()
    return t.endswith("?") or t.endswith("!") or t.startswith("Optional<")


def is_inout(type_name: str) -> bool:
    return type_name.strip().startswith("inout ")


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Splits on `separator` ignoring occurrences nested in brackets."""
    parts: List[str] = []
    depth = 0
    current = ""
    for i, ch in enumerate(text):
        if ch in "([<":
            depth += 1
        elif ch in ")]" or (ch == ">" and text[i - 1 : i] != "-"):
            depth -= 1
        if ch == separator and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def default_value(
    type_name: str, type_keys: Optional[Dict[str, str]] = None
) -> Optional[str]:
    """
    Literal usable as a return value for `type_name`, or None when Swift has
    no obvious one.
    """
    t = type_name.strip()
    if is_unknown(t):
        return None
    if type_keys and t in type_keys:
        return type_keys[t]
    if is_optional(t):
        return "nil"
    if t in _SINGULAR_DEFAULTS:
        return _SINGULAR_DEFAULTS[t]
    if t.startswith("[") and t.endswith("]"):
        inner = t[1:-1]
        return "[:]" if len(split_top_level(inner, ":")) > 1 else "[]"
    if t.startswith(("Array<", "Set<")):
        return "[]"
    if t.startswith("Dictionary<"):
        return "[:]"
    if t.startswith("(") and t.endswith(")") and "->" not in t:
        elements = split_top_level(t[1:-1])
        values = [
            default_value(split_top_level(e, ":")[-1], type_keys) for e in elements
        ]
        if elements and all(v is not None for v in values):
            return f"({', '.join(v for v in values if v is not None)})"
    return None
