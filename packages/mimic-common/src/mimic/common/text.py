import re

from mimic.spec import UNKNOWN_TYPE

_TYPE_SEPARATORS = re.compile(r"[^A-Za-z0-9_]+")


def capitalize_first_letter(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def displayable_for_type(type_name: str) -> str:
    """
    Collapses a type expression into something usable inside an identifier.

    `[String: Int]?` -> `StringIntOptional`, `(Int) -> Void` -> `IntVoid`.
    """
    if not type_name or type_name == UNKNOWN_TYPE:
        return ""
    normalized = type_name.replace("?", " Optional ").replace("!", " Unwrapped ")
    parts = _TYPE_SEPARATORS.split(normalized)
    return "".join(capitalize_first_letter(p) for p in parts if p)


def extract_text(buffer: bytes, offset: int, length: int) -> str:
    """Decodes the byte range [offset, offset + length) of a UTF-8 buffer."""
    if offset < 0 or length <= 0:
        return ""
    return buffer[offset : offset + length].decode("utf-8")
