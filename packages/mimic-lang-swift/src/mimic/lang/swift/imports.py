from typing import Iterable, List, Optional

_IMPORT_PREFIXES = ("import ", "@testable import ", "@_implementationOnly import ")
_DIRECTIVE_PREFIXES = ("#if", "#elseif", "#else", "#endif")


def find_import_lines(content: bytes, offset: Optional[int] = None) -> List[str]:
    """
    Returns the import statements (and the conditional compilation directives
    wrapping them) that appear before the first declaration.

    `offset` is the byte offset of the first declaration; `None` scans the
    whole file.
    """
    head = content if offset is None else content[:offset]
    lines: List[str] = []
    for raw_line in head.decode("utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith(_IMPORT_PREFIXES):
            lines.append(line)
        elif line.startswith(_DIRECTIVE_PREFIXES):
            lines.append(line)

    # Directives that guard no import are noise
    return _drop_empty_blocks(lines)


def _drop_empty_blocks(lines: List[str]) -> List[str]:
    result: List[str] = []
    for line in lines:
        if line.startswith("#endif") and result and result[-1].startswith("#if"):
            result.pop()
            continue
        result.append(line)
    return result


def merge_import_lines(groups: Iterable[List[str]]) -> List[str]:
    """
    Concatenates per-file import lists, keeping the first occurrence of each
    unconditional import. Directive lines are kept so guarded imports stay
    inside their blocks.
    """
    seen = set()
    merged: List[str] = []
    depth = 0
    for lines in groups:
        for line in lines:
            if line.startswith(_DIRECTIVE_PREFIXES):
                if line.startswith("#if"):
                    depth += 1
                elif line.startswith("#endif"):
                    depth -= 1
                merged.append(line)
                continue
            if depth == 0:
                if line in seen:
                    continue
                seen.add(line)
            merged.append(line)
    return _drop_empty_blocks(merged)
