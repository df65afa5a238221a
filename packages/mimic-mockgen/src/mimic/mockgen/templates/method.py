from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from mimic.lang.swift.constants import (
    CALL_COUNT_SUFFIX,
    DONE_INIT,
    HANDLER_SUFFIX,
    INIT_PREFIX,
    REQUIRED,
)
from mimic.lang.swift.types import is_unknown
from mimic.spec import StaticKind

if TYPE_CHECKING:
    from ..models.closure import ClosureModel
    from ..models.param import ParamModel

INDENT = "    "


def indent(text: str, level: int = 1) -> str:
    prefix = INDENT * level
    return "\n".join(prefix + line if line else line for line in text.splitlines())


def render_generics(generic_params: Sequence["ParamModel"]) -> str:
    decls = ", ".join(p.render_decl() for p in generic_params)
    return f"<{decls}>" if decls else ""


def render_params(params: Sequence["ParamModel"]) -> str:
    return ", ".join(p.render_decl() for p in params)


def _prefix(word: str) -> str:
    return f"{word} " if word else ""


def apply_method_template(
    name: str,
    identifier: str,
    is_initializer: bool,
    is_subscript: bool,
    generic_params: Sequence["ParamModel"],
    params: Sequence["ParamModel"],
    return_type: str,
    static_kind: StaticKind,
    access_level: str,
    suffix: str,
    handler: Optional["ClosureModel"],
    type_keys: Optional[Dict[str, str]] = None,
    attributes: Sequence[str] = (),
) -> str:
    acl = _prefix(access_level)
    generics = render_generics(generic_params)
    param_decls = render_params(params)

    if is_initializer:
        lines = [f"{REQUIRED} {acl}{INIT_PREFIX}{generics}({param_decls}) {{"]
        # Declaration order matters: later initializers may read earlier fields.
        lines.extend(f"{INDENT}self.{p.name} = {p.name}" for p in params)
        lines.append(f"{INDENT}{DONE_INIT} = true")
        lines.append("}")
        return "\n".join(lines)

    call_count = f"{identifier}{CALL_COUNT_SUFFIX}"
    handler_var = f"{identifier}{HANDLER_SUFFIX}"
    handler_type = handler.type_name if handler else "Any"
    static = _prefix(static_kind.value)
    keyword = "" if is_subscript else "func "
    returns = "" if is_unknown(return_type) else f"-> {return_type} "

    body: List[str] = [f"{call_count} += 1"]
    if handler:
        body.extend(handler.render(identifier, type_keys).splitlines())
    body_text = "\n".join(body)
    if is_subscript:
        # Writes through a subscript are accepted and ignored.
        body_text = "\n".join(["get {", indent(body_text), "}", "set { }"])

    lines = [
        f"{acl}{static}var {call_count} = 0",
        f"{acl}{static}var {handler_var}: {handler_type}",
    ]
    lines.extend(attributes)
    lines.append(
        f"{acl}{static}{keyword}{name}{generics}({param_decls}) "
        f"{_prefix(suffix)}{returns}{{"
    )
    lines.append(indent(body_text))
    lines.append("}")
    return "\n".join(lines)
