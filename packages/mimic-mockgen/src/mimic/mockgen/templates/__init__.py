from .method import apply_method_template, indent, render_generics, render_params
from .variable import apply_variable_template

__all__ = [
    "apply_method_template",
    "apply_variable_template",
    "indent",
    "render_generics",
    "render_params",
]
