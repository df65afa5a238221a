from .param import ParamModel
from .closure import ClosureModel
from .method import MethodModel, encode_source, scan_suffix, split_declared_name
from .variable import VariableModel
from .entity import Entity, Member, build_entity

__all__ = [
    "ParamModel",
    "ClosureModel",
    "MethodModel",
    "VariableModel",
    "Entity",
    "Member",
    "build_entity",
    "encode_source",
    "scan_suffix",
    "split_declared_name",
]
