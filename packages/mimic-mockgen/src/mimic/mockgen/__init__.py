__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .models import (
    ClosureModel,
    Entity,
    MethodModel,
    ParamModel,
    VariableModel,
    build_entity,
)
from .naming import name_by_level, resolve_identifiers
from .signature import DefaultSignatureStrategy
from .templates import apply_method_template, apply_variable_template
from .renderer import MockClassRenderer
from .sink import EntityMap
from .extractors import SourceKitExtractor, SyntaxTreeExtractor, create_extractor
from .pipeline import (
    generate_entity_map,
    generate_processed_type_map,
    generate_protocol_map,
)
from .runners import GenerateRunner, OutputWriter

__all__ = [
    "ClosureModel",
    "Entity",
    "MethodModel",
    "ParamModel",
    "VariableModel",
    "build_entity",
    "name_by_level",
    "resolve_identifiers",
    "DefaultSignatureStrategy",
    "apply_method_template",
    "apply_variable_template",
    "MockClassRenderer",
    "EntityMap",
    "SourceKitExtractor",
    "SyntaxTreeExtractor",
    "create_extractor",
    "generate_entity_map",
    "generate_processed_type_map",
    "generate_protocol_map",
    "GenerateRunner",
    "OutputWriter",
]
