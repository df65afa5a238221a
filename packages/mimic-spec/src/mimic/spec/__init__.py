# This must be the very first line to allow this package to coexist with other
# namespace packages in editable installs.
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .models import (
    UNKNOWN_TYPE,
    DeclKind,
    DocRange,
    ErrorPolicy,
    ParseFailure,
    SourceSpan,
    StaticKind,
)
from .errors import (
    ConfigError,
    GenerationAbortedError,
    InconsistentDeclarationError,
    MimicError,
    ParseError,
    SourceReadError,
)
from .protocols import (
    DeclNode,
    EntityExtractorProtocol,
    ResultSinkProtocol,
    SignatureStrategyProtocol,
    StructureProviderProtocol,
)

__all__ = [
    "UNKNOWN_TYPE",
    "DeclKind",
    "DocRange",
    "ErrorPolicy",
    "ParseFailure",
    "SourceSpan",
    "StaticKind",
    # Errors
    "ConfigError",
    "GenerationAbortedError",
    "InconsistentDeclarationError",
    "MimicError",
    "ParseError",
    "SourceReadError",
    # Protocols
    "DeclNode",
    "EntityExtractorProtocol",
    "ResultSinkProtocol",
    "SignatureStrategyProtocol",
    "StructureProviderProtocol",
]
