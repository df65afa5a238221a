import logging
from typing import List, Optional, Tuple

from mimic.lang.swift import SourceKittenCLI, find_import_lines, top_level_nodes
from mimic.lang.swift.constants import DEFAULT_ANNOTATION
from mimic.spec import (
    ConfigError,
    DeclKind,
    SignatureStrategyProtocol,
    SourceReadError,
    StructureProviderProtocol,
)

from .models import Entity, build_entity, encode_source

log = logging.getLogger(__name__)

ENTITY_KINDS = (DeclKind.PROTOCOL, DeclKind.CLASS)


def read_source(file_path: str) -> str:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(file_path, str(e)) from e


class SourceKitExtractor:
    """Builds entities from `sourcekitten structure` output."""

    def __init__(
        self,
        provider: Optional[StructureProviderProtocol] = None,
        annotation: str = DEFAULT_ANNOTATION,
        strategy: Optional[SignatureStrategyProtocol] = None,
    ):
        self.provider = provider or SourceKittenCLI()
        self.annotation = annotation
        self.strategy = strategy

    def extract(
        self, file_path: str, processed: bool
    ) -> Tuple[List[Entity], List[str]]:
        content = read_source(file_path)
        nodes = top_level_nodes(self.provider.load(file_path))
        buffer = encode_source(file_path, content, processed)
        entities = [
            build_entity(
                node,
                file_path,
                content,
                processed,
                self.annotation,
                self.strategy,
                buffer,
            )
            for node in nodes
            if node.kind in ENTITY_KINDS
        ]
        first_offset = min((n.span.offset for n in nodes), default=None)
        imports = find_import_lines(buffer, first_offset)
        log.debug(
            "%s: %d entities, %d imports", file_path, len(entities), len(imports)
        )
        return entities, imports


class SyntaxTreeExtractor:
    """Builds entities from a tree-sitter parse of the file."""

    def __init__(
        self,
        annotation: str = DEFAULT_ANNOTATION,
        strategy: Optional[SignatureStrategyProtocol] = None,
    ):
        # Deferred so the SourceKit backend does not need the grammar wheels.
        from mimic.lang.swift.syntax import EntityVisitor, SwiftSyntaxParser

        self.parser = SwiftSyntaxParser()
        self.visitor = EntityVisitor(kinds=ENTITY_KINDS)
        self.annotation = annotation
        self.strategy = strategy

    def extract(
        self, file_path: str, processed: bool
    ) -> Tuple[List[Entity], List[str]]:
        content = read_source(file_path)
        buffer = encode_source(file_path, content, processed)
        root = self.parser.parse(buffer, file_path)
        result = self.visitor.walk(root, buffer)
        entities = [
            build_entity(
                decl,
                file_path,
                content,
                processed,
                self.annotation,
                self.strategy,
                buffer,
            )
            for decl in result.declarations
        ]
        log.debug(
            "%s: %d entities, %d imports",
            file_path,
            len(entities),
            len(result.imports),
        )
        return entities, result.imports


def create_extractor(
    backend: str,
    annotation: str = DEFAULT_ANNOTATION,
    provider: Optional[StructureProviderProtocol] = None,
):
    if backend == "sourcekit":
        return SourceKitExtractor(provider=provider, annotation=annotation)
    if backend == "syntax":
        return SyntaxTreeExtractor(annotation=annotation)
    raise ConfigError(f"Unknown parser backend '{backend}'")
