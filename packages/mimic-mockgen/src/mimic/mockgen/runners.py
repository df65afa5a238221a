from pathlib import Path
from typing import Dict, List, Optional, Union

from mimic.common import L, bus, source_buffers
from mimic.config import MimicConfig
from mimic.lang.swift import merge_import_lines
from mimic.lang.swift.constants import MOCK_SUFFIX
from mimic.spec import DeclKind, EntityExtractorProtocol, ErrorPolicy

from .models import Entity
from .pipeline import generate_processed_type_map, generate_protocol_map
from .renderer import MockClassRenderer
from .sink import EntityMap

SWIFT_SUFFIX = ".swift"


class OutputWriter:
    def write(self, path: Path, content: str) -> bool:
        """Writes `content` unless the file already holds it. Returns True on write."""
        if path.is_file() and path.read_text(encoding="utf-8") == content:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return True


class GenerateRunner:
    def __init__(
        self,
        root_path: Path,
        config: MimicConfig,
        extractor: EntityExtractorProtocol,
        processed_extractor: Optional[EntityExtractorProtocol] = None,
        renderer: Optional[MockClassRenderer] = None,
        writer: Optional[OutputWriter] = None,
        on_error: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
    ):
        self.root_path = root_path
        self.config = config
        self.extractor = extractor
        self.processed_extractor = processed_extractor or extractor
        self.renderer = renderer or MockClassRenderer()
        self.writer = writer or OutputWriter()
        self.on_error = ErrorPolicy(on_error)

    def _is_excluded(self, path: Path) -> bool:
        return any(path.stem.endswith(s) for s in self.config.exclude_suffixes)

    def _collect_files(self, entries: List[str], exclude: bool) -> List[str]:
        files = set()
        for entry in entries:
            path = self.root_path / entry
            if path.is_file():
                files.add(path)
            elif path.is_dir():
                files.update(path.rglob(f"*{SWIFT_SUFFIX}"))
        return sorted(
            str(f) for f in files if not (exclude and self._is_excluded(f))
        )

    def _type_keys(
        self, protocols: Dict[str, Entity], processed: Dict[str, Entity]
    ) -> Dict[str, str]:
        keys = {
            name[: -len(MOCK_SUFFIX)]: f"{name}()"
            for name in processed
            if name.endswith(MOCK_SUFFIX)
        }
        for name, entity in protocols.items():
            if entity.is_annotated:
                keys[name] = f"{entity.mock_name}()"
        return keys

    def _assemble(self, mocks: List[str], imports: List[str]) -> str:
        sections = []
        if self.config.header:
            sections.append(self.config.header.rstrip("\n"))
        if imports:
            sections.append("\n".join(imports))
        sections.extend(mocks)
        return "\n\n".join(sections) + "\n"

    def run(self) -> str:
        try:
            return self._generate()
        finally:
            # Cached buffers belong to the run that loaded them.
            source_buffers.clear()

    def _generate(self) -> str:
        sources = self._collect_files(self.config.scan_paths, exclude=True)
        if not sources:
            bus.warning(L.generate.no_sources)
            return ""
        bus.info(L.generate.start, count=len(sources))

        processed_map = EntityMap()
        mock_files = self._collect_files(self.config.mock_files, exclude=False)
        if mock_files:
            generate_processed_type_map(
                mock_files,
                self.processed_extractor,
                processed_map,
                self.config.max_concurrency,
                self.on_error,
            )
            bus.info(
                L.generate.processed.loaded,
                count=len(processed_map),
                files=len(mock_files),
            )

        protocol_map = EntityMap()
        generate_protocol_map(
            sources,
            self.extractor,
            protocol_map,
            self.config.max_concurrency,
            self.on_error,
        )

        protocols = protocol_map.by_name(DeclKind.PROTOCOL)
        processed = processed_map.by_name(DeclKind.CLASS)
        annotated = [
            e
            for e in protocol_map.sorted_entities()
            if e.kind == DeclKind.PROTOCOL and e.is_annotated
        ]
        bus.info(L.generate.protocols.found, count=len(annotated))

        type_keys = self._type_keys(protocols, processed)
        mocks = []
        for entity in annotated:
            mocks.append(self.renderer.render(entity, protocols, processed, type_keys))
            bus.debug(L.generate.mock.rendered, name=entity.mock_name)

        import_files = sorted({e.file_path for e in annotated})
        imports = merge_import_lines(protocol_map.imports[f] for f in import_files)
        content = self._assemble(mocks, imports)

        if self.config.output:
            output_path = self.root_path / self.config.output
            if self.writer.write(output_path, content):
                bus.success(L.generate.file.success, path=self.config.output)
            else:
                bus.info(L.generate.file.unchanged, path=self.config.output)
        return content
