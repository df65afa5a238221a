from pathlib import Path
from textwrap import dedent
from typing import Any, Callable, Dict, List, Optional

import tomli_w

from .structure import StaticStructureProvider, SwiftStructureBuilder


class WorkspaceFactory:
    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Dict[str, Any]] = []
        self._pyproject_data: Dict[str, Any] = {}
        self.structures: Dict[str, Dict[str, Any]] = {}

    def with_config(self, mimic_config: Dict[str, Any]) -> "WorkspaceFactory":
        tool = self._pyproject_data.setdefault("tool", {})
        tool["mimic"] = mimic_config
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": path, "content": dedent(content), "format": "raw"}
        )
        return self

    def with_swift(
        self,
        path: str,
        content: str,
        describe: Optional[Callable[[SwiftStructureBuilder], Any]] = None,
    ) -> "WorkspaceFactory":
        """
        Adds a Swift source together with the structure sourcekitten would
        report for it. `describe` declares the types on the builder.
        """
        self.with_source(path, content)
        builder = SwiftStructureBuilder(content)
        if describe:
            describe(builder)
        self.structures[self.path_of(path)] = builder.build()
        return self

    def structure_provider(self) -> StaticStructureProvider:
        return StaticStructureProvider(self.structures)

    def path_of(self, path: str) -> str:
        return str(self.root_path / path)

    def build(self) -> Path:
        if self._pyproject_data:
            self._files_to_create.append(
                {
                    "path": "pyproject.toml",
                    "content": self._pyproject_data,
                    "format": "toml",
                }
            )

        for file_spec in self._files_to_create:
            output_path = self.root_path / file_spec["path"]
            output_path.parent.mkdir(parents=True, exist_ok=True)

            if file_spec["format"] == "toml":
                with output_path.open("wb") as f:
                    tomli_w.dump(file_spec["content"], f)
            else:
                output_path.write_text(file_spec["content"], encoding="utf-8")

        return self.root_path
