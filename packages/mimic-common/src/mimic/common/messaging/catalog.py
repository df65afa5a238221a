import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from .pointer import SemanticPointer


def find_project_root(start_dir: Optional[Path] = None) -> Path:
    """
    Finds the project root by searching upwards for common markers.
    Search priority: pyproject.toml -> .git
    """
    current_dir = (start_dir or Path.cwd()).resolve()
    while current_dir.parent != current_dir:
        if (current_dir / "pyproject.toml").is_file():
            return current_dir
        if (current_dir / ".git").is_dir():
            return current_dir
        current_dir = current_dir.parent
    return start_dir or Path.cwd()


class MessageCatalog:
    """
    Resolves message ids to templates from JSON files.

    Roots are searched in order; later roots override earlier ones. Each root
    may provide `needle/<lang>/*.json` (packaged assets) and
    `.mimic/needle/<lang>/*.json` (project overrides).
    """

    def __init__(self, roots: Optional[List[Path]] = None, default_lang: str = "en"):
        self.default_lang = default_lang
        self.roots: List[Path] = list(roots or [])
        self._registry: Dict[str, Dict[str, str]] = {}

    def _load_directory(self, directory: Path, registry: Dict[str, str]) -> None:
        for json_file in sorted(directory.rglob("*.json")):
            try:
                with json_file.open("r", encoding="utf-8") as f:
                    content = json.load(f)
            except (OSError, json.JSONDecodeError):
                # A broken override file must not take the tool down.
                continue
            for key, value in content.items():
                registry[key] = str(value)

    def _ensure_lang_loaded(self, lang: str) -> Dict[str, str]:
        if lang in self._registry:
            return self._registry[lang]

        merged: Dict[str, str] = {}
        for root in self.roots:
            for candidate in (root / "needle" / lang, root / ".mimic" / "needle" / lang):
                if candidate.is_dir():
                    self._load_directory(candidate, merged)

        self._registry[lang] = merged
        return merged

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Lookup order: target language, default language, then the key itself.
        """
        key = str(pointer)
        target_lang = lang or os.getenv("MIMIC_LANG", self.default_lang)

        val = self._ensure_lang_loaded(target_lang).get(key)
        if val is not None:
            return val

        if target_lang != self.default_lang:
            val = self._ensure_lang_loaded(self.default_lang).get(key)
            if val is not None:
                return val

        return key
