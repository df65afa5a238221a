from typing import Dict, List

from mimic.spec import DeclKind

from .models import Entity


class EntityMap:
    """
    Append-only collection of everything the pipeline extracted.

    `append` is the only mutator; the pipeline serialises calls to it.
    """

    def __init__(self):
        self.entities: List[Entity] = []
        self.imports: Dict[str, List[str]] = {}

    def append(self, entities: List[Entity], imports: Dict[str, List[str]]) -> None:
        self.entities.extend(entities)
        self.imports.update(imports)

    def sorted_entities(self) -> List[Entity]:
        # Files finish in any order; sort for stable output.
        return sorted(self.entities, key=lambda e: (e.file_path, e.offset))

    def by_name(self, kind: DeclKind) -> Dict[str, Entity]:
        result: Dict[str, Entity] = {}
        for entity in self.sorted_entities():
            if entity.kind == kind:
                result.setdefault(entity.name, entity)
        return result

    def __len__(self) -> int:
        return len(self.entities)
