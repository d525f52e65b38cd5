from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from .errors import GraphIntegrityError, InputContractError


@dataclass(frozen=True, order=True)
class ModuleId:
    group: str
    name: str

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"

    @classmethod
    def parse(cls, coordinate: str) -> "ModuleId":
        """Parse ``group:name`` (a trailing ``:version`` is ignored)."""

        parts = coordinate.strip().split(":")
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise InputContractError(f"Invalid module coordinate '{coordinate}', expected group:name")
        return cls(group=parts[0], name=parts[1])


@dataclass(frozen=True, eq=False)
class ResolvedModule:
    """A node of a resolved dependency graph.

    Equality and hashing only look at ``id``: a module reached through two
    different parents is the same set member even when the nodes were built
    separately.
    """

    id: ModuleId
    version: Optional[str] = None
    children: Tuple[ModuleId, ...] = ()
    artifacts: Tuple[str, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedModule):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def coordinate(self) -> str:
        if self.version:
            return f"{self.id}:{self.version}"
        return str(self.id)


@dataclass(frozen=True)
class ModuleGraph:
    """Arena of resolved modules keyed by identity.

    ``direct`` holds the identities declared directly in the configuration
    that produced the graph; everything else was pulled in transitively.
    """

    modules: dict[ModuleId, ResolvedModule] = field(default_factory=dict)
    direct: frozenset[ModuleId] = frozenset()

    def __post_init__(self) -> None:
        for module in self.modules.values():
            for child in module.children:
                if child not in self.modules:
                    raise GraphIntegrityError(
                        f"Module {module.id} lists child {child} which is not part of the resolved graph"
                    )

    def __contains__(self, item: object) -> bool:
        if isinstance(item, ResolvedModule):
            return item.id in self.modules
        return item in self.modules

    def __iter__(self) -> Iterator[ResolvedModule]:
        return iter(self.modules.values())

    def __len__(self) -> int:
        return len(self.modules)

    def get(self, module_id: ModuleId) -> ResolvedModule:
        return self.modules[module_id]

    def children_of(self, module: ResolvedModule) -> list[ResolvedModule]:
        return [self.modules[child] for child in module.children]

    @classmethod
    def of(cls, modules: Iterable[ResolvedModule], direct: Iterable[ModuleId] = ()) -> "ModuleGraph":
        arena: dict[ModuleId, ResolvedModule] = {}
        for module in modules:
            if module.id in arena:
                raise GraphIntegrityError(f"Module {module.id} appears more than once in the resolved graph")
            arena[module.id] = module
        return cls(modules=arena, direct=frozenset(direct))

    @classmethod
    def from_dict(cls, data: dict) -> "ModuleGraph":
        modules: list[ResolvedModule] = []
        for entry in data.get("modules", []) or []:
            if isinstance(entry, str):
                modules.append(ResolvedModule(id=ModuleId.parse(entry)))
                continue
            coordinate = entry.get("id")
            if not coordinate:
                if not (entry.get("group") and entry.get("name")):
                    raise InputContractError(f"Graph entry {entry!r} needs an 'id' or both 'group' and 'name'")
                coordinate = f"{entry['group']}:{entry['name']}"
            module_id = ModuleId.parse(str(coordinate))
            version = entry.get("version")
            if version is None and str(coordinate).count(":") >= 2:
                version = str(coordinate).split(":", 2)[2]
            modules.append(
                ResolvedModule(
                    id=module_id,
                    version=str(version) if version is not None else None,
                    children=tuple(ModuleId.parse(str(c)) for c in entry.get("children", []) or []),
                    artifacts=tuple(str(a) for a in entry.get("artifacts", []) or []),
                )
            )
        direct = [ModuleId.parse(str(d)) for d in data.get("direct", []) or []]
        return cls.of(modules, direct)


@dataclass(frozen=True)
class ShadingCalculation:
    accepted: frozenset[ResolvedModule]
    rejected: frozenset[ResolvedModule]

    def as_dict(self) -> dict:
        return {
            "accepted": sorted(m.coordinate for m in self.accepted),
            "rejected": sorted(m.coordinate for m in self.rejected),
        }
