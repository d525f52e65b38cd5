from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Protocol

import yaml

from .errors import ConfigurationNotFoundError, InputContractError
from .types import ModuleGraph


class GraphProvider(Protocol):
    """Supplies the resolved module graph of a named dependency configuration."""

    def resolve(self, configuration: str) -> ModuleGraph: ...


class DocumentGraphProvider:
    """Graph provider backed by an exported resolution document.

    The document maps configuration names to their resolved modules::

        configurations:
          shadeTransitively:
            direct: [com.google.guava:guava]
            modules:
              - id: com.google.guava:guava
                version: 31.1-jre
                children: [com.google.guava:failureaccess]
                artifacts: [libs/guava-31.1-jre.jar]
    """

    def __init__(self, document: dict, base_dir: Path | None = None):
        configurations = document.get("configurations")
        if not isinstance(configurations, dict):
            raise InputContractError("Graph document has no 'configurations' mapping")
        self._configurations = configurations
        self.base_dir = base_dir

    @property
    def names(self) -> list[str]:
        return sorted(self._configurations)

    def resolve(self, configuration: str) -> ModuleGraph:
        if configuration not in self._configurations:
            raise ConfigurationNotFoundError(configuration, self.names)
        graph = ModuleGraph.from_dict(self._configurations[configuration] or {})
        if self.base_dir is None:
            return graph
        return _anchor_artifacts(graph, self.base_dir)


def _anchor_artifacts(graph: ModuleGraph, base_dir: Path) -> ModuleGraph:
    modules = []
    for module in graph:
        artifacts = tuple(
            artifact if Path(artifact).is_absolute() else str(base_dir / artifact) for artifact in module.artifacts
        )
        modules.append(replace(module, artifacts=artifacts))
    return ModuleGraph.of(modules, graph.direct)


def load_graph_document(path: Path) -> DocumentGraphProvider:
    """Load a YAML (or JSON) resolution document; relative artifacts resolve next to it."""

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise InputContractError(f"Graph document '{path}' must be a mapping")
    return DocumentGraphProvider(data, base_dir=path.resolve().parent)
