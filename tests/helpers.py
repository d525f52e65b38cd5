from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable

from shadejar.types import ModuleGraph, ModuleId, ResolvedModule


def graph(edges: dict[str, list[str]], direct: Iterable[str] = (), artifacts: dict[str, list[str]] | None = None) -> ModuleGraph:
    artifacts = artifacts or {}
    modules = [
        ResolvedModule(
            id=ModuleId.parse(name),
            version="1.0",
            children=tuple(ModuleId.parse(child) for child in children),
            artifacts=tuple(artifacts.get(name, [])),
        )
        for name, children in edges.items()
    ]
    return ModuleGraph.of(modules, [ModuleId.parse(d) for d in direct])


def ids(modules) -> set[str]:
    return {str(module.id) for module in modules}


def write_jar(path: Path, entries: Iterable[str]) -> Path:
    with zipfile.ZipFile(path, "w") as jar:
        for entry in entries:
            jar.writestr(zipfile.ZipInfo(entry), b"" if entry.endswith("/") else b"data")
    return path
