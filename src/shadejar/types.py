from __future__ import annotations

"""Shared data structures for dependency classification and relocation.

The definitions live in domain-focused modules; this module keeps a single
stable import path for callers.
"""

from .types_modules import ModuleGraph, ModuleId, ResolvedModule, ShadingCalculation
from .types_relocation import MultiReleasePath

__all__ = [
    "ModuleGraph",
    "ModuleId",
    "MultiReleasePath",
    "ResolvedModule",
    "ShadingCalculation",
]
