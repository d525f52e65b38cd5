from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Set

from .archive_reader import collect_entry_paths
from .classifier import classify
from .config import ShadingConfig
from .graph_provider import GraphProvider
from .memo import Once
from .relocation import RelocationPlan, plan_relocation
from .types import ShadingCalculation

logger = logging.getLogger(__name__)

EntryReader = Callable[[Iterable[Path]], Set[str]]


class ShadingEvaluation:
    """One build evaluation: classify once, plan relocation once.

    Resolving the underlying graphs has side effects in the host's resolution
    machinery, so every consumer of this object shares a single resolution.
    """

    def __init__(self, provider: GraphProvider, config: ShadingConfig, reader: EntryReader = collect_entry_paths):
        self.provider = provider
        self.config = config
        self._reader = reader
        self._calculation: Once[ShadingCalculation] = Once(self._calculate)
        self._plan: Once[RelocationPlan] = Once(self._plan_relocation)

    @property
    def calculation(self) -> ShadingCalculation:
        return self._calculation.get()

    def _calculate(self) -> ShadingCalculation:
        shaded = self.provider.resolve(self.config.shaded_configuration)
        unshaded = self.provider.resolve(self.config.unshaded_configuration)
        calculation = classify(shaded, unshaded, shaded.direct, self.config.banned.is_banned)
        logger.info(
            "Shading %d modules, rejected %d banned modules",
            len(calculation.accepted),
            len(calculation.rejected),
        )
        return calculation

    def rejected_coordinates(self) -> List[str]:
        """Rejected modules as ``group:name`` so they can be declared as external dependencies."""

        return sorted(str(module.id) for module in self.calculation.rejected)

    def accepted_archives(self) -> List[Path]:
        archives = {Path(artifact) for module in self.calculation.accepted for artifact in module.artifacts}
        return sorted(archives)

    def relocation_plan(self) -> RelocationPlan:
        return self._plan.get()

    def _plan_relocation(self) -> RelocationPlan:
        entry_paths = self._reader(self.accepted_archives())
        return plan_relocation(entry_paths, self.config.prefix)
