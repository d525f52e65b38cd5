from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .banned import BannedLibraries
from .relocation import RelocationPlan
from .types_modules import ResolvedModule, ShadingCalculation


@dataclass
class ShadingReport:
    calculation: ShadingCalculation
    banned: BannedLibraries
    generated_at: datetime = field(default_factory=datetime.utcnow)
    plan: Optional[RelocationPlan] = None

    @property
    def accepted(self) -> list[ResolvedModule]:
        return sorted(self.calculation.accepted, key=lambda m: m.id)

    @property
    def rejected(self) -> list[ResolvedModule]:
        return sorted(self.calculation.rejected, key=lambda m: m.id)

    def rejection_reason(self, module: ResolvedModule) -> str:
        rule = self.banned.matching_rule(module)
        return rule.describe() if rule else "unknown"
