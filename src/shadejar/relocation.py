"""Relocation planning for the entries of bundled archives.

The rewrite engine asks two questions per entry or class reference: may it be
relocated, and where to. Multi-release archives keep version specific copies
of a class under ``META-INF/versions/<n>/``; those copies are relocated to the
same name as the base copy with the version prefix left untouched, so call
sites compiled against the relocated name resolve whichever copy the runtime
loads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .errors import InputContractError
from .multi_release import CLASS_SUFFIX, MANIFEST_PATH, check_relative, split_multi_release_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelocationPlan:
    prefix: str
    entry_paths: frozenset[str]
    relocatable: frozenset[str]
    multi_release_companions: frozenset[str]

    @property
    def needs_manifest_attribute(self) -> bool:
        return bool(self.multi_release_companions)

    @property
    def path_prefix(self) -> str:
        return self.prefix.replace(".", "/") + "/"

    @property
    def class_prefix(self) -> str:
        return self.prefix + "."

    def can_relocate_path(self, path: str) -> bool:
        return path + CLASS_SUFFIX in self.relocatable or path in self.relocatable

    def can_relocate_class(self, class_name: str) -> bool:
        if "/" in class_name:
            return False
        return self.can_relocate_path(class_name.replace(".", "/"))

    def relocate_path(self, path: str) -> str:
        pair = split_multi_release_path(path)
        if pair is not None:
            output = pair.join(self._relocate_plain_path(pair.base_path))
            logger.debug("relocate_multi_release_path('%s') -> %s", path, output)
            return output

        output = self._relocate_plain_path(path)
        logger.debug("relocate_path('%s') -> %s", path, output)
        return output

    def relocate_class(self, class_name: str) -> str:
        output = self.class_prefix + class_name
        logger.debug("relocate_class('%s') -> %s", class_name, output)
        return output

    def _relocate_plain_path(self, path: str) -> str:
        return self.path_prefix + path

    def mapping(self) -> dict[str, str]:
        """Return the new name of every relocatable entry of the scanned archives."""

        return {
            path: self.relocate_path(path)
            for path in sorted(self.entry_paths)
            if self.can_relocate_path(path)
        }

    def as_dict(self) -> dict:
        return {
            "prefix": self.prefix,
            "needs_manifest_attribute": self.needs_manifest_attribute,
            "multi_release_companions": sorted(self.multi_release_companions),
            "relocations": self.mapping(),
        }


def validate_prefix(prefix: str) -> str:
    cleaned = (prefix or "").strip().strip(".")
    if not cleaned:
        raise InputContractError("Relocation prefix must not be empty")
    if "/" in cleaned:
        raise InputContractError(f"Relocation prefix '{prefix}' must be a dotted namespace, not a path")
    if "" in cleaned.split("."):
        raise InputContractError(f"Relocation prefix '{prefix}' has an empty namespace segment")
    if cleaned != cleaned.lower() or "-" in cleaned:
        logger.warning("Relocation prefix '%s' is not lower-cased and hyphen-free", cleaned)
    return cleaned


def plan_relocation(entry_paths: Iterable[str], prefix: str) -> RelocationPlan:
    paths = frozenset(check_relative(path) for path in entry_paths)

    # The relocator rewrites call sites as well as file names, so the base
    # name of each versioned class must be relocatable too.
    companions = set()
    for path in paths:
        pair = split_multi_release_path(path)
        if pair is not None:
            companions.add(pair.base_path)

    relocatable = (paths | companions) - {MANIFEST_PATH}

    plan = RelocationPlan(
        prefix=validate_prefix(prefix),
        entry_paths=paths,
        relocatable=frozenset(relocatable),
        multi_release_companions=frozenset(companions),
    )
    logger.debug(
        "Planned relocation of %d paths (%d multi-release companions) under '%s'",
        len(plan.relocatable),
        len(companions),
        plan.prefix,
    )
    return plan
