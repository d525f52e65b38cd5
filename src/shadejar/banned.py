"""Banned-library rules.

Libraries matched here must never be bundled: two copies of a logging facade
or a metrics registry on one classpath break at runtime. Rules are a small
expression tree so combinations such as "group X and (artifact A or artifact
B)" stay plain data that can be printed and compared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from .errors import MissingPolicyError
from .types import ModuleId, ResolvedModule


class _Rule:
    def matches(self, module: ModuleId) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def describe(self) -> str:  # pragma: no cover - overridden
        raise NotImplementedError

    def __and__(self, other: "Rule") -> "AllOf":
        return AllOf(self, other)

    def __or__(self, other: "Rule") -> "AnyOf":
        return AnyOf(self, other)


@dataclass(frozen=True)
class GroupOf(_Rule):
    group: str

    def matches(self, module: ModuleId) -> bool:
        return module.group == self.group

    def describe(self) -> str:
        return f"group={self.group}"


@dataclass(frozen=True)
class ArtifactOf(_Rule):
    name: str

    def matches(self, module: ModuleId) -> bool:
        return module.name == self.name

    def describe(self) -> str:
        return f"artifact={self.name}"


@dataclass(frozen=True)
class AllOf(_Rule):
    left: "Rule"
    right: "Rule"

    def matches(self, module: ModuleId) -> bool:
        return self.left.matches(module) and self.right.matches(module)

    def describe(self) -> str:
        return f"({self.left.describe()} and {self.right.describe()})"


@dataclass(frozen=True)
class AnyOf(_Rule):
    left: "Rule"
    right: "Rule"

    def matches(self, module: ModuleId) -> bool:
        return self.left.matches(module) or self.right.matches(module)

    def describe(self) -> str:
        return f"({self.left.describe()} or {self.right.describe()})"


Rule = Union[GroupOf, ArtifactOf, AllOf, AnyOf]


def group_of(group: str) -> GroupOf:
    return GroupOf(group)


def artifact_of(name: str) -> ArtifactOf:
    return ArtifactOf(name)


def _module_id(module: ModuleId | ResolvedModule) -> ModuleId:
    return module.id if isinstance(module, ResolvedModule) else module


@dataclass(frozen=True)
class BannedLibraries:
    rules: Tuple[Rule, ...] = ()

    def is_banned(self, module: ModuleId | ResolvedModule) -> bool:
        return self.matching_rule(module) is not None

    def matching_rule(self, module: ModuleId | ResolvedModule) -> Optional[Rule]:
        module_id = _module_id(module)
        for rule in self.rules:
            if rule.matches(module_id):
                return rule
        return None

    def extended(self, rules: Iterable[Rule]) -> "BannedLibraries":
        return BannedLibraries(self.rules + tuple(rules))

    def __len__(self) -> int:
        return len(self.rules)


DEFAULT_BANNED_LIBRARIES = BannedLibraries(
    (
        group_of("org.slf4j"),
        group_of("commons-logging"),
        group_of("log4j"),
        group_of("org.apache.logging.log4j"),
        group_of("com.palantir.safe-logging") & artifact_of("safe-logging"),
        group_of("com.palantir.tracing") & (artifact_of("tracing") | artifact_of("tracing-api")),
        group_of("com.palantir.tritium") & artifact_of("tritium-registry"),
        group_of("org.springframework") & artifact_of("spring-jcl"),
    )
)


def parse_rule(entry: str | dict) -> Rule:
    """Build a rule from config data.

    Accepted shapes: ``"group"``, ``"group:artifact"``, ``{"group": g}``,
    ``{"group": g, "artifact": a}`` and ``{"group": g, "artifacts": [a, b]}``.
    """

    if isinstance(entry, str):
        group, _, artifact = entry.strip().partition(":")
        entry = {"group": group, "artifact": artifact or None}

    group = entry.get("group")
    if not group:
        raise MissingPolicyError(f"Banned library rule {entry!r} does not name a group")

    artifacts = list(entry.get("artifacts") or [])
    if entry.get("artifact"):
        artifacts.insert(0, entry["artifact"])

    rule: Rule = group_of(str(group))
    if not artifacts:
        return rule

    names: Rule = artifact_of(str(artifacts[0]))
    for name in artifacts[1:]:
        names = names | artifact_of(str(name))
    return rule & names


def parse_rules(entries: Iterable[str | dict]) -> BannedLibraries:
    return BannedLibraries(tuple(parse_rule(entry) for entry in entries))
