from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from packaging.version import InvalidVersion, Version

from .banned import DEFAULT_BANNED_LIBRARIES, BannedLibraries, parse_rules
from .errors import HostVersionError, InputContractError, MissingPolicyError
from .relocation import validate_prefix

MINIMUM_HOST_VERSION = "7.0"
SHADED_CONFIGURATION = "shadeTransitively"
UNSHADED_CONFIGURATION = "unshaded"


@dataclass(frozen=True)
class ShadingConfig:
    prefix: str
    banned: BannedLibraries = DEFAULT_BANNED_LIBRARIES
    shaded_configuration: str = SHADED_CONFIGURATION
    unshaded_configuration: str = UNSHADED_CONFIGURATION

    def __post_init__(self) -> None:
        if not (self.prefix or "").strip():
            raise MissingPolicyError("No relocation prefix configured")
        object.__setattr__(self, "prefix", validate_prefix(self.prefix))
        if self.banned is None:
            raise MissingPolicyError("No banned-library policy configured")
        if self.shaded_configuration == self.unshaded_configuration:
            raise InputContractError(
                f"Shaded and unshaded configurations must differ (both '{self.shaded_configuration}')"
            )

    def as_dict(self) -> dict:
        return {
            "prefix": self.prefix,
            "shaded_configuration": self.shaded_configuration,
            "unshaded_configuration": self.unshaded_configuration,
            "banned_libraries": [rule.describe() for rule in self.banned.rules],
        }


def default_prefix(group: str, name: str) -> str:
    return ".".join(["shadow", group, name]).replace("-", "_").lower()


def check_host_version(current: str, minimum: str = MINIMUM_HOST_VERSION) -> None:
    try:
        too_old = Version(current) < Version(minimum)
    except InvalidVersion as exc:
        raise HostVersionError(f"Unable to parse host version '{current}'") from exc
    if too_old:
        raise HostVersionError(f"Host version {current} is too old; {minimum} or above is required")


def _banned_from(raw) -> BannedLibraries:
    if raw is None or raw == "default":
        return DEFAULT_BANNED_LIBRARIES
    if isinstance(raw, list):
        return parse_rules(raw)
    if isinstance(raw, dict):
        extra = parse_rules(raw.get("extra") or [])
        if raw.get("use_defaults", True):
            return DEFAULT_BANNED_LIBRARIES.extended(extra.rules)
        if not extra.rules:
            raise MissingPolicyError("Default banned libraries are disabled and no replacement rules are listed")
        return extra
    raise MissingPolicyError(f"Unsupported banned_libraries value: {raw!r}")


def config_from_dict(raw: dict) -> ShadingConfig:
    host_version = raw.get("host_version")
    if host_version is not None:
        check_host_version(str(host_version), str(raw.get("minimum_host_version") or MINIMUM_HOST_VERSION))

    prefix: Optional[str] = raw.get("prefix")
    project = raw.get("project") or {}
    if not prefix:
        if not (project.get("group") and project.get("name")):
            raise MissingPolicyError("Set 'prefix' or both 'project.group' and 'project.name' to derive one")
        prefix = default_prefix(str(project["group"]), str(project["name"]))

    return ShadingConfig(
        prefix=str(prefix),
        banned=_banned_from(raw.get("banned_libraries")),
        shaded_configuration=str(raw.get("shaded_configuration") or SHADED_CONFIGURATION),
        unshaded_configuration=str(raw.get("unshaded_configuration") or UNSHADED_CONFIGURATION),
    )


def load_config(path: Path) -> ShadingConfig:
    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        raise InputContractError(f"Config file '{path}' must be a mapping")
    return config_from_dict(raw)
