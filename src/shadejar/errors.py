from __future__ import annotations


class ShadingError(Exception):
    """Base class for every fatal shading failure."""


class InputContractError(ShadingError):
    pass


class AbsoluteEntryPathError(InputContractError):
    def __init__(self, path: str, archive: str | None = None):
        self.path = path
        self.archive = archive
        location = f" in archive '{archive}'" if archive else ""
        super().__init__(f"Unexpected absolute path '{path}'{location}")


class ConfigurationNotFoundError(InputContractError):
    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        known = ", ".join(sorted(available or [])) or "none"
        super().__init__(f"Dependency configuration '{name}' does not exist (known: {known})")


class HostVersionError(InputContractError):
    pass


class GraphIntegrityError(InputContractError):
    pass


class MissingPolicyError(ShadingError):
    pass


class ArchiveReadError(ShadingError):
    pass


class TransformerConstructionError(ShadingError):
    pass
