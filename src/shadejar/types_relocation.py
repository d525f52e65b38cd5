from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MultiReleasePath:
    """A path split as ``META-INF/versions/9/`` and ``com/foo/Bar.class``."""

    version_prefix: str
    base_path: str

    def join(self, base_path: str | None = None) -> str:
        return self.version_prefix + (self.base_path if base_path is None else base_path)
