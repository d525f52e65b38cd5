from __future__ import annotations

import re
from typing import Optional

from .errors import AbsoluteEntryPathError
from .types import MultiReleasePath

MANIFEST_PATH = "META-INF/MANIFEST.MF"
CLASS_SUFFIX = ".class"
MULTI_RELEASE_ATTRIBUTE = "Multi-Release"

# Multi-release jar layout, see https://openjdk.java.net/jeps/238
MULTI_RELEASE_PREFIX = re.compile(r"^META-INF/versions/\d+/")


def split_multi_release_path(path: str) -> Optional[MultiReleasePath]:
    match = MULTI_RELEASE_PREFIX.match(path)
    if not match:
        return None
    return MultiReleasePath(version_prefix=path[: match.end()], base_path=path[match.end():])


def check_relative(path: str, archive: str | None = None) -> str:
    if path.startswith("/"):
        raise AbsoluteEntryPathError(path, archive)
    return path
