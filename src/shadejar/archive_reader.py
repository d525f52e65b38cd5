from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Iterable, Set

from .errors import ArchiveReadError
from .multi_release import check_relative

logger = logging.getLogger(__name__)


def read_entry_paths(archive: Path | str) -> Set[str]:
    """Return the names of all non-directory entries in a jar/zip archive."""

    archive = Path(archive)
    try:
        with zipfile.ZipFile(archive) as jar:
            infos = jar.infolist()
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveReadError(f"Could not open jar file '{archive}'") from exc

    paths: Set[str] = set()
    for info in infos:
        if info.is_dir():
            continue
        logger.debug("Jar '%s' contains entry '%s'", archive.name, info.filename)
        paths.add(check_relative(info.filename, str(archive)))
    return paths


def collect_entry_paths(archives: Iterable[Path | str]) -> Set[str]:
    paths: Set[str] = set()
    for archive in archives:
        paths.update(read_entry_paths(archive))
    return paths
