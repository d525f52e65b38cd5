from __future__ import annotations

import logging
from typing import Any, Callable, List, Protocol, Tuple, Type, TypeVar

from .errors import TransformerConstructionError
from .multi_release import MULTI_RELEASE_ATTRIBUTE
from .relocation import RelocationPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ManifestAppender:
    """Adds or replaces attributes in the main section of a jar manifest."""

    def __init__(self) -> None:
        self.attributes: List[Tuple[str, str]] = []

    def append(self, name: str, value: Any) -> "ManifestAppender":
        if not name or ":" in name:
            raise ValueError(f"Invalid manifest attribute name '{name}'")
        self.attributes.append((name, _format_value(value)))
        return self

    def transform(self, manifest: str) -> str:
        lines = manifest.replace("\r\n", "\n").split("\n")

        # The main section ends at the first blank line.
        main_end = next((i for i, line in enumerate(lines) if not line.strip()), len(lines))
        main, rest = lines[:main_end], lines[main_end:]

        for name, value in self.attributes:
            entry = f"{name}: {value}"
            index = _find_attribute(main, name)
            if index is None:
                main.append(entry)
            else:
                end = index + 1
                while end < len(main) and main[end].startswith(" "):
                    end += 1
                main[index:end] = [entry]

        if _find_attribute(main, "Manifest-Version") is None:
            main.insert(0, "Manifest-Version: 1.0")

        if not rest:
            rest = [""]
        return "\r\n".join(main + rest)


def _find_attribute(lines: List[str], name: str) -> int | None:
    wanted = name.lower() + ":"
    for index, line in enumerate(lines):
        if line.lower().startswith(wanted):
            return index
    return None


class RewriteEngine(Protocol):
    """The archive rewriting collaborator that edits bytecode and file names."""

    def relocate(self, relocator: RelocationPlan) -> None: ...

    def transform(self, transformer_type: Type[T], configure: Callable[[T], None]) -> None: ...


def apply_plan(engine: RewriteEngine, plan: RelocationPlan) -> None:
    engine.relocate(plan)

    if not plan.needs_manifest_attribute:
        return

    try:
        # JEP 238 requires this attribute whenever versioned entries exist
        engine.transform(ManifestAppender, lambda transformer: transformer.append(MULTI_RELEASE_ATTRIBUTE, True))
    except Exception as exc:
        raise TransformerConstructionError("Unable to construct ManifestAppender transformer") from exc
    logger.debug(
        "Requested %s manifest attribute for %d versioned entries",
        MULTI_RELEASE_ATTRIBUTE,
        len(plan.multi_release_companions),
    )
