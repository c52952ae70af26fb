"""Contract for the external HTML cross-reference engine and its discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import metadata
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .config import ConfigError

_ENTRY_POINT_GROUP = "xrefreport.engines"

REVISION = "HEAD"


class XrefEngineError(RuntimeError):
    """Raised by engines for faults in cross-reference generation itself."""


@dataclass
class XrefRequest:
    """Fully resolved inputs for one engine invocation."""

    source_dirs: List[Path]
    destination: Path
    template_dir: Optional[str]
    window_title: str
    doc_title: str
    bottom: str
    input_encoding: str
    output_encoding: str
    revision: str = REVISION
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    javadoc_link_dir: Optional[Path] = None
    locale: Optional[str] = None


@runtime_checkable
class XrefEngine(Protocol):
    """Turns source directories into a tree of hyperlinked HTML pages."""

    def generate(self, request: XrefRequest) -> None:
        """Write the HTML output; raise OSError or XrefEngineError on failure."""


def discover_engine(name: str | None = None) -> XrefEngine:
    """Instantiate an engine registered under the ``xrefreport.engines`` entry points."""
    entries = list(_iter_entry_points())
    if name is not None:
        entries = [entry for entry in entries if entry.name == name]
    if not entries:
        if name is not None:
            raise ConfigError(f"Unknown xref engine requested: {name}")
        raise ConfigError(
            f"No xref engine installed; register one under the '{_ENTRY_POINT_GROUP}' entry point group"
        )

    entry = entries[0]
    try:
        loaded = entry.load()
    except Exception as exc:  # pragma: no cover - defensive guard
        raise ConfigError(f"Failed to load xref engine entry point '{entry.name}': {exc}") from exc
    return _coerce_engine(loaded)


def _coerce_engine(obj: object) -> XrefEngine:
    if isinstance(obj, XrefEngine) and not isinstance(obj, type):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, XrefEngine):
            return instance
    raise ConfigError("Xref engine entry point must be an engine instance, class or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "REVISION",
    "XrefEngine",
    "XrefEngineError",
    "XrefRequest",
    "discover_engine",
]
