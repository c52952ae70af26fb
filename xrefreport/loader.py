"""Ambient resource loader and bundled static resources."""

from __future__ import annotations

import shutil
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Iterator, Optional

from .logging import get_logger

STYLESHEET_NAME = "stylesheet.css"

_logger = get_logger("loader")


@dataclass(frozen=True)
class ResourceLoader:
    """Looks up named resources bundled inside a Python package."""

    package: str
    prefix: str = ""

    def resource(self, name: str) -> Traversable:
        base = resources.files(self.package)
        if self.prefix:
            base = base / self.prefix
        return base / name

    def read_bytes(self, name: str) -> bytes:
        return self.resource(name).read_bytes()


DEFAULT_LOADER = ResourceLoader("xrefreport", "static")

_current_loader: ContextVar[Optional[ResourceLoader]] = ContextVar(
    "xrefreport_resource_loader", default=None
)


def current_loader() -> Optional[ResourceLoader]:
    """Return the loader active for the calling thread, if any."""
    return _current_loader.get()


@contextmanager
def use_loader(loader: ResourceLoader) -> Iterator[ResourceLoader]:
    """Make ``loader`` the ambient loader, restoring the previous one on exit."""
    token = _current_loader.set(loader)
    try:
        yield loader
    finally:
        _current_loader.reset(token)


def copy_stylesheet(
    stylesheet: str, destination: Path, loader: ResourceLoader = DEFAULT_LOADER
) -> bool:
    """Copy the stylesheet into ``destination``; failures are logged, not raised."""
    target = destination / STYLESHEET_NAME
    source = Path(stylesheet)
    try:
        destination.mkdir(parents=True, exist_ok=True)
        if source.is_absolute():
            shutil.copyfile(source, target)
        else:
            target.write_bytes(loader.read_bytes(stylesheet))
    except OSError as exc:
        _logger.warning(
            "An error occurred while copying the stylesheet to the target directory: %s", exc
        )
        return False
    return True


__all__ = [
    "DEFAULT_LOADER",
    "ResourceLoader",
    "STYLESHEET_NAME",
    "copy_stylesheet",
    "current_loader",
    "use_loader",
]
