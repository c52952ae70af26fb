"""Source directory discovery for cross-reference reports."""

from __future__ import annotations

import os
import unicodedata
from pathlib import Path
from typing import Iterable, List, Sequence, Set

from .logging import get_logger
from .models import JAVA_LANGUAGE, MAIN_REPORT, ProjectDescriptor, ReportKind

SOURCE_SUFFIX = ".java"

# Currency symbols and connector punctuation may start a Java identifier too.
_EXTRA_IDENTIFIER_CATEGORIES = {"Sc", "Pc"}

_logger = get_logger("sources")


def _is_identifier_start(name: str) -> bool:
    # Skips .svn, .git and friends.
    if not name:
        return False
    first = name[0]
    return first.isidentifier() or unicodedata.category(first) in _EXTRA_IDENTIFIER_CATEGORIES


def has_sources(directory: Path, suffix: str = SOURCE_SUFFIX) -> bool:
    """Return True when ``directory`` or one of its subdirectories holds a source file.

    Symlinked directories are followed; each real directory is visited once.
    """
    if not directory.is_dir():
        return False
    visited: Set[str] = set()
    for dirpath, dirnames, filenames in os.walk(directory, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            dirnames[:] = []
            continue
        visited.add(real)
        if any(filename.endswith(suffix) for filename in filenames):
            return True
        dirnames[:] = [name for name in dirnames if _is_identifier_start(name)]
    return False


def prune_source_dirs(source_dirs: Iterable[Path]) -> List[Path]:
    """Drop repeated directories and directories without sources, keeping first occurrences."""
    pruned: List[Path] = []
    for directory in source_dirs:
        path = Path(directory)
        if path in pruned:
            continue
        if not has_sources(path):
            _logger.debug("Ignoring %s: no %s files found", path, SOURCE_SUFFIX)
            continue
        pruned.append(path)
    return pruned


class SourceSetResolver:
    """Computes the ordered directories that participate in a report run."""

    def __init__(self, kind: ReportKind = MAIN_REPORT) -> None:
        self.kind = kind

    def resolve(
        self,
        project: ProjectDescriptor,
        reactor_projects: Sequence[ProjectDescriptor] = (),
        aggregate: bool = False,
    ) -> List[Path]:
        source_dirs = list(self.kind.source_roots(project))
        if aggregate:
            for module in reactor_projects:
                if module.language == JAVA_LANGUAGE:
                    source_dirs.extend(self.kind.source_roots(module))
        return prune_source_dirs(source_dirs)


__all__ = ["SOURCE_SUFFIX", "SourceSetResolver", "has_sources", "prune_source_dirs"]
