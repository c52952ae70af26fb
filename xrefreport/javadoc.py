"""Locating the companion API documentation that xref pages link into."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from .logging import get_logger
from .models import ProjectDescriptor

JAVADOC_PLUGIN = "maven-javadoc-plugin"


@dataclass(frozen=True)
class CompanionDocConfig:
    """Settings of the documentation report we link against."""

    aggregate: bool
    staging_directory: Optional[Path] = None

    @classmethod
    def for_project(
        cls, project: ProjectDescriptor, staging_directory: Optional[Path] = None
    ) -> "CompanionDocConfig":
        return cls(
            aggregate=is_javadoc_aggregated(project),
            staging_directory=staging_directory,
        )


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return False


def is_javadoc_aggregated(project: ProjectDescriptor) -> bool:
    """Return True when the project's javadoc report is configured to aggregate."""
    for plugin in project.report_plugins:
        if plugin.artifact_id == JAVADOC_PLUGIN:
            return _truthy(plugin.configuration.get("aggregate"))
    return False


def iter_lineage(project: ProjectDescriptor) -> Iterator[ProjectDescriptor]:
    """Yield the project followed by its ancestors, stopping if an identifier repeats."""
    seen: set[str] = set()
    current: Optional[ProjectDescriptor] = project
    while current is not None and current.identifier not in seen:
        seen.add(current.identifier)
        yield current
        current = current.parent


def topmost_ancestor_name(project: ProjectDescriptor) -> str:
    name = project.name
    for ancestor in iter_lineage(project):
        name = ancestor.name
    return name


def structure_path(project: ProjectDescriptor) -> str:
    """Relative location of the project inside a staged multi-module site."""
    names = [ancestor.name for ancestor in iter_lineage(project)]
    return "/".join(reversed(names))


class JavadocLinkResolver:
    """Decides where generated xref pages should point for API documentation."""

    def __init__(self) -> None:
        self.logger = get_logger("javadoc")

    def resolve(
        self,
        project: ProjectDescriptor,
        aggregate: bool,
        link_javadoc: bool,
        local_doc_dir: Path,
        staging_directory: Optional[Path] = None,
    ) -> Optional[Path]:
        """Return the javadoc location, or None when it cannot be determined."""
        if not link_javadoc:
            return None

        location = self._locate(project, aggregate, local_doc_dir, staging_directory)
        if location is None:
            self.logger.warning("Unable to locate Javadoc to link to - DISABLED")
        return location

    def _locate(
        self,
        project: ProjectDescriptor,
        aggregate: bool,
        local_doc_dir: Path,
        staging_directory: Optional[Path],
    ) -> Optional[Path]:
        if local_doc_dir.exists():
            # Already generated by an earlier step of this build.
            return local_doc_dir.absolute()

        if staging_directory is None:
            return local_doc_dir.absolute()

        companion = CompanionDocConfig.for_project(project, staging_directory)
        doc_dir_name = local_doc_dir.name
        structure = structure_path(project)
        self.logger.debug(
            "Resolving staged javadoc (aggregate=%s, javadoc aggregate=%s, structure=%s)",
            aggregate,
            companion.aggregate,
            structure,
        )

        if aggregate and companion.aggregate:
            return staging_directory / structure / doc_dir_name
        if not aggregate and companion.aggregate:
            return staging_directory / topmost_ancestor_name(project) / doc_dir_name
        if aggregate and not companion.aggregate:
            self.logger.warning(
                "The xref report is configured to build an aggregated report at the root, "
                "not the Javadoc report."
            )
            return None
        return staging_directory / structure / doc_dir_name


__all__ = [
    "CompanionDocConfig",
    "JAVADOC_PLUGIN",
    "JavadocLinkResolver",
    "is_javadoc_aggregated",
    "iter_lineage",
    "structure_path",
    "topmost_ancestor_name",
]
