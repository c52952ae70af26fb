"""Core data models shared across xrefreport components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

JAVA_LANGUAGE = "java"


@dataclass(frozen=True)
class ReportPlugin:
    """A report declared in a project's reporting section."""

    artifact_id: str
    configuration: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectDescriptor:
    """Read-only view of a buildable unit supplied by the host build tool."""

    identifier: str
    name: str
    version: str = ""
    inception_year: Optional[str] = None
    organization_name: Optional[str] = None
    parent: Optional["ProjectDescriptor"] = None
    is_execution_root: bool = False
    is_aggregate_root: bool = False
    source_roots: Tuple[Path, ...] = ()
    test_source_roots: Tuple[Path, ...] = ()
    language: str = JAVA_LANGUAGE
    report_plugins: Tuple[ReportPlugin, ...] = ()
    basedir: Optional[Path] = None

    def resolve_roots(self, roots: Sequence[Path]) -> List[Path]:
        """Return ``roots`` with project-relative entries anchored at ``basedir``."""
        resolved: List[Path] = []
        for root in roots:
            path = Path(root)
            if not path.is_absolute() and self.basedir is not None:
                path = self.basedir / path
            resolved.append(path)
        return resolved


@dataclass(frozen=True)
class ReportKind:
    """Which family of sources a report covers and where its output lands."""

    key: str
    name: str
    description: str
    roots_attribute: str
    destination_name: str
    javadoc_name: str

    def source_roots(self, project: ProjectDescriptor) -> List[Path]:
        return project.resolve_roots(getattr(project, self.roots_attribute))


MAIN_REPORT = ReportKind(
    key="xref",
    name="Source Xref",
    description="HTML based, cross-reference version of Java source code.",
    roots_attribute="source_roots",
    destination_name="xref",
    javadoc_name="apidocs",
)

TEST_REPORT = ReportKind(
    key="test-xref",
    name="Test Source Xref",
    description="HTML based, cross-reference version of Java test source code.",
    roots_attribute="test_source_roots",
    destination_name="xref-test",
    javadoc_name="testapidocs",
)

REPORT_KINDS = {kind.key: kind for kind in (MAIN_REPORT, TEST_REPORT)}


class ReportState(str, Enum):
    """Terminal (or initial) state of a single report invocation."""

    NOT_RUN = "not-run"
    SKIPPED = "skipped"
    NO_SOURCES = "no-sources"
    GENERATED = "generated"
    FAILED = "failed"


@dataclass
class ReportOutcome:
    """Result of a report invocation."""

    state: ReportState
    destination: Optional[Path] = None
    source_dirs: List[Path] = field(default_factory=list)
    javadoc_location: Optional[Path] = None
