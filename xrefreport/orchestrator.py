"""Report orchestration: gating, input resolution and the engine call."""

from __future__ import annotations

from locale import getpreferredencoding
from pathlib import Path
from typing import List, Mapping, Sequence

from .config import ReportOptions
from .engine import REVISION, XrefEngine, XrefEngineError, XrefRequest
from .javadoc import JavadocLinkResolver
from .loader import DEFAULT_LOADER, ResourceLoader, copy_stylesheet, use_loader
from .logging import get_logger
from .models import MAIN_REPORT, ProjectDescriptor, ReportKind, ReportOutcome, ReportState
from .sources import SourceSetResolver
from .templating import DEFAULT_BOTTOM, BottomTextTemplater, render_title

DEFAULT_OUTPUT_ENCODING = "UTF-8"


class ReportError(RuntimeError):
    """Raised when the engine fails to generate the report."""

    state = ReportState.FAILED


class ReportOrchestrator:
    """Drives a single xref report run from project model to generated HTML."""

    def __init__(
        self,
        engine: XrefEngine,
        kind: ReportKind = MAIN_REPORT,
        *,
        source_resolver: SourceSetResolver | None = None,
        link_resolver: JavadocLinkResolver | None = None,
        templater: BottomTextTemplater | None = None,
        loader: ResourceLoader = DEFAULT_LOADER,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.engine = engine
        self.kind = kind
        self.source_resolver = source_resolver or SourceSetResolver(kind)
        self.link_resolver = link_resolver or JavadocLinkResolver()
        self.templater = templater or BottomTextTemplater()
        self.loader = loader
        self._environ = environ
        self.logger = get_logger("orchestrator")

    @staticmethod
    def is_aggregate(options: ReportOptions, project: ProjectDescriptor) -> bool:
        return options.aggregate or project.is_aggregate_root

    def resolve_sources(
        self,
        options: ReportOptions,
        project: ProjectDescriptor,
        reactor_projects: Sequence[ProjectDescriptor] = (),
    ) -> List[Path]:
        return self.source_resolver.resolve(
            project, reactor_projects, self.is_aggregate(options, project)
        )

    def can_generate(
        self,
        options: ReportOptions,
        project: ProjectDescriptor,
        reactor_projects: Sequence[ProjectDescriptor] = (),
    ) -> bool:
        """Whether a site build should include this report for the project."""
        if options.skip or self._deferred_to_root(options, project):
            return False
        return bool(self.resolve_sources(options, project, reactor_projects))

    def execute(
        self,
        options: ReportOptions,
        project: ProjectDescriptor,
        reactor_projects: Sequence[ProjectDescriptor] = (),
        *,
        destination: Path | None = None,
        locale: str | None = None,
    ) -> ReportOutcome:
        """Run the report.

        ``destination`` is given by site assembly; standalone runs leave it
        unset and write under ``options.output_directory``. Engine faults are
        re-raised as :class:`ReportError`.
        """
        if options.skip:
            self.logger.info("Skipping %s report.", self.kind.name)
            return ReportOutcome(ReportState.SKIPPED)

        if self._deferred_to_root(options, project):
            self.logger.info(
                "Skipping aggregated %s report for %s: only generated at the execution root",
                self.kind.name,
                project.name,
            )
            return ReportOutcome(ReportState.SKIPPED)

        aggregate = self.is_aggregate(options, project)
        source_dirs = self.source_resolver.resolve(project, reactor_projects, aggregate)
        if not source_dirs:
            self.logger.info("No source directories to report on for %s", project.name)
            return ReportOutcome(ReportState.NO_SOURCES)
        self.logger.debug("Resolved %d source directories", len(source_dirs))

        target = Path(destination) if destination is not None else (
            options.output_directory / self.kind.destination_name
        )
        javadoc_location = self.link_resolver.resolve(
            project,
            aggregate,
            options.link_javadoc,
            options.output_directory / self.kind.javadoc_name,
            options.effective_staging_directory(self._environ),
        )

        request = XrefRequest(
            source_dirs=source_dirs,
            destination=target,
            template_dir=options.template_dir,
            window_title=render_title(options.window_title, project),
            doc_title=render_title(options.doc_title, project),
            bottom=self.templater.render_for(options.bottom or DEFAULT_BOTTOM, project),
            input_encoding=self._input_encoding(options),
            output_encoding=options.output_encoding or DEFAULT_OUTPUT_ENCODING,
            revision=REVISION,
            includes=list(options.includes),
            excludes=list(options.excludes),
            javadoc_link_dir=javadoc_location,
            locale=locale,
        )

        self.logger.info("Generating %s into %s", self.kind.name, target)
        try:
            # Engines load their templates through the ambient loader.
            with use_loader(self.loader):
                self.engine.generate(request)
        except (OSError, XrefEngineError) as exc:
            raise ReportError("Error while generating the HTML source code of the project.") from exc

        copy_stylesheet(options.stylesheet, target, self.loader)
        return ReportOutcome(
            ReportState.GENERATED,
            destination=target,
            source_dirs=source_dirs,
            javadoc_location=javadoc_location,
        )

    def _deferred_to_root(self, options: ReportOptions, project: ProjectDescriptor) -> bool:
        return self.is_aggregate(options, project) and not project.is_execution_root

    def _input_encoding(self, options: ReportOptions) -> str:
        if options.input_encoding and options.input_encoding.strip():
            return options.input_encoding
        platform_encoding = getpreferredencoding(False)
        self.logger.warning(
            "File encoding has not been set, using platform encoding %s, "
            "i.e. build is platform dependent!",
            platform_encoding,
        )
        return platform_encoding


__all__ = ["DEFAULT_OUTPUT_ENCODING", "ReportError", "ReportOrchestrator"]
