"""Tests for xrefreport.orchestrator."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import pytest

from xrefreport.config import ReportOptions
from xrefreport.engine import XrefEngineError, XrefRequest
from xrefreport.loader import ResourceLoader, current_loader, use_loader
from xrefreport.models import TEST_REPORT, ReportState
from xrefreport.orchestrator import ReportError, ReportOrchestrator
from xrefreport.templating import BottomTextTemplater


class RecordingEngine:
    """Test double that records requests and the ambient loader seen by the engine."""

    def __init__(self, error: Exception | None = None) -> None:
        self.requests: list[XrefRequest] = []
        self.loaders: list[object] = []
        self.error = error

    def generate(self, request: XrefRequest) -> None:
        self.requests.append(request)
        self.loaders.append(current_loader())
        if self.error is not None:
            raise self.error
        request.destination.mkdir(parents=True, exist_ok=True)
        (request.destination / "index.html").write_text("<html></html>", encoding="utf-8")


def _orchestrator(engine: RecordingEngine, **kwargs) -> ReportOrchestrator:
    kwargs.setdefault("environ", {})
    kwargs.setdefault("templater", BottomTextTemplater(clock=lambda: datetime(2024, 1, 1)))
    return ReportOrchestrator(engine, **kwargs)


def _options(tmp_path: Path, **overrides) -> ReportOptions:
    options = ReportOptions(output_directory=tmp_path / "site", input_encoding="UTF-8")
    for key, value in overrides.items():
        setattr(options, key, value)
    return options


def test_skip_flag_short_circuits(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    outcome = _orchestrator(engine).execute(_options(tmp_path, skip=True), project)

    assert outcome.state is ReportState.SKIPPED
    assert engine.requests == []


def test_no_sources_is_not_an_error(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "notes.txt")])

    outcome = _orchestrator(engine).execute(_options(tmp_path), project)

    assert outcome.state is ReportState.NO_SOURCES
    assert engine.requests == []


def test_generates_with_resolved_request(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    source = tree.source_dir("src", "A.java")
    project = tree.project(
        "core",
        roots=[source],
        name="Core",
        version="3.0",
        inception_year="2019",
        organization_name="Acme",
    )
    options = _options(tmp_path, includes=["**/*.java"], excludes=["**/gen/**"])

    outcome = _orchestrator(engine).execute(options, project, locale="en")

    assert outcome.state is ReportState.GENERATED
    assert outcome.destination == tmp_path / "site" / "xref"
    assert outcome.source_dirs == [source]

    request = engine.requests[0]
    assert request.source_dirs == [source]
    assert request.destination == tmp_path / "site" / "xref"
    assert request.window_title == "Core 3.0 Reference"
    assert request.doc_title == "Core 3.0 Reference"
    assert request.bottom == "Copyright &#169; 2019-2024 Acme. All Rights Reserved."
    assert request.input_encoding == "UTF-8"
    assert request.output_encoding == "UTF-8"
    assert request.revision == "HEAD"
    assert request.includes == ["**/*.java"]
    assert request.excludes == ["**/gen/**"]
    assert request.template_dir == "templates"
    assert request.javadoc_link_dir == (tmp_path / "site" / "apidocs").absolute()
    assert request.locale == "en"

    assert (tmp_path / "site" / "xref" / "stylesheet.css").exists()


def test_stylesheet_copy_failure_still_generates(tree, tmp_path: Path, caplog) -> None:
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    with caplog.at_level(logging.WARNING, logger="xrefreport"):
        outcome = _orchestrator(engine).execute(
            _options(tmp_path, stylesheet="missing.css"), project
        )

    assert outcome.state is ReportState.GENERATED
    assert (tmp_path / "site" / "xref" / "index.html").exists()
    assert not (tmp_path / "site" / "xref" / "stylesheet.css").exists()
    assert any("copying the stylesheet" in record.getMessage() for record in caplog.records)


def test_explicit_destination_overrides_output_directory(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project("core", test_roots=[tree.source_dir("test", "ATest.java")])
    destination = tmp_path / "assembled" / "xref-test"

    outcome = _orchestrator(engine, kind=TEST_REPORT).execute(
        _options(tmp_path), project, destination=destination
    )

    assert outcome.destination == destination
    assert engine.requests[0].javadoc_link_dir == (tmp_path / "site" / "testapidocs").absolute()


def test_missing_input_encoding_falls_back_with_warning(
    tree, tmp_path: Path, monkeypatch, caplog
) -> None:
    import xrefreport.orchestrator as orchestrator_module

    monkeypatch.setattr(orchestrator_module, "getpreferredencoding", lambda do_setlocale: "cp1252")
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    with caplog.at_level(logging.WARNING, logger="xrefreport"):
        _orchestrator(engine).execute(_options(tmp_path, input_encoding="  "), project)

    assert engine.requests[0].input_encoding == "cp1252"
    assert any("platform dependent" in record.getMessage() for record in caplog.records)


def test_link_javadoc_disabled_passes_no_location(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    _orchestrator(engine).execute(_options(tmp_path, link_javadoc=False), project)

    assert engine.requests[0].javadoc_link_dir is None


def test_staging_directory_from_environment(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")], name="Core")
    staging = tmp_path / "staging"

    _orchestrator(engine, environ={"STAGING_DIRECTORY": str(staging)}).execute(
        _options(tmp_path), project
    )

    assert engine.requests[0].javadoc_link_dir == staging / "Core" / "apidocs"


def test_aggregate_is_deferred_to_execution_root(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    project = tree.project(
        "module", roots=[tree.source_dir("src", "A.java")], execution_root=False
    )
    orchestrator = _orchestrator(engine)
    options = _options(tmp_path, aggregate=True)

    outcome = orchestrator.execute(options, project)

    assert outcome.state is ReportState.SKIPPED
    assert orchestrator.can_generate(options, project) is False
    assert engine.requests == []


def test_aggregate_root_collects_reactor_sources(tree, tmp_path: Path) -> None:
    engine = RecordingEngine()
    api = tree.source_dir("api/src", "Api.java")
    web = tree.source_dir("web/src", "Web.java")
    root = tree.project("root", is_aggregate_root=True)
    reactor = [
        root,
        tree.project("api", roots=[api], parent=root, execution_root=False),
        tree.project("web", roots=[web], parent=root, execution_root=False),
    ]

    outcome = _orchestrator(engine).execute(_options(tmp_path), root, reactor)

    assert outcome.state is ReportState.GENERATED
    assert engine.requests[0].source_dirs == [api, web]


@pytest.mark.parametrize("fault", [OSError("disk full"), XrefEngineError("bad symbol")])
def test_engine_faults_are_wrapped(tree, tmp_path: Path, fault: Exception) -> None:
    engine = RecordingEngine(error=fault)
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    with pytest.raises(ReportError) as excinfo:
        _orchestrator(engine).execute(_options(tmp_path), project)

    assert excinfo.value.__cause__ is fault
    assert excinfo.value.state is ReportState.FAILED
    assert "HTML source code" in str(excinfo.value)
    assert not (tmp_path / "site" / "xref" / "stylesheet.css").exists()


def test_engine_sees_own_loader_and_context_is_restored(tree, tmp_path: Path) -> None:
    own = ResourceLoader("xrefreport", "static")
    ambient = ResourceLoader("host.site")
    project = tree.project("core", roots=[tree.source_dir("src", "A.java")])

    succeeding = RecordingEngine()
    failing = RecordingEngine(error=XrefEngineError("broken"))
    with use_loader(ambient):
        _orchestrator(succeeding, loader=own).execute(_options(tmp_path), project)
        assert current_loader() is ambient

        with pytest.raises(ReportError):
            _orchestrator(failing, loader=own).execute(_options(tmp_path), project)
        assert current_loader() is ambient

    assert succeeding.loaders == [own]
    assert failing.loaders == [own]
    assert current_loader() is None


def test_can_generate_reports_available_sources(tree, tmp_path: Path) -> None:
    orchestrator = _orchestrator(RecordingEngine())
    with_sources = tree.project("core", roots=[tree.source_dir("src", "A.java")])
    without_sources = tree.project("docs", roots=[tree.source_dir("docs")])

    assert orchestrator.can_generate(_options(tmp_path), with_sources) is True
    assert orchestrator.can_generate(_options(tmp_path), without_sources) is False
    assert orchestrator.can_generate(_options(tmp_path, skip=True), with_sources) is False
