"""Configuration loading for xrefreport (.xrefreport.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .models import JAVA_LANGUAGE, ProjectDescriptor, ReportPlugin

CONFIG_FILENAME = ".xrefreport.yml"

ENV_STAGING_KEYS = ("XREFREPORT_STAGING_DIRECTORY", "STAGING_DIRECTORY")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ReportOptions:
    """Report settings a caller may override."""

    output_directory: Path = Path("target/site")
    input_encoding: Optional[str] = None
    output_encoding: Optional[str] = None
    window_title: Optional[str] = None
    doc_title: Optional[str] = None
    bottom: Optional[str] = None
    template_dir: Optional[str] = "templates"
    stylesheet: str = "stylesheet.css"
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    aggregate: bool = False
    skip: bool = False
    link_javadoc: bool = True
    staging_directory: Optional[Path] = None

    def effective_staging_directory(
        self, environ: Mapping[str, str] | None = None
    ) -> Optional[Path]:
        """Return the configured staging root, falling back to the environment."""
        if self.staging_directory is not None and str(self.staging_directory).strip():
            return Path(self.staging_directory)
        env = os.environ if environ is None else environ
        for key in ENV_STAGING_KEYS:
            value = env.get(key)
            if value and value.strip():
                return Path(value.strip())
        return None


@dataclass
class XrefConfig:
    """Project model plus report options loaded from disk."""

    root: Path
    project: ProjectDescriptor
    reactor: List[ProjectDescriptor]
    options: ReportOptions


def load_config(config_path: Path) -> XrefConfig:
    """Load the project tree and report options rooted at ``config_path``."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent

    data = _read_config(config_file) if config_file.exists() else {}
    options = _parse_options(_as_dict(data.get("report")), root)

    reactor: List[ProjectDescriptor] = []
    project = _load_project(root, data, parent=None, reactor=reactor, execution_root=True)
    return XrefConfig(root=root, project=project, reactor=reactor, options=options)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _load_project(
    basedir: Path,
    data: Mapping[str, Any],
    *,
    parent: Optional[ProjectDescriptor],
    reactor: List[ProjectDescriptor],
    execution_root: bool,
) -> ProjectDescriptor:
    project_data = _as_dict(data.get("project"))
    name = _as_str(project_data.get("name")) or basedir.name or "project"
    identifier = _as_str(project_data.get("id")) or name

    if any(p.identifier == identifier for p in reactor):
        raise ConfigError(f"Duplicate project identifier in module tree: {identifier}")

    project = ProjectDescriptor(
        identifier=identifier,
        name=name,
        version=_as_str(project_data.get("version")) or "",
        inception_year=_as_str(project_data.get("inception_year")),
        organization_name=_as_str(project_data.get("organization")),
        parent=parent,
        is_execution_root=execution_root,
        is_aggregate_root=_as_bool(project_data.get("aggregate_root")) or False,
        source_roots=tuple(
            Path(p) for p in _as_str_list(project_data.get("source_roots", ["src/main/java"]))
        ),
        test_source_roots=tuple(
            Path(p) for p in _as_str_list(project_data.get("test_source_roots", ["src/test/java"]))
        ),
        language=(_as_str(project_data.get("language")) or JAVA_LANGUAGE).lower(),
        report_plugins=tuple(_parse_report_plugins(project_data.get("report_plugins"))),
        basedir=basedir,
    )
    reactor.append(project)

    for module in _as_str_list(project_data.get("modules")):
        module_dir = (basedir / module).resolve()
        module_file = module_dir / CONFIG_FILENAME
        if not module_dir.is_dir():
            raise ConfigError(f"Module directory not found: {module_dir}")
        module_data = _read_config(module_file) if module_file.exists() else {}
        _load_project(
            module_dir,
            module_data,
            parent=project,
            reactor=reactor,
            execution_root=False,
        )
    return project


def _parse_report_plugins(value: Any) -> List[ReportPlugin]:
    plugins: List[ReportPlugin] = []
    if not isinstance(value, list):
        return plugins
    for item in value:
        if isinstance(item, str):
            plugins.append(ReportPlugin(artifact_id=item))
            continue
        entry = _as_dict(item)
        artifact_id = _as_str(entry.get("artifact_id"))
        if not artifact_id:
            raise ConfigError("Each report plugin needs an artifact_id")
        plugins.append(
            ReportPlugin(artifact_id=artifact_id, configuration=_as_dict(entry.get("configuration")))
        )
    return plugins


def _parse_options(data: Mapping[str, Any], root: Path) -> ReportOptions:
    options = ReportOptions()
    output_directory = _as_str(data.get("output_directory"))
    options.output_directory = root / (output_directory or options.output_directory)
    options.input_encoding = _as_str(data.get("input_encoding"))
    options.output_encoding = _as_str(data.get("output_encoding"))
    options.window_title = _as_str(data.get("window_title"))
    options.doc_title = _as_str(data.get("doc_title"))
    options.bottom = _as_str(data.get("bottom"))
    if "template_dir" in data:
        options.template_dir = _as_str(data.get("template_dir"))
    options.stylesheet = _as_str(data.get("stylesheet")) or options.stylesheet
    options.includes = _as_str_list(data.get("includes"))
    options.excludes = _as_str_list(data.get("excludes"))
    options.aggregate = _as_bool(data.get("aggregate")) or False
    options.skip = _as_bool(data.get("skip")) or False
    link_javadoc = _as_bool(data.get("link_javadoc"))
    options.link_javadoc = True if link_javadoc is None else link_javadoc
    staging = _as_str(data.get("staging_directory"))
    options.staging_directory = Path(staging) if staging else None
    return options


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ENV_STAGING_KEYS",
    "ReportOptions",
    "XrefConfig",
    "load_config",
]
