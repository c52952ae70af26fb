"""Cross-referenced HTML source reports for multi-module builds."""

from .config import ConfigError, ReportOptions, XrefConfig, load_config
from .engine import XrefEngine, XrefEngineError, XrefRequest, discover_engine
from .javadoc import JavadocLinkResolver
from .models import (
    MAIN_REPORT,
    TEST_REPORT,
    ProjectDescriptor,
    ReportKind,
    ReportOutcome,
    ReportPlugin,
    ReportState,
)
from .orchestrator import ReportError, ReportOrchestrator
from .sources import SourceSetResolver
from .templating import BottomTextTemplater

__all__ = [
    "BottomTextTemplater",
    "ConfigError",
    "JavadocLinkResolver",
    "MAIN_REPORT",
    "ProjectDescriptor",
    "ReportError",
    "ReportKind",
    "ReportOptions",
    "ReportOrchestrator",
    "ReportOutcome",
    "ReportPlugin",
    "ReportState",
    "SourceSetResolver",
    "TEST_REPORT",
    "XrefConfig",
    "XrefEngine",
    "XrefEngineError",
    "XrefRequest",
    "discover_engine",
    "load_config",
]
