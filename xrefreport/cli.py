"""CLI entrypoints for xrefreport commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .engine import discover_engine
from .logging import configure_logging
from .models import REPORT_KINDS, ReportState
from .orchestrator import ReportError, ReportOrchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_report_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root holding .xrefreport.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--dest",
        type=Path,
        default=None,
        help="Write the report into this directory instead of the configured output directory.",
    )
    parser.add_argument(
        "--engine",
        default=None,
        help="Name of the installed xref engine to use.",
    )
    parser.add_argument(
        "--aggregate",
        action="store_true",
        default=None,
        help="Aggregate the sources of every module into one report.",
    )
    parser.add_argument(
        "--skip",
        action="store_true",
        default=None,
        help="Skip report generation.",
    )
    parser.add_argument(
        "--no-link-javadoc",
        dest="link_javadoc",
        action="store_false",
        default=None,
        help="Do not link generated pages to the API documentation.",
    )
    parser.add_argument(
        "--staging-directory",
        type=Path,
        default=None,
        help="Staging root of a multi-module site build.",
    )
    parser.add_argument(
        "--locale",
        default=None,
        help="Locale passed to the engine for generated page text.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xrefreport",
        description="Generate cross-referenced HTML source reports.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print warnings and errors to the console.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for kind in REPORT_KINDS.values():
        sub = subparsers.add_parser(kind.key, help=f"Generate the {kind.name} report.")
        _add_verbose_option(sub, suppress_default=True)
        _add_report_options(sub)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for xrefreport commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )

    kind = REPORT_KINDS[args.command]
    try:
        config = load_config(Path(args.path))
        options = config.options
        if args.aggregate is not None:
            options.aggregate = args.aggregate
        if args.skip is not None:
            options.skip = args.skip
        if args.link_javadoc is not None:
            options.link_javadoc = args.link_javadoc
        if args.staging_directory is not None:
            options.staging_directory = args.staging_directory

        orchestrator = ReportOrchestrator(discover_engine(args.engine), kind)
        outcome = orchestrator.execute(
            options,
            config.project,
            config.reactor,
            destination=args.dest,
            locale=args.locale,
        )
    except ConfigError as exc:
        parser.exit(1, f"xrefreport configuration error: {exc}\n")
    except ReportError as exc:
        parser.exit(
            1,
            f"xrefreport {kind.key} failed: {exc} ({exc.__cause__})\n"
            "Run with --verbose for more details.\n",
        )

    if outcome.state is ReportState.GENERATED:
        print(f"{kind.name} written to {_relativize(outcome.destination)}")
    elif outcome.state is ReportState.NO_SOURCES:
        print("No sources to report on")
    else:
        print(f"{kind.name} skipped")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
