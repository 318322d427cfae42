"""CLI entrypoints for repohealth commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import RepoHealthError
from .generators import ACTIONS
from .logging import configure_logging
from .orchestrator import AnalysisResult, Orchestrator


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


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of a text report.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repohealth",
        description="Score GitHub repositories and generate missing project files.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .repohealth.yml or the directory containing it.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs (with timestamps) to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Fetch a repository and report its health score.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_json_option(analyze_parser)
    analyze_parser.add_argument("url", help="GitHub repository URL.")

    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Read key source files and produce an AI summary of the codebase.",
    )
    _add_verbose_option(summarize_parser, suppress_default=True)
    _add_json_option(summarize_parser)
    summarize_parser.add_argument("url", help="GitHub repository URL.")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate missing project files (README, LICENSE, ...).",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument("url", help="GitHub repository URL.")
    generate_parser.add_argument(
        "-a",
        "--action",
        dest="actions",
        action="append",
        choices=sorted(ACTIONS),
        help="File to generate; repeat for several. Defaults to the report's recommendations.",
    )
    generate_parser.add_argument(
        "-o",
        "--output-dir",
        default=".",
        help="Directory the generated files are written to (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite files that already exist in the output directory.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repohealth commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        orchestrator = Orchestrator(load_config(args.config))
    except ConfigError as exc:
        parser.exit(1, f"repohealth: {exc}\n")

    try:
        if args.command == "analyze":
            result = orchestrator.analyze(args.url)
            if args.json:
                print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
            else:
                print(_format_report(result))
        elif args.command == "summarize":
            snapshot = orchestrator.analyze(args.url).snapshot
            summary = orchestrator.summarize(snapshot)
            if args.json:
                print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
            else:
                print(f"{snapshot.full_name} ({summary.project_type})")
                print(summary.summary.purpose)
                print()
                print(summary.summary.narrative)
        elif args.command == "generate":
            result = orchestrator.analyze(args.url)
            actions = args.actions or list(result.report.recommendations)
            if not actions:
                print("Nothing to generate: all standard files are present")
                return
            outcome = orchestrator.generate(result.snapshot, actions)
            written = orchestrator.write_files(
                outcome.files, Path(args.output_dir), force=bool(args.force)
            )
            for path in written:
                print(f"Wrote {_relativize(path)}")
            for action, error in outcome.errors.items():
                print(f"Failed {action}: {error}", file=sys.stderr)
            if outcome.errors:
                parser.exit(1)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (RepoHealthError, FileExistsError, ValueError) as exc:
        parser.exit(
            1,
            f"repohealth {args.command} failed: {exc}\nRun with --verbose for more details.\n",
        )


def _format_report(result: AnalysisResult) -> str:
    report = result.report
    lines = [
        f"{result.snapshot.full_name}",
        report.summary,
        f"  documentation: {report.scores.documentation}/100",
        f"  structure:     {report.scores.structure}/100",
    ]
    if report.issues:
        lines.append("")
        lines.append("Issues:")
        lines.extend(f"  {issue}" for issue in report.issues)
    if report.recommendations:
        lines.append("")
        lines.append("Recommended actions: " + ", ".join(report.recommendations))
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
