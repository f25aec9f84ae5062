# =============================================================================
# mailcompat Command Line
# =============================================================================
# Thin presentation layer over the library:
#
#   mailcompat email.html                  warnings + per-engine scores
#   mailcompat email.html --json           same, as JSON
#   mailcompat email.html --transform gmail-web
#                                          the document as Gmail would show it
#
# Defaults for framework, engines and output format come from config.toml;
# flags override them.
#
# Exit codes: 0 success, 1 configuration or input error, 2 usage error.
# =============================================================================

import argparse
import json
import logging
import sys
from pathlib import Path

from mailcompat import __app_name__, __version__
from mailcompat.analysis.scoring import EngineScore, score
from mailcompat.analysis.warnings import generate_warnings
from mailcompat.config import Config, ConfigError, print_paths
from mailcompat.core.document import InputTooLargeError
from mailcompat.core.engines import ENGINES, EngineProfile, get_engine
from mailcompat.core.models import EngineWarning, Framework
from mailcompat.transform.pipeline import transform_for_engine

logger = logging.getLogger(__name__)


# =============================================================================
# Argument Parsing
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="mailcompat: check how an HTML email renders across mail clients",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="HTML file to analyze ('-' reads standard input)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--framework",
        choices=[f.value for f in Framework],
        help="Authoring framework, for tailored fixes (default: from config)",
    )

    parser.add_argument(
        "--engine",
        action="append",
        metavar="ID",
        help="Only report on this engine (repeatable; default: all)",
    )

    parser.add_argument(
        "--transform",
        metavar="ID",
        help="Print the document as rewritten for one engine",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of a text report",
    )

    parser.add_argument(
        "--paths",
        action="store_true",
        help="Print configuration paths and exit",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (default: XDG config location)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging)",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.paths and not args.file:
        parser.error("the following arguments are required: file")
    return args


# =============================================================================
# Output
# =============================================================================

def format_report(
    warnings: list[EngineWarning],
    scores: dict[str, EngineScore],
    engines: list[EngineProfile],
    show_fixes: bool = False,
) -> str:
    """Human-readable report: one section per engine, worst first."""
    lines = []
    ordered = sorted(engines, key=lambda e: scores[e.id].score)

    for engine in ordered:
        result = scores[engine.id]
        lines.append(
            f"{engine.name} ({engine.id}): {result.score}/100  "
            f"[{result.errors} errors, {result.warnings} warnings, {result.info} info]"
        )
        for warning in warnings:
            if warning.engine_id != engine.id:
                continue
            lines.append(f"  {warning.severity.value:<7} {warning.feature}: {warning.message}")
            if warning.selector:
                lines.append(f"          at {warning.selector}")
            if warning.suggestion:
                lines.append(f"          fix: {warning.suggestion}")
            if show_fixes and warning.fix:
                lines.append(f"          {warning.fix.description} ({warning.fix.language})")
                lines.extend(_indent(warning.fix.before, "          - "))
                lines.extend(_indent(warning.fix.after, "          + "))
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def _indent(text: str, prefix: str) -> list[str]:
    return [prefix + line for line in text.splitlines()]


def _read_input(file: str) -> str:
    if file == "-":
        return sys.stdin.read()
    return Path(file).read_text(encoding="utf-8")


# =============================================================================
# CLI Entry Point
# =============================================================================

def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for mailcompat.

    This function:
        1. Parses command-line arguments
        2. Handles special commands (--paths, --version)
        3. Loads configuration
        4. Runs the analysis or transform and prints the result

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle --paths flag
    if args.paths:
        print_paths()
        return 0

    # Load configuration
    if args.config and not args.config.exists():
        print(f"Config file not found: {args.config}", file=sys.stderr)
        return 1
    try:
        config = Config.load(args.config)
        framework = Framework.coerce(args.framework) or config.analysis.framework_enum()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    engine_ids = args.engine or config.analysis.engines
    engines = []
    for engine_id in engine_ids:
        engine = get_engine(engine_id)
        if engine is None:
            print(f"Unknown engine: {engine_id}", file=sys.stderr)
            return 1
        engines.append(engine)
    engines = engines or list(ENGINES)

    use_json = args.json or config.report.format == "json"
    limit = config.analysis.max_html_bytes

    try:
        html = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    try:
        if args.transform:
            result = transform_for_engine(html, args.transform, framework, limit=limit)
            if use_json:
                print(json.dumps(result.to_dict(), indent=2))
            else:
                print(result.html)
                for warning in result.warnings:
                    print(
                        f"{warning.severity.value}: {warning.feature}: {warning.message}",
                        file=sys.stderr,
                    )
            return 0

        warnings = generate_warnings(html, framework, engines=engines, limit=limit)
    except InputTooLargeError as e:
        print(f"Input error: {e}", file=sys.stderr)
        return 1

    scores = score(warnings, engines)
    logger.debug(f"{len(warnings)} warnings across {len(engines)} engines")

    if use_json:
        print(json.dumps({
            "framework": framework.value if framework else None,
            "scores": {engine_id: s.to_dict() for engine_id, s in scores.items()},
            "warnings": [w.to_dict() for w in warnings],
        }, indent=2))
    else:
        print(format_report(warnings, scores, engines, config.report.show_fixes), end="")

    return 0


if __name__ == "__main__":
    sys.exit(main())
