"""CLI entry point for formbridge."""

from __future__ import annotations

import argparse
from pathlib import Path

from formbridge import __version__, logger
from formbridge.exceptions import PackageError
from formbridge.logging import configure_logging
from formbridge.reconciler import persist_report, run_reconcile
from formbridge.settings import get_settings
from formbridge.typing.models import ReconcileRequest


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Register inputs shared by `validate` and `fix`.

    Args:
        parser (argparse.ArgumentParser): Sub-command parser.
    """
    parser.add_argument("--source", required=True, type=Path, dest="source_path", help="PDF form fields JSON")
    parser.add_argument("--target", type=Path, default=None, dest="target_path", help="Bubble fields JSON")
    parser.add_argument("--template", default="default", dest="template_id")
    parser.add_argument("--store-dir", type=Path, default=None, dest="store_dir")
    parser.add_argument("--output", type=Path, default=None, dest="output_path")


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="formbridge")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate PDF fields against Bubble fields")
    _add_common_arguments(validate_parser)
    validate_parser.add_argument("--mappings", type=Path, default=None, dest="mappings_path")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when blocking errors remain",
    )

    fix_parser = subparsers.add_parser("fix", help="Generate, and optionally apply, auto-fixes")
    _add_common_arguments(fix_parser)
    fix_parser.add_argument("--apply", action="store_true", dest="apply_fixes")

    return parser


def _build_reconcile_request(args: argparse.Namespace) -> ReconcileRequest:
    """Build reconciliation request from CLI arguments.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Returns:
        ReconcileRequest: Request object.
    """
    return ReconcileRequest(
        source_path=args.source_path,
        target_path=args.target_path,
        mappings_path=getattr(args, "mappings_path", None),
        template_id=args.template_id,
        store_dir=args.store_dir,
        output_path=args.output_path,
        generate_fixes=args.command == "fix",
        apply_fixes=getattr(args, "apply_fixes", False),
    )


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    if args.command not in {"validate", "fix"}:
        parser.print_help()
        return 0

    try:
        request = _build_reconcile_request(args)
        report = run_reconcile(request, settings)
    except PackageError:
        logger.exception("Reconciliation failed")
        return 1
    except KeyboardInterrupt:
        logger.info("Reconciliation aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error during reconciliation")
        return 1

    output_path = request.output_path
    if output_path is None:
        output_path = Path(settings.results_dir) / f"{request.template_id}.report.json"
    persist_report(report, output_path)
    logger.info(
        "Reconciliation completed",
        extra={
            "output_path": str(output_path),
            "errors": report.summary.errors,
            "warnings": report.summary.warnings,
        },
    )

    if getattr(args, "strict", False) and report.summary.blocking:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
