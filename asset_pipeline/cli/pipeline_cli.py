"""
Command-line interface for the asset import pipeline.

Usage:
    python -m asset_pipeline.cli.pipeline_cli files
    python -m asset_pipeline.cli.pipeline_cli preview <file_id>
    python -m asset_pipeline.cli.pipeline_cli validate <file_id>
    python -m asset_pipeline.cli.pipeline_cli import <file_id> [--approve]
    python -m asset_pipeline.cli.pipeline_cli serve [--host HOST] [--port PORT]
    python -m asset_pipeline.cli.pipeline_cli cleanup [--older-than-hours N]

Settings come from PIPELINE_* environment variables and .env; the global
options below override them.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.core.errors import PipelineError
from asset_pipeline.core.models import ImportJob, JobStatus, ValidationSummary
from asset_pipeline.observability.logger import get_logger, setup_logger
from asset_pipeline.observability.metrics import start_metrics_server
from asset_pipeline.pipeline import PipelineServices, build_services

logger = get_logger(__name__)


def print_summary(summary: ValidationSummary) -> None:
    print(f"\n{'=' * 60}")
    print("VALIDATION SUMMARY")
    print(f"{'=' * 60}\n")
    print(f"  Total rows:   {summary.total_rows}")
    print(f"  Valid rows:   {summary.valid_count}")
    print(f"  Invalid rows: {summary.invalid_count}")
    if summary.mapping is not None:
        mapping = summary.mapping
        print(f"  Columns mapped: {mapping.mapped_count} of {mapping.total_csv_columns}")
        if mapping.unmapped_fields:
            print(f"  Unmapped columns: {', '.join(mapping.unmapped_fields)}")
        if mapping.advisory:
            print(f"\n  NOTE: {mapping.advisory}")

    for title, messages in (
        ("Parse errors", summary.parse_errors),
        ("Errors", summary.errors),
        ("Warnings", summary.warnings),
    ):
        if messages:
            print(f"\n{title}:")
            for message in messages:
                print(f"  - {message}")
    print(f"\n{'=' * 60}\n")


def print_job(job: ImportJob) -> None:
    print(f"\nJob {job.id} ({job.source_file_id})")
    print(f"  Status:   {job.status.value} / {job.phase.value}")
    print(f"  Progress: {job.progress.processed_rows} of {job.progress.total_rows} rows")
    print(f"  Valid: {job.valid_rows}  Invalid: {job.invalid_rows}  Imported: {job.imported_rows}")
    for advisory in job.advisories:
        print(f"  NOTE: {advisory}")
    if job.errors:
        print("  Errors:")
        for message in job.errors:
            print(f"    - {message}")


async def files_command(services: PipelineServices, args) -> int:
    files = await services.inspector.list_files()
    if not files:
        print(f"No CSV files in {services.settings.data_dir}")
        return 0

    print(f"{'File ID':<40} {'Size':>10} {'Modified'}")
    print(f"{'-' * 72}")
    for info in files:
        print(f"{info.id:<40} {info.size:>10} {info.modified_at:%Y-%m-%d %H:%M:%S}")
    return 0


async def preview_command(services: PipelineServices, args) -> int:
    preview = await services.inspector.preview(args.file_id)
    print(f"\n{preview.file_id}: {preview.total_rows} rows, columns: {', '.join(preview.columns)}\n")
    for index, row in enumerate(preview.rows, start=1):
        print(f"[{index}]")
        for column in preview.columns:
            print(f"  {column}: {row.get(column, '')}")
    for message in preview.parse_errors:
        print(f"  ! {message}")
    return 0


async def validate_command(services: PipelineServices, args) -> int:
    summary = await services.inspector.validate(args.file_id)
    print_summary(summary)
    return 0 if summary.is_valid else 2


async def import_command(services: PipelineServices, args) -> int:
    """
    Run an import to STAGED, optionally approving it.

    Exit codes: 0 staged (or completed), 1 failed.
    """
    if args.metrics:
        start_metrics_server(services.settings.metrics_port)

    job = await services.orchestrator.start_import(args.file_id)
    logger.info("Import job created", extra={"job_id": job.id, "file_id": args.file_id})
    job = await services.orchestrator.wait_for(job.id)
    print_job(job)

    if job.status != JobStatus.STAGED:
        return 1

    if args.approve:
        result = await services.approval_gate.approve(job.id)
        print(f"\nImported {result.imported_count} assets ({result.failed_count} failed)")
        print_job(await services.orchestrator.get_status(job.id))
    else:
        print(f"\nStaged. Approve with the API: POST /pipeline/approve/{job.id}")
    return 0


async def cleanup_command(services: PipelineServices, args) -> int:
    deleted = await services.orchestrator.cleanup_finished_jobs(args.older_than_hours)
    print(f"Deleted {len(deleted)} finished jobs")
    return 0


COMMANDS = {
    "files": files_command,
    "preview": preview_command,
    "validate": validate_command,
    "import": import_command,
    "cleanup": cleanup_command,
}


async def run_command(settings: PipelineSettings, args) -> int:
    services = build_services(settings)
    try:
        return await COMMANDS[args.command](services, args)
    finally:
        await services.close()


def serve_command(settings: PipelineSettings, args) -> int:
    import uvicorn

    from asset_pipeline.api import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_settings(args) -> PipelineSettings:
    overrides = {
        "data_dir": args.data_dir,
        "rules_file": args.rules_file,
        "storage_backend": args.storage,
        "log_level": args.log_level,
    }
    return PipelineSettings(**{k: v for k, v in overrides.items() if v is not None})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Asset import pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check how a file's columns map before importing
  python -m asset_pipeline.cli.pipeline_cli validate assets_q1

  # Import and approve in one go
  python -m asset_pipeline.cli.pipeline_cli import assets_q1 --approve

  # Run the HTTP API
  python -m asset_pipeline.cli.pipeline_cli serve --port 8000
        """
    )

    # Global options
    parser.add_argument("--data-dir", help="Directory holding importable CSV files")
    parser.add_argument("--rules-file", help="Cleaning rules and aliases YAML file")
    parser.add_argument(
        "--storage",
        choices=["memory", "postgres"],
        help="Storage backend (default: PIPELINE_STORAGE_BACKEND or memory)"
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("files", help="List importable CSV files")

    preview_parser = subparsers.add_parser("preview", help="Show the first rows of a file")
    preview_parser.add_argument("file_id", help="File id (file name without .csv)")

    validate_parser = subparsers.add_parser("validate", help="Dry-run validation of a file")
    validate_parser.add_argument("file_id", help="File id (file name without .csv)")

    import_parser = subparsers.add_parser("import", help="Import a file into staging")
    import_parser.add_argument("file_id", help="File id (file name without .csv)")
    import_parser.add_argument(
        "--approve",
        action="store_true",
        help="Approve the job once it is staged"
    )
    import_parser.add_argument(
        "--metrics",
        action="store_true",
        help="Expose Prometheus metrics on PIPELINE_METRICS_PORT while running"
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address (default: PIPELINE_API_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PIPELINE_API_PORT)")

    cleanup_parser = subparsers.add_parser("cleanup", help="Delete old finished jobs")
    cleanup_parser.add_argument(
        "--older-than-hours",
        type=int,
        default=None,
        help="Age cutoff in hours (default: PIPELINE_JOB_RETENTION_HOURS, 24)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = build_settings(args)
    setup_logger(level=settings.log_level, format_type=settings.log_format)

    if args.command == "serve":
        return serve_command(settings, args)

    try:
        return asyncio.run(run_command(settings, args))
    except PipelineError as e:
        logger.error("Command failed", extra={"command": args.command, "error_message": str(e)})
        print(f"\nError: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
