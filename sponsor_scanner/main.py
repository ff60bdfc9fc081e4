"""Main entry point for the Sponsor Job Scanner service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional

from sponsor_scanner.adapters.exceptions import AdapterError
from sponsor_scanner.adapters.factory import get_adapter
from sponsor_scanner.config.environment import EnvironmentConfig
from sponsor_scanner.config.exceptions import ConfigurationError
from sponsor_scanner.config.loader import load_config
from sponsor_scanner.config.models import AppConfig
from sponsor_scanner.logging import get_logger
from sponsor_scanner.logging.config import configure_logging
from sponsor_scanner.persistence import Database, JobStore, PersistenceError, init_database
from sponsor_scanner.pipeline import ScanPipeline
from sponsor_scanner.reference.exceptions import ReferenceLoadError
from sponsor_scanner.scheduler import SchedulerService

logger = get_logger(__name__, component="cli")

# Failures that end a run; anything else is a bug and logged as fatal
RUN_ERRORS = (AdapterError, PersistenceError, ReferenceLoadError)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sponsor-scanner",
        description="Sponsor Job Scanner - finds job postings from H-1B sponsoring employers",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--manual-run",
        action="store_true",
        help="Run a single scan immediately and exit",
    )
    mode.add_argument(
        "--export",
        type=Path,
        metavar="PATH",
        default=None,
        help="Export all stored jobs to a CSV file and exit",
    )
    mode.add_argument(
        "--stats",
        action="store_true",
        help="Log database statistics and exit",
    )
    return parser


def resolve_log_level(
    cli_level: Optional[str], env_config: EnvironmentConfig, app_config: AppConfig
) -> str:
    """Log level priority: CLI > environment > config file."""
    if cli_level:
        return cli_level.upper()
    if env_config.log_level:
        return env_config.log_level
    return app_config.logging.level


def run_manual(pipeline: ScanPipeline) -> int:
    logger.info("Running a single scan", extra={"event": "service.single_run.starting"})

    try:
        result = pipeline.run_once()
    except RUN_ERRORS as e:
        logger.error(
            f"Single scan failed: {e}",
            extra={"event": "service.single_run.failed", "error_type": type(e).__name__},
        )
        return 1

    if result.skipped:
        return 1

    stats = result.stats
    logger.info(
        f"Scan finished: "
        f"{stats.jobs_scraped} scraped, "
        f"{stats.jobs_filtered} from sponsors, "
        f"{stats.jobs_inserted} new, "
        f"{stats.jobs_duplicated} duplicates",
        extra={
            "event": "service.single_run.completed",
            "duration_seconds": result.total_duration_seconds,
            "api_calls_made": stats.api_calls_made,
        },
    )
    return 0


def run_export(store: JobStore, path: Path) -> int:
    count = store.export_to_csv(path)
    logger.info(
        f"Exported {count} jobs to {path}",
        extra={"event": "service.export.completed", "path": str(path), "rows": count},
    )
    return 0


def run_stats(store: JobStore) -> int:
    summary = store.get_scraping_stats()

    logger.info(
        f"Database statistics: {summary.total_jobs} jobs, "
        f"{summary.jobs_last_24h} in the last 24h, "
        f"{summary.distinct_companies} companies, "
        f"{summary.sponsor_companies} known sponsors",
        extra={
            "event": "service.stats",
            "total_jobs": summary.total_jobs,
            "jobs_last_24h": summary.jobs_last_24h,
            "distinct_companies": summary.distinct_companies,
            "sponsor_companies": summary.sponsor_companies,
            "recent_run_count": len(summary.recent_runs),
        },
    )
    for run in summary.recent_runs:
        logger.info(
            f"Run {run.id} at {run.run_timestamp.isoformat()}: {run.status.value}",
            extra={
                "event": "service.stats.run",
                "run_log_id": run.id,
                "status": run.status.value,
                "jobs_scraped": run.jobs_scraped,
                "jobs_filtered": run.jobs_filtered,
                "jobs_inserted": run.jobs_inserted,
                "jobs_duplicated": run.jobs_duplicated,
                "api_calls_made": run.api_calls_made,
                "error_message": run.error_message,
            },
        )
    return 0


def run_daemon(pipeline: ScanPipeline, interval_seconds: int) -> int:
    shutdown_event = threading.Event()

    def scheduled_scan() -> None:
        try:
            pipeline.run_once()
        except RUN_ERRORS as e:
            # Already recorded by the pipeline; keep the schedule alive
            logger.warning(
                f"Scheduled scan failed: {e}",
                extra={"event": "service.scheduled_scan.failed", "error_type": type(e).__name__},
            )

    scheduler_service = SchedulerService(
        scan_callable=scheduled_scan,
        interval_seconds=interval_seconds,
        shutdown_event=shutdown_event,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Got signal {signum}; stopping the daemon",
            extra={"event": "service.signal_received", "signal": signum},
        )
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    scheduler_service.start()
    next_run = scheduler_service.get_next_run_time()
    logger.info(
        "Daemon running; Ctrl+C or SIGTERM stops it",
        extra={
            "event": "service.daemon_mode.started",
            "next_run_time": next_run.isoformat() if next_run else None,
        },
    )

    try:
        shutdown_event.wait()
    finally:
        scheduler_service.shutdown(wait=True)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Sponsor Job Scanner.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)
    offline_command = args.export is not None or args.stats

    database: Optional[Database] = None
    adapter = None

    try:
        app_config, env_config = load_config(args.config, require_api_key=not offline_command)

        log_level = resolve_log_level(args.log_level, env_config, app_config)
        configure_logging(
            level=log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "Sponsor Job Scanner starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": log_level,
                "manual_run": args.manual_run,
                "scan_interval_seconds": app_config.scan_interval_seconds,
            },
        )

        database = init_database(env_config.database_url)
        store = JobStore(database)

        if args.export is not None:
            return run_export(store, args.export)
        if args.stats:
            return run_stats(store)

        adapter = get_adapter(app_config, env_config.serp_api_key)
        pipeline = ScanPipeline(app_config=app_config, store=store, adapter=adapter)

        if args.manual_run:
            return run_manual(pipeline)
        return run_daemon(pipeline, app_config.scan_interval_seconds)

    except ConfigurationError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1
    except (AdapterError, PersistenceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Startup failed: {e}",
            extra={"event": "service.startup.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={"event": "service.fatal", "error_type": type(e).__name__},
            exc_info=True,
        )
        return 1
    finally:
        if adapter is not None:
            adapter.close()
        if database is not None:
            database.close()
            logger.info(
                "Sponsor Job Scanner stopped",
                extra={
                    "event": "service.stopping",
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )


if __name__ == "__main__":
    sys.exit(main())
