"""
Live Intel - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line interface for the live intel orchestrator.

- argparse-based CLI
- Loads configuration from environment, CLI overrides it
- Wires persistence and audit collaborators
- Runs once (--single-run) or until SIGINT/SIGTERM

============================================================
USAGE
============================================================
live-intel
live-intel --interval 30 --log-format text
live-intel --single-run --database-url sqlite:///live_intel.db

============================================================
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from dataclasses import replace
from typing import List, Optional

from .audit import CodexAuditLog
from .config import LiveIntelConfig
from .exceptions import LiveIntelError
from .orchestrator import IntelOrchestrator
from .persistence import SqlSnapshotStore


logger = logging.getLogger(__name__)


# ============================================================
# LOGGING SETUP
# ============================================================

def setup_logging(level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """
    Set up structured logging on stdout.

    Args:
        level: Log level
        log_format: Output format (json or text)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
            })
        )
    else:
        formatter = logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("live_intel")


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="live-intel",
        description="Live intelligence orchestrator for logistics dispatch",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Run every 60 seconds
  %(prog)s --interval 30                    # Run every 30 seconds
  %(prog)s --single-run --log-format text   # One run, print status
        """
    )

    execution_group = parser.add_argument_group("Execution Options")

    execution_group.add_argument(
        "--interval",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Run interval in seconds (default: LIVE_INTEL_RUN_INTERVAL_SECONDS or 60)",
    )

    execution_group.add_argument(
        "--single-run",
        action="store_true",
        help="Run every source once, print status as JSON and exit",
    )

    logging_group = parser.add_argument_group("Logging Options")

    logging_group.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )

    logging_group.add_argument(
        "--log-format",
        type=str,
        choices=["json", "text"],
        default="json",
        help="Logging format (default: json)",
    )

    collaborator_group = parser.add_argument_group("Collaborators")

    collaborator_group.add_argument(
        "--database-url",
        type=str,
        default=None,
        metavar="URL",
        help="SQLAlchemy URL for snapshot persistence (default: disabled)",
    )

    collaborator_group.add_argument(
        "--codex-url",
        type=str,
        default=None,
        metavar="URL",
        help="Base URL of the codex audit service",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version="%(prog)s 1.0.0",
    )

    return parser


def build_config(args: argparse.Namespace, base: Optional[LiveIntelConfig] = None) -> LiveIntelConfig:
    """Apply CLI overrides on top of environment configuration."""
    config = base or LiveIntelConfig.from_env()
    overrides = {}
    if args.interval is not None:
        overrides["run_interval_seconds"] = args.interval
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.database_url is not None:
        overrides["database_url"] = args.database_url
    if args.codex_url is not None:
        overrides["codex_url"] = args.codex_url
    return replace(config, **overrides)


# ============================================================
# MAIN ENTRY POINT
# ============================================================

def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    if sys.platform == "win32":
        return
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)


async def async_main(config: LiveIntelConfig, single_run: bool = False) -> int:
    """
    Async main entry point.

    Returns:
        Exit code
    """
    sink = None
    if config.database_url:
        store = SqlSnapshotStore.from_url(config.database_url)
        store.create_tables()
        sink = store

    audit_log = CodexAuditLog(
        config.codex_url,
        actor=config.audit_actor,
        timeout_seconds=config.audit_timeout_seconds,
    )
    orchestrator = IntelOrchestrator(config, sink=sink, audit_log=audit_log)

    try:
        if single_run:
            await orchestrator.run_once()
            print(json.dumps(orchestrator.get_orchestrator_status().to_dict(), indent=2))
            return 0

        stop_event = asyncio.Event()
        _install_signal_handlers(stop_event)
        await orchestrator.start()
        await stop_event.wait()
        logger.info("Shutdown requested")
        return 0
    finally:
        await orchestrator.stop()
        await orchestrator.wait_idle()
        await audit_log.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    config = build_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, args.log_format)

    try:
        return asyncio.run(async_main(config, single_run=args.single_run))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except LiveIntelError as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
