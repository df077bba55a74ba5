#!/usr/bin/env python3
"""Log rotation service: entry point."""

import argparse
import dataclasses
import logging
import os
import signal
import sys
import time

from logrotate.config import (
    ROLLING_POLICIES,
    load_options,
    load_yaml_config,
    new_rotation_policy,
)
from logrotate.rotation import log_rotate
from logrotate.scheduler import SchedulerRegistry

logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Log Rotation Service")
    parser.add_argument(
        "--log-files", nargs="+", default=None,
        help="Active log files to manage; one scheduler runs per directory",
    )
    parser.add_argument(
        "--once", metavar="DIR", default=None,
        help="Run a single rotation pass over DIR and exit",
    )
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--policy", choices=ROLLING_POLICIES, default=None,
                        help="Rolling policy (default: size)")
    parser.add_argument("--size-mb", type=float, default=None,
                        help="Rollover threshold in MB for the size policy")
    parser.add_argument("--backup-count", type=int, default=None,
                        help="Rotated copies to keep per log (negative: keep all)")
    parser.add_argument("--rotate-days", type=int, default=None,
                        help="Days between rollovers for the daily policy")
    parser.add_argument("--recursive", action="store_true", default=None,
                        help="Also rotate log files in subdirectories")
    return parser


def run_once(directory: str, options) -> int:
    """Single administrative pass. Returns a process exit code."""
    if not os.path.isdir(directory):
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        return 1
    policy = new_rotation_policy(options)
    results = log_rotate(directory, policy.size_mb, policy.backup_count,
                         recursive=policy.recursive)
    if not results:
        print(f"No log files rotated in {directory}.")
    for result in results:
        status = "ok" if result.ok else "FAILED"
        line = f"  [{status}] {result.path}"
        if result.rotated_path:
            line += f" -> {result.rotated_path}"
        if result.archives:
            line += f" ({len(result.archives)} archived)"
        print(line)
    return 0 if all(r.ok for r in results) else 1


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [LOGROTATE] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    args = build_cli_parser().parse_args(argv)

    try:
        options = load_options(args, load_yaml_config(args.config))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.once:
        return run_once(args.once, options)

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    registry = SchedulerRegistry()
    log_files = args.log_files or [options.logger_file]
    for log_file in log_files:
        policy = new_rotation_policy(dataclasses.replace(options, logger_file=log_file))
        if not registry.rotate(policy):
            logger.info("Directory %s already scheduled, skipping %s",
                        policy.log_file_dir, policy.log_file_path)

    logger.info("Log rotation running for %d director%s. Press Ctrl+C to stop.",
                len(registry), "y" if len(registry) == 1 else "ies")

    try:
        while _running:
            time.sleep(1)
    except KeyboardInterrupt:
        pass

    logger.info("Shutting down...")
    registry.stop_all()
    logger.info("Log rotation stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
