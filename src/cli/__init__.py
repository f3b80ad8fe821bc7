# SPDX-License-Identifier: Apache-2.0
"""CLI for ccbatch: replay commit batches against a VCS backend."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ccbatch.config import ReconcilerConfig
from ccbatch.core.base import Backend
from ccbatch.core.host import MappingStatusOracle, ProgressSink, StatusOracle
from ccbatch.core.pending import PendingPathIndex
from ccbatch.core.registry import create_backend

log = logging.getLogger("ccbatch.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_config(args: argparse.Namespace) -> ReconcilerConfig:
    """Environment config with command line overrides applied."""
    config = ReconcilerConfig.from_env()
    overrides = {}
    if getattr(args, "ucm", False):
        overrides["use_ucm"] = True
    if getattr(args, "view_root", None):
        overrides["view_root"] = Path(args.view_root).resolve()
    if not overrides:
        return config
    return replace(config, **overrides)


def _build_backend(args: argparse.Namespace, config: ReconcilerConfig) -> Backend:
    return create_backend(getattr(args, "backend", "cleartool"), config)


def _build_oracle(backend: Backend, statuses) -> StatusOracle:
    """Status from the batch file first, then from the backend if it can tell."""
    fallback: Optional[StatusOracle] = None
    from ccbatch.backends.cleartool import CleartoolBackend, CleartoolStatusOracle
    if isinstance(backend, CleartoolBackend):
        fallback = CleartoolStatusOracle(backend)
    return MappingStatusOracle(statuses, fallback=fallback)


def _load_index(args: argparse.Namespace) -> PendingPathIndex:
    state = getattr(args, "state", None)
    if not state:
        return PendingPathIndex()
    return PendingPathIndex.load(state)


class _LogProgress(ProgressSink):
    """Progress sink that logs each step and honours a cancel flag."""

    def __init__(self):
        self.total = 0
        self.done = 0
        self.cancelled = False

    def start(self, total: int) -> None:
        self.total = total

    def advance(self, text: str) -> None:
        self.done += 1
        log.info("[%d/%d] %s", self.done, self.total, text)

    def is_cancelled(self) -> bool:
        return self.cancelled


def _print_result(data: dict, args: argparse.Namespace) -> None:
    """Print result as JSON (if --json) or human-readable text."""
    if getattr(args, "json", False):
        print(json.dumps(data))
    else:
        for key, value in data.items():
            if isinstance(value, list):
                print(f"{key}:")
                for item in value:
                    print(f"  {item}")
            else:
                print(f"{key}: {value}")


def _print_error(message: str, args: argparse.Namespace) -> None:
    """Print error as JSON (if --json) or plain text to stderr."""
    if getattr(args, "json", False):
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)


def _add_backend_args(parser: argparse.ArgumentParser) -> None:
    """Add backend selection flags to a subparser."""
    parser.add_argument(
        "--backend",
        default="cleartool",
        help="Backend to dispatch to (default: cleartool; see 'ccbatch backends')",
    )
    parser.add_argument(
        "--view-root",
        default=None,
        metavar="DIR",
        help="Directory backend commands run in (default: $CCBATCH_VIEW_ROOT or cwd)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccbatch",
        description="Replay commit batches against ClearCase in dependency order.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # --- plan ---
    p_plan = sub.add_parser(
        "plan",
        help="Show the backend operations a batch would produce.",
        description="Dry-run a batch file and print the ordered backend operations.",
    )
    p_plan.add_argument("batch", help="Batch file (JSON)")
    p_plan.add_argument("--state", help="Pending-path state file to consult (read only)")
    p_plan.add_argument("--ucm", action="store_true", help="Activity-based (UCM) view")
    p_plan.add_argument("--json", action="store_true", help="JSON output")

    # --- commit ---
    p_commit = sub.add_parser(
        "commit",
        help="Commit a batch of changes.",
        description=(
            "Replay a batch file against the backend. Failed operations are "
            "reported; the rest of the batch still goes through."
        ),
    )
    p_commit.add_argument("batch", help="Batch file (JSON)")
    p_commit.add_argument("-m", "--message", help="Checkin comment (overrides the batch file)")
    p_commit.add_argument("--state", help="Pending-path state file, updated after the commit")
    p_commit.add_argument("--ucm", action="store_true", help="Activity-based (UCM) view")
    p_commit.add_argument("--json", action="store_true", help="JSON output")
    _add_backend_args(p_commit)

    # --- message ---
    p_msg = sub.add_parser(
        "message",
        help="Print the default commit message for some paths.",
        description="Collect the checkout comments of PATHs into one commit message.",
    )
    p_msg.add_argument("paths", nargs="+", metavar="PATH")
    p_msg.add_argument("--json", action="store_true", help="JSON output")
    _add_backend_args(p_msg)

    # --- backends ---
    p_back = sub.add_parser("backends", help="List available backends.")
    p_back.add_argument("--json", action="store_true", help="JSON output")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == "plan":
            from .plan import cmd_plan
            sys.exit(cmd_plan(args))
        elif args.command == "commit":
            from .commit import cmd_commit
            sys.exit(cmd_commit(args))
        elif args.command == "message":
            from .message import cmd_message
            sys.exit(cmd_message(args))
        elif args.command == "backends":
            from .backends import cmd_backends
            sys.exit(cmd_backends(args))
        else:
            parser.print_help()
            sys.exit(1)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        _print_error(str(e), args)
        sys.exit(1)
