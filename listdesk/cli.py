"""
listdesk CLI — Command-Line Interface
=====================================
Creates one ItemStore and hands it to the chosen front end.

Usage:
    # Interactive terminal screen
    python -m listdesk.cli repl
    python -m listdesk.cli repl --seed milk --seed eggs

    # HTTP + WebSocket server
    python -m listdesk.cli serve --port 8000

    # Scripted walkthrough: create, update, delete, out-of-range update
    python -m listdesk.cli demo
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from listkeeper import ItemStore
from listdesk.config import DeskConfig, parse_log_level, parse_port

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_repl(args, store: ItemStore, config: DeskConfig) -> int:
    """Run the interactive REPL."""
    from listdesk.repl import run_repl

    run_repl(store)
    return 0


def cmd_serve(args, store: ItemStore, config: DeskConfig) -> int:
    """Run the HTTP server."""
    from listdesk.server import run_server

    run_server(config, store=store)
    return 0


def cmd_demo(args, store: ItemStore, config: DeskConfig) -> int:
    """Walk through create/update/delete and show every notification."""
    notifications = []
    subscription = store.subscribe(lambda: notifications.append(store.read_all()))

    steps = [
        ('create("A")', lambda: store.create("A")),
        ('create("B")', lambda: store.create("B")),
        ('update(1, "C")', lambda: store.update(1, "C")),
        ("delete(0)", lambda: store.delete(0)),
        ('update(5, "Z")', lambda: store.update(5, "Z")),
    ]

    print("─── listdesk demo ───")
    print(f"  start            → {list(store.read_all())}")
    for label, step in steps:
        before = len(notifications)
        step()
        fired = len(notifications) - before
        print(f"  {label:<16} → {list(store.read_all())}  ({fired} notification(s))")

    store.unsubscribe(subscription)
    print(f"  total notifications: {len(notifications)}")
    return 0


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", type=parse_log_level, default=None,
                        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    common.add_argument("--seed", action="append", default=None, metavar="TEXT",
                        help="Initial record (repeatable)")

    parser = argparse.ArgumentParser(
        prog="listdesk",
        description="Observable list of text records",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("repl", parents=[common], help="Interactive terminal screen")

    p_serve = subparsers.add_parser("serve", parents=[common], help="HTTP + WebSocket server")
    p_serve.add_argument("--host", default=None, help="Bind address")
    p_serve.add_argument("--port", type=parse_port, default=None, help="Port")

    subparsers.add_parser("demo", parents=[common], help="Scripted walkthrough")

    return parser


COMMANDS = {
    "repl": cmd_repl,
    "serve": cmd_serve,
    "demo": cmd_demo,
}


def resolve_config(args) -> DeskConfig:
    """Environment config with command-line overrides applied."""
    config = DeskConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    if args.seed is not None:
        config.seed = list(args.seed)
    if getattr(args, "host", None):
        config.host = args.host
    if getattr(args, "port", None):
        config.port = args.port
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = resolve_config(args)
    except ValueError as e:
        print(f"✘ {e}")
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = ItemStore(config.seed)
    log.info("Store ready with %d record(s)", len(store))
    return COMMANDS[args.command](args, store, config)


if __name__ == "__main__":
    sys.exit(main())
