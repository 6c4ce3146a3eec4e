#!/usr/bin/env python3
"""Headless editor for the SSH tunnel settings of a host config document.

Every editing command opens a session (which takes the one-per-run backup),
applies the change, validates and saves. `show` is read-only and takes no
backup.

Examples:
    tunnel-config --document app.config show
    tunnel-config --document app.config set SshHost=bastion SshPort=2222
    tunnel-config --document app.config add 10.0.0.1 3389 127.0.0.1 3389
    tunnel-config --document app.config update 2 10.0.0.2 22 127.0.0.1 2222
    tunnel-config --document app.config --yes remove 1

Tunnel positions are 1-based, as printed by `show`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

import yaml

from editor_config import load_editor_config_from_yaml
from editor_session import (
    BASIC_KEYS,
    NOTIFY_CONFIRM,
    NOTIFY_ERROR,
    BasicSettings,
    EditorSession,
    TunnelFields,
    describe_tunnel,
)
from errors import ConfigEditError

LOG = logging.getLogger(__name__)

# CLI key -> BasicSettings attribute
_BASIC_ATTRS: Dict[str, str] = dict(
    zip(BASIC_KEYS, ("ssh_host", "ssh_port", "ssh_user", "max_tunnels", "heartbeat_ms"))
)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


class ConsoleNotifier:
    """notify() for a terminal: info to stdout, errors to stderr."""

    def __init__(
            self,
            assume_yes: bool = False,
            out: Optional[TextIO] = None,
            err: Optional[TextIO] = None,
            ask: Optional[Callable[[str], str]] = None,
    ) -> None:
        self._assume_yes = assume_yes
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self._ask = ask or input

    def __call__(self, kind: str, message: str) -> Optional[bool]:
        if kind == NOTIFY_ERROR:
            print(f"ERROR: {message}", file=self._err)
            return None
        if kind == NOTIFY_CONFIRM:
            if self._assume_yes:
                return True
            try:
                answer = self._ask(f"{message} [y/N] ")
            except EOFError:
                return False
            return answer.strip().lower() in ("y", "yes")
        print(message, file=self._out)
        return None


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="View and edit SSH tunnel settings in a config document")
    ap.add_argument("--document", required=True, help="Path to the XML config document to edit")
    ap.add_argument("--editor-config", default="", help="Optional YAML file describing the document layout")
    ap.add_argument("-y", "--yes", action="store_true", help="Answer yes to confirmation prompts")
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (use -vv for DEBUG)",
    )

    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print basic settings and tunnels")

    p_set = sub.add_parser("set", help="Set basic settings and save")
    p_set.add_argument("assignments", nargs="+", metavar="KEY=VALUE", help=f"KEY is one of: {', '.join(BASIC_KEYS)}")

    for name, help_text in (("add", "Append a tunnel and save"), ("update", "Replace a tunnel and save")):
        p = sub.add_parser(name, help=help_text)
        if name == "update":
            p.add_argument("position", type=int, help="1-based tunnel position")
        p.add_argument("remote_host")
        p.add_argument("remote_port")
        p.add_argument("local_host")
        p.add_argument("local_port")

    p_remove = sub.add_parser("remove", help="Remove a tunnel and save")
    p_remove.add_argument("position", type=int, help="1-based tunnel position")

    return ap.parse_args(argv)


def _print_session(session: EditorSession, out: TextIO) -> None:
    basic = session.basic_settings()
    for key, attr in _BASIC_ATTRS.items():
        print(f"{key:<20} {getattr(basic, attr)}", file=out)

    rows = session.tunnel_rows()
    print(f"Tunnels ({len(rows)}):", file=out)
    for i, rec in enumerate(rows, start=1):
        print(f"  [{i}] {describe_tunnel(rec)}", file=out)
    for skip in session.skipped:
        print(f"  (ignored malformed entry {skip.segment!r}: {skip.reason})", file=out)


def _apply_assignments(basic: BasicSettings, assignments: List[str]) -> None:
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"expected KEY=VALUE, got {item!r}")
        attr = _BASIC_ATTRS.get(key.strip())
        if attr is None:
            raise ValueError(f"unknown setting {key!r} (expected one of: {', '.join(BASIC_KEYS)})")
        setattr(basic, attr, value)


def _fields(args: argparse.Namespace) -> TunnelFields:
    return TunnelFields(
        remote_host=args.remote_host,
        remote_port=args.remote_port,
        local_host=args.local_host,
        local_port=args.local_port,
    )


def _run(args: argparse.Namespace, notifier: ConsoleNotifier, out: TextIO) -> bool:
    config = load_editor_config_from_yaml(args.editor_config or None)
    read_only = args.command == "show"
    session = EditorSession.open(args.document, notify=notifier, config=config, read_only=read_only)

    if args.command == "show":
        _print_session(session, out)
        return True

    basic = session.basic_settings()

    if args.command == "set":
        _apply_assignments(basic, args.assignments)
    elif args.command == "add":
        if not session.add_tunnel(_fields(args)):
            return False
    elif args.command == "update":
        session.select(args.position - 1)
        if not session.update_tunnel(_fields(args)):
            return False
    elif args.command == "remove":
        session.select(args.position - 1)
        if not session.remove_tunnel():
            return False

    return session.save(basic)


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(int(args.verbose))
    out = out or sys.stdout
    notifier = ConsoleNotifier(assume_yes=bool(args.yes), out=out)

    try:
        ok = _run(args, notifier, out)
    except (ConfigEditError, OSError, ValueError, yaml.YAMLError) as exc:
        reason = exc.reason if isinstance(exc, ConfigEditError) else str(exc)
        print(f"ERROR: {reason}", file=sys.stderr)
        return 2

    return 0 if ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
