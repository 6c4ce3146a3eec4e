#!/usr/bin/env python3
"""Start the wx tunnel settings editor.

    python tunnel_gui.py --document app.config
    python tunnel_gui.py                # asks for the file

Opening takes the session backup. If that fails, nothing is edited.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import wx
import yaml

from config_gui import TunnelConfigFrame, choose_config_file, make_wx_notifier
from editor_config import load_editor_config_from_yaml
from editor_session import EditorSession
from errors import ConfigEditError

LOG = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Tunnel settings editor (GUI)")
    ap.add_argument("--document", default="", help="Path to the XML config document to edit")
    ap.add_argument("--editor-config", default="", help="Optional YAML file describing the document layout")
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=1,
        help="Increase logging verbosity (use -vv for DEBUG)",
    )
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose >= 2 else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    app = wx.App(False)

    path = str(args.document or "").strip() or choose_config_file()
    if not path:
        return 0

    try:
        config = load_editor_config_from_yaml(args.editor_config or None)
        session = EditorSession.open(path, notify=make_wx_notifier(), config=config)
    except (ConfigEditError, OSError, ValueError, yaml.YAMLError) as exc:
        reason = exc.reason if isinstance(exc, ConfigEditError) else str(exc)
        LOG.error("Cannot open %s: %s", path, reason)
        wx.MessageBox(f"Cannot open {path}:\n{reason}", "Error", wx.ICON_ERROR)
        return 2

    frame = TunnelConfigFrame(session)
    frame.Show()
    app.MainLoop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
