#!/usr/bin/env python3
"""
config_gui.py

A small wxPython front end for the tunnel settings editor.

Design goals:
- Explain every field with a tooltip.
- Edit tunnels in a simple list (select, then add/update/remove).
- All state lives in an EditorSession; this module only moves strings
  between widgets and the session and shows its notifications.
"""

from __future__ import annotations

from typing import Dict, Optional

import wx

from editor_session import (
    NOTIFY_CONFIRM,
    NOTIFY_ERROR,
    BasicSettings,
    EditorSession,
    Notifier,
    TunnelFields,
)

# -----------------------------
# Tooltips (single source of truth)
# -----------------------------

TOOLTIPS: Dict[str, str] = {
    "SshHost": "Hostname or IP of the SSH server the tunnels are opened through.",
    "SshPort": "TCP port of the SSH server (usually 22).",
    "SshUser": "User name used to log in to the SSH server.",
    "MaxTunnels": "Upper limit on tunnels the client keeps open at once.",
    "HeartbeatIntervalMs": "Milliseconds between keep-alive checks on the SSH connection.",

    "Tunnels": "Forwarding rules, in order. Select a row to load it into the fields below.",
    "tunnel.remote_host": "Host reached from the SSH server side (e.g. 10.0.0.1).",
    "tunnel.remote_port": "Port on the remote host.",
    "tunnel.local_host": "Local address to listen on (e.g. 127.0.0.1).",
    "tunnel.local_port": "Local port to listen on.",
}


def make_wx_notifier(parent: Optional[wx.Window] = None) -> Notifier:
    def notify(kind: str, message: str) -> Optional[bool]:
        if kind == NOTIFY_CONFIRM:
            return wx.MessageBox(message, "Confirm", wx.ICON_QUESTION | wx.YES_NO, parent) == wx.YES
        if kind == NOTIFY_ERROR:
            wx.MessageBox(message, "Validation", wx.ICON_WARNING, parent)
            return None
        wx.MessageBox(message, "Tunnel Config", wx.ICON_INFORMATION, parent)
        return None

    return notify


class TunnelConfigFrame(wx.Frame):
    def __init__(self, session: EditorSession) -> None:
        super().__init__(None, title=f"Tunnel Config ({session.path})", size=wx.Size(760, 620))
        self.session = session

        self._build_ui()
        self._load_basic_into_fields()
        self._load_tunnels_into_list()

        self.Bind(wx.EVT_CLOSE, self._on_close)

    # -----------------------------------------------------------------
    # UI construction
    # -----------------------------------------------------------------

    @staticmethod
    def _make_labeled(parent: wx.Window, label: str, ctrl: wx.Window, tip: Optional[str] = None) -> wx.Sizer:
        s = wx.BoxSizer(wx.HORIZONTAL)
        st = wx.StaticText(parent, label=label, size=wx.Size(180, -1))
        s.Add(st, 0, wx.ALIGN_CENTER_VERTICAL | wx.RIGHT, 8)
        s.Add(ctrl, 1, wx.EXPAND)
        if tip:
            ctrl.SetToolTip(tip)
            st.SetToolTip(tip)
        return s

    def _build_ui(self) -> None:
        panel = wx.Panel(self)
        vs = wx.BoxSizer(wx.VERTICAL)

        basic_box = wx.StaticBoxSizer(wx.VERTICAL, panel, "SSH connection")
        box = basic_box.GetStaticBox()
        self.ssh_host = wx.TextCtrl(box)
        self.ssh_port = wx.TextCtrl(box)
        self.ssh_user = wx.TextCtrl(box)
        self.max_tunnels = wx.TextCtrl(box)
        self.heartbeat_ms = wx.TextCtrl(box)
        for label, ctrl, key in (
                ("Host", self.ssh_host, "SshHost"),
                ("Port", self.ssh_port, "SshPort"),
                ("User", self.ssh_user, "SshUser"),
                ("Max tunnels", self.max_tunnels, "MaxTunnels"),
                ("Heartbeat interval (ms)", self.heartbeat_ms, "HeartbeatIntervalMs"),
        ):
            basic_box.Add(self._make_labeled(box, label, ctrl, TOOLTIPS[key]), 0, wx.EXPAND | wx.ALL, 4)
        vs.Add(basic_box, 0, wx.EXPAND | wx.ALL, 8)

        tunnels_label = wx.StaticText(panel, label="Tunnels")
        tunnels_label.SetToolTip(TOOLTIPS["Tunnels"])
        vs.Add(tunnels_label, 0, wx.LEFT | wx.RIGHT | wx.TOP, 8)

        self.tunnel_list = wx.ListCtrl(panel, style=wx.LC_REPORT | wx.LC_SINGLE_SEL)
        self.tunnel_list.InsertColumn(0, "Remote host", width=200)
        self.tunnel_list.InsertColumn(1, "Remote port", width=100)
        self.tunnel_list.InsertColumn(2, "Local host", width=200)
        self.tunnel_list.InsertColumn(3, "Local port", width=100)
        self.tunnel_list.SetToolTip(TOOLTIPS["Tunnels"])
        vs.Add(self.tunnel_list, 1, wx.EXPAND | wx.ALL, 8)

        fields = wx.FlexGridSizer(rows=2, cols=4, vgap=6, hgap=8)
        fields.AddGrowableCol(1, 1)
        fields.AddGrowableCol(3, 1)
        self.remote_host = wx.TextCtrl(panel)
        self.remote_port = wx.TextCtrl(panel)
        self.local_host = wx.TextCtrl(panel)
        self.local_port = wx.TextCtrl(panel)
        for label, ctrl, key in (
                ("Remote host", self.remote_host, "tunnel.remote_host"),
                ("Remote port", self.remote_port, "tunnel.remote_port"),
                ("Local host", self.local_host, "tunnel.local_host"),
                ("Local port", self.local_port, "tunnel.local_port"),
        ):
            ctrl.SetToolTip(TOOLTIPS[key])
            fields.Add(wx.StaticText(panel, label=label), 0, wx.ALIGN_CENTER_VERTICAL)
            fields.Add(ctrl, 1, wx.EXPAND)
        vs.Add(fields, 0, wx.EXPAND | wx.LEFT | wx.RIGHT, 8)

        btns = wx.BoxSizer(wx.HORIZONTAL)
        self.btn_add = wx.Button(panel, label="Add")
        self.btn_update = wx.Button(panel, label="Update")
        self.btn_remove = wx.Button(panel, label="Remove")
        self.btn_save = wx.Button(panel, wx.ID_SAVE, "Save")
        btns.Add(self.btn_add, 0, wx.RIGHT, 6)
        btns.Add(self.btn_update, 0, wx.RIGHT, 6)
        btns.Add(self.btn_remove, 0, wx.RIGHT, 6)
        btns.AddStretchSpacer(1)
        btns.Add(self.btn_save, 0)
        vs.Add(btns, 0, wx.EXPAND | wx.ALL, 8)

        hint = wx.StaticText(
            panel,
            label="A timestamped backup of the file was taken when it was opened.",
        )
        vs.Add(hint, 0, wx.LEFT | wx.RIGHT | wx.BOTTOM, 8)

        panel.SetSizer(vs)

        self.tunnel_list.Bind(wx.EVT_LIST_ITEM_SELECTED, self._on_select)
        self.tunnel_list.Bind(wx.EVT_LIST_ITEM_DESELECTED, self._on_deselect)
        self.btn_add.Bind(wx.EVT_BUTTON, self._on_add)
        self.btn_update.Bind(wx.EVT_BUTTON, self._on_update)
        self.btn_remove.Bind(wx.EVT_BUTTON, self._on_remove)
        self.btn_save.Bind(wx.EVT_BUTTON, self._on_save)

    # -----------------------------------------------------------------
    # widgets <-> session
    # -----------------------------------------------------------------

    def _load_basic_into_fields(self) -> None:
        basic = self.session.basic_settings()
        self.ssh_host.SetValue(basic.ssh_host)
        self.ssh_port.SetValue(basic.ssh_port)
        self.ssh_user.SetValue(basic.ssh_user)
        self.max_tunnels.SetValue(basic.max_tunnels)
        self.heartbeat_ms.SetValue(basic.heartbeat_ms)

    def _basic_from_fields(self) -> BasicSettings:
        return BasicSettings(
            ssh_host=self.ssh_host.GetValue(),
            ssh_port=self.ssh_port.GetValue(),
            ssh_user=self.ssh_user.GetValue(),
            max_tunnels=self.max_tunnels.GetValue(),
            heartbeat_ms=self.heartbeat_ms.GetValue(),
        )

    def _tunnel_from_fields(self) -> TunnelFields:
        return TunnelFields(
            remote_host=self.remote_host.GetValue(),
            remote_port=self.remote_port.GetValue(),
            local_host=self.local_host.GetValue(),
            local_port=self.local_port.GetValue(),
        )

    def _set_tunnel_fields(self, fields: TunnelFields) -> None:
        self.remote_host.SetValue(fields.remote_host)
        self.remote_port.SetValue(fields.remote_port)
        self.local_host.SetValue(fields.local_host)
        self.local_port.SetValue(fields.local_port)

    def _load_tunnels_into_list(self) -> None:
        selected = self.session.tunnels.selected
        self.tunnel_list.DeleteAllItems()
        for rec in self.session.tunnel_rows():
            idx = self.tunnel_list.InsertItem(self.tunnel_list.GetItemCount(), rec.remote_host)
            self.tunnel_list.SetItem(idx, 1, str(rec.remote_port))
            self.tunnel_list.SetItem(idx, 2, rec.local_host)
            self.tunnel_list.SetItem(idx, 3, str(rec.local_port))

        if selected is not None:
            self.tunnel_list.Select(selected)

    # -----------------------------------------------------------------
    # events
    # -----------------------------------------------------------------

    def _on_select(self, event: wx.ListEvent) -> None:
        fields = self.session.select(event.GetIndex())
        if fields is not None:
            self._set_tunnel_fields(fields)

    def _on_deselect(self, _event: wx.ListEvent) -> None:
        self.session.select(None)

    def _on_add(self, _event: wx.CommandEvent) -> None:
        if self.session.add_tunnel(self._tunnel_from_fields()):
            self._set_tunnel_fields(TunnelFields())
            self._load_tunnels_into_list()

    def _on_update(self, _event: wx.CommandEvent) -> None:
        if self.session.update_tunnel(self._tunnel_from_fields()):
            self._load_tunnels_into_list()

    def _on_remove(self, _event: wx.CommandEvent) -> None:
        if self.session.remove_tunnel():
            self._set_tunnel_fields(TunnelFields())
            self._load_tunnels_into_list()

    def _on_save(self, _event: wx.CommandEvent) -> None:
        self.session.save(self._basic_from_fields())

    def _on_close(self, event: wx.CloseEvent) -> None:
        if self.session.modified and event.CanVeto():
            answer = wx.MessageBox(
                "Tunnel changes have not been saved. Close anyway?",
                "Confirm",
                wx.ICON_QUESTION | wx.YES_NO,
                self,
            )
            if answer != wx.YES:
                event.Veto()
                return
        event.Skip()


def choose_config_file(parent: Optional[wx.Window] = None) -> Optional[str]:
    """Ask for the document to edit. Returns None if the user cancels."""
    dlg = wx.FileDialog(
        parent,
        "Open config document",
        wildcard="Config files (*.config;*.xml)|*.config;*.xml|All files (*.*)|*.*",
        style=wx.FD_OPEN | wx.FD_FILE_MUST_EXIST,
    )
    try:
        if dlg.ShowModal() != wx.ID_OK:
            return None
        return dlg.GetPath()
    finally:
        dlg.Destroy()
