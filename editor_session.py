# editor_session.py
"""
One editing session over one host document.

The session owns everything a shell needs: the parsed document, the settings
store over it, the tunnel collection with its selection, and the persistence
gate. Shells (wx frame, command line) call the on-* style methods below and
receive feedback only through the `notify` capability they pass in:

    notify(kind, message) -> Optional[bool]

where kind is one of NOTIFY_INFO, NOTIFY_ERROR, NOTIFY_CONFIRM. For confirm,
the return value is the user's answer (True = go ahead).

User mistakes never raise out of add/update/remove/save: the action is
aborted, state is left unchanged and the reason is passed to notify. A failed
backup at open() does raise; without a safety copy there is no session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from editor_config import EditorConfig
from errors import ConfigEditError, ValidationError
from persistence import PersistenceGate
from settings_store import SettingsDocument, SettingsStore, load_document
from tunnel_codec import TunnelRecord, decode_with_skips, encode
from tunnel_collection import TunnelCollection
from validator import tunnel_from_fields, validate_basic_settings

LOG = logging.getLogger(__name__)

NOTIFY_INFO = "info"
NOTIFY_ERROR = "error"
NOTIFY_CONFIRM = "confirm"

Notifier = Callable[[str, str], Optional[bool]]

KEY_SSH_HOST = "SshHost"
KEY_SSH_PORT = "SshPort"
KEY_SSH_USER = "SshUser"
KEY_MAX_TUNNELS = "MaxTunnels"
KEY_HEARTBEAT_MS = "HeartbeatIntervalMs"
KEY_TUNNELS = "Tunnels"

BASIC_KEYS = (KEY_SSH_HOST, KEY_SSH_PORT, KEY_SSH_USER, KEY_MAX_TUNNELS, KEY_HEARTBEAT_MS)


@dataclass
class BasicSettings:
    """Editor-field view of the flat settings (always strings)."""

    ssh_host: str = ""
    ssh_port: str = ""
    ssh_user: str = ""
    max_tunnels: str = ""
    heartbeat_ms: str = ""

    def as_pairs(self) -> List[Tuple[str, str]]:
        return [
            (KEY_SSH_HOST, self.ssh_host.strip()),
            (KEY_SSH_PORT, self.ssh_port.strip()),
            (KEY_SSH_USER, self.ssh_user.strip()),
            (KEY_MAX_TUNNELS, self.max_tunnels.strip()),
            (KEY_HEARTBEAT_MS, self.heartbeat_ms.strip()),
        ]


@dataclass
class TunnelFields:
    """Editor-field view of one tunnel (always strings)."""

    remote_host: str = ""
    remote_port: str = ""
    local_host: str = ""
    local_port: str = ""

    @classmethod
    def from_record(cls, rec: TunnelRecord) -> "TunnelFields":
        return cls(
            remote_host=rec.remote_host,
            remote_port=str(rec.remote_port),
            local_host=rec.local_host,
            local_port=str(rec.local_port),
        )

    def to_record(self) -> TunnelRecord:
        return tunnel_from_fields(self.remote_host, self.remote_port, self.local_host, self.local_port)


def log_notifier(kind: str, message: str) -> Optional[bool]:
    """Fallback notifier: log everything, answer yes to confirmations."""
    if kind == NOTIFY_ERROR:
        LOG.error("%s", message)
    else:
        LOG.info("%s", message)
    if kind == NOTIFY_CONFIRM:
        return True
    return None


def describe_tunnel(rec: TunnelRecord) -> str:
    return f"{rec.remote_host}:{rec.remote_port} -> {rec.local_host}:{rec.local_port}"


class EditorSession:
    def __init__(
            self,
            document: SettingsDocument,
            gate: PersistenceGate,
            notify: Optional[Notifier] = None,
            config: Optional[EditorConfig] = None,
    ) -> None:
        self.document = document
        self.store = SettingsStore(document)
        self.gate = gate
        self.config = config or EditorConfig()
        self._notify: Notifier = notify or log_notifier
        self._modified = False

        result = decode_with_skips(self.store.get(KEY_TUNNELS))
        self.tunnels = TunnelCollection(result.records)
        self.skipped = list(result.skipped)

        for skip in self.skipped:
            LOG.warning("Ignoring malformed tunnel %r in %s: %s", skip.segment, gate.path, skip.reason)
        if self.skipped and self.config.tunnels.warn_on_skipped:
            lines = "\n".join(f"  {s.segment} ({s.reason})" for s in self.skipped)
            self._notify(
                NOTIFY_INFO,
                f"{len(self.skipped)} malformed tunnel entr{'y' if len(self.skipped) == 1 else 'ies'} "
                f"will be dropped on save:\n{lines}",
            )

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    @classmethod
    def open(
            cls,
            path: str,
            notify: Optional[Notifier] = None,
            config: Optional[EditorConfig] = None,
            read_only: bool = False,
            now: Optional[float] = None,
    ) -> "EditorSession":
        """Load `path` and take the session backup before anything can change.

        Raises StorageIOError when the document or its backup cannot be
        read/written, StructuralError when it is not XML. With read_only the
        backup is skipped and save() will refuse to commit.
        """
        config = config or EditorConfig()
        document = load_document(path, config.layout)
        gate = PersistenceGate(path, config.backup.suffix_format)
        if not read_only:
            gate.begin(now=now)
        return cls(document, gate, notify=notify, config=config)

    @property
    def path(self) -> str:
        return self.gate.path

    @property
    def modified(self) -> bool:
        return self._modified

    # ------------------------------------------------------------
    # views
    # ------------------------------------------------------------

    def basic_settings(self) -> BasicSettings:
        get = self.store.get
        return BasicSettings(
            ssh_host=get(KEY_SSH_HOST) or "",
            ssh_port=get(KEY_SSH_PORT) or "",
            ssh_user=get(KEY_SSH_USER) or "",
            max_tunnels=get(KEY_MAX_TUNNELS) or "",
            heartbeat_ms=get(KEY_HEARTBEAT_MS) or "",
        )

    def tunnel_rows(self) -> Tuple[TunnelRecord, ...]:
        return self.tunnels.all()

    def select(self, position: Optional[int]) -> Optional[TunnelFields]:
        """Select a tunnel for editing and return its fields (None clears)."""
        rec = self.tunnels.select(position)
        if rec is None:
            return None
        return TunnelFields.from_record(rec)

    # ------------------------------------------------------------
    # tunnel actions
    # ------------------------------------------------------------

    def _record_or_notify(self, fields: TunnelFields) -> Optional[TunnelRecord]:
        try:
            return fields.to_record()
        except ValidationError as exc:
            self._notify(NOTIFY_ERROR, exc.reason)
            return None

    def add_tunnel(self, fields: TunnelFields) -> bool:
        rec = self._record_or_notify(fields)
        if rec is None:
            return False
        pos = self.tunnels.append(rec)
        self._modified = True
        LOG.debug("Added tunnel #%d %s", pos, describe_tunnel(rec))
        return True

    def update_tunnel(self, fields: TunnelFields) -> bool:
        pos = self.tunnels.selected
        if pos is None:
            self._notify(NOTIFY_INFO, "Select a tunnel to update.")
            return False
        rec = self._record_or_notify(fields)
        if rec is None:
            return False
        self.tunnels.replace_at(pos, rec)
        self._modified = True
        LOG.debug("Updated tunnel #%d %s", pos, describe_tunnel(rec))
        return True

    def remove_tunnel(self) -> bool:
        pos = self.tunnels.selected
        if pos is None:
            self._notify(NOTIFY_INFO, "Select a tunnel to remove.")
            return False
        rec = self.tunnels.get(pos)
        if self._notify(NOTIFY_CONFIRM, f"Remove tunnel {describe_tunnel(rec)}?") is not True:
            return False
        self.tunnels.remove_at(pos)
        self._modified = True
        LOG.debug("Removed tunnel #%d %s", pos, describe_tunnel(rec))
        return True

    # ------------------------------------------------------------
    # save
    # ------------------------------------------------------------

    def save(self, basic: BasicSettings) -> bool:
        """Validate, write every value through the store, then commit.

        On a failed commit the in-memory state and the backup are kept, so
        the caller may simply try again.
        """
        err = validate_basic_settings(basic.ssh_port, basic.max_tunnels, basic.heartbeat_ms)
        if err is not None:
            self._notify(NOTIFY_ERROR, err.reason)
            return False

        values = basic.as_pairs()
        values.append((KEY_TUNNELS, encode(self.tunnels.all())))

        try:
            for key, value in values:
                self.store.set(key, value)
            self.gate.commit(self.document)
        except ConfigEditError as exc:
            LOG.error("Save of %s failed: %s", self.path, exc.reason)
            self._notify(NOTIFY_ERROR, f"Failed to save configuration:\n{exc.reason}")
            return False

        self._modified = False
        self.skipped = []
        self._notify(NOTIFY_INFO, f"Configuration saved.\nBackup: {self.gate.backup_path}")
        return True
