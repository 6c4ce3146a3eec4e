# validator.py
#
# Pure checks run before any mutation is accepted. Nothing here touches
# state; every function is deterministic in its inputs.

from __future__ import annotations

from typing import Optional

from errors import MissingField, NonNumericPort, NonNumericSetting, ValidationError
from tunnel_codec import TunnelRecord, parse_int

TUNNEL_FIELD_LABELS = ("Remote host", "Remote port", "Local host", "Local port")
BASIC_SETTING_LABELS = ("SSH port", "Max tunnels", "Heartbeat interval (ms)")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_tunnel_fields(
        remote_host: str,
        remote_port: str,
        local_host: str,
        local_port: str,
) -> Optional[ValidationError]:
    """Check a candidate tunnel. Returns None when it is acceptable.

    Completeness is checked before numeric-ness, so a blank port is reported
    as missing rather than non-numeric.
    """
    values = (remote_host, remote_port, local_host, local_port)
    for label, value in zip(TUNNEL_FIELD_LABELS, values):
        if _is_blank(value):
            return MissingField(label)

    if parse_int(remote_port) is None:
        return NonNumericPort(TUNNEL_FIELD_LABELS[1], remote_port)
    if parse_int(local_port) is None:
        return NonNumericPort(TUNNEL_FIELD_LABELS[3], local_port)
    return None


def validate_basic_settings(
        ssh_port: str,
        max_tunnels: str,
        heartbeat_ms: str,
) -> Optional[ValidationError]:
    """Check the numeric basic settings in fixed order; first failure wins."""
    for label, value in zip(BASIC_SETTING_LABELS, (ssh_port, max_tunnels, heartbeat_ms)):
        if parse_int(value) is None:
            return NonNumericSetting(label, value)
    return None


def tunnel_from_fields(
        remote_host: str,
        remote_port: str,
        local_host: str,
        local_port: str,
) -> TunnelRecord:
    """Validate editor fields and build a record, raising the validation error."""
    err = validate_tunnel_fields(remote_host, remote_port, local_host, local_port)
    if err is not None:
        raise err
    return TunnelRecord(
        remote_host=remote_host.strip(),
        remote_port=int(remote_port.strip()),
        local_host=local_host.strip(),
        local_port=int(local_port.strip()),
    )
