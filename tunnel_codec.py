from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

LOG = logging.getLogger(__name__)

# Wire format of the Tunnels setting:
#   remoteHost:remotePort:localHost:localPort[,remoteHost:remotePort:...]
# Hosts cannot contain ':' or ','; the format has no escaping.
RECORD_SEP = ","
FIELD_SEP = ":"
FIELDS_PER_RECORD = 4

# Base-10, optional sign, ASCII digits only.
_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class TunnelRecord:
    remote_host: str
    remote_port: int
    local_host: str
    local_port: int


@dataclass(frozen=True)
class SkippedSegment:
    segment: str
    reason: str


@dataclass
class DecodeResult:
    records: List[TunnelRecord] = field(default_factory=list)
    skipped: List[SkippedSegment] = field(default_factory=list)


def parse_int(text: Optional[str]) -> Optional[int]:
    """Return the integer value of `text`, or None if it is not one.

    Surrounding whitespace is ignored. No range is enforced.
    """
    if text is None:
        return None
    raw = text.strip()
    if not _INT_RE.fullmatch(raw):
        return None
    return int(raw)


def encode_tunnel(rec: TunnelRecord) -> str:
    return FIELD_SEP.join(
        (rec.remote_host, str(int(rec.remote_port)), rec.local_host, str(int(rec.local_port)))
    )


def encode(records: Iterable[TunnelRecord]) -> str:
    """Encode records in order. The empty sequence encodes to ""."""
    return RECORD_SEP.join(encode_tunnel(r) for r in records)


def decode_tunnel(segment: str) -> Optional[TunnelRecord]:
    parts = segment.split(FIELD_SEP)
    if len(parts) != FIELDS_PER_RECORD:
        return None
    remote_port = parse_int(parts[1])
    local_port = parse_int(parts[3])
    if remote_port is None or local_port is None:
        return None
    return TunnelRecord(
        remote_host=parts[0],
        remote_port=remote_port,
        local_host=parts[2],
        local_port=local_port,
    )


def decode_with_skips(raw: Optional[str]) -> DecodeResult:
    """
    Decode the Tunnels setting, reporting every segment that was dropped.

    Empty segments (leading, trailing or doubled commas) are not reported;
    they carry no data.
    """
    result = DecodeResult()
    if not raw:
        return result

    for segment in raw.split(RECORD_SEP):
        if not segment:
            continue

        parts = segment.split(FIELD_SEP)
        if len(parts) != FIELDS_PER_RECORD:
            result.skipped.append(
                SkippedSegment(segment, f"expected {FIELDS_PER_RECORD} fields, got {len(parts)}")
            )
            continue

        rec = decode_tunnel(segment)
        if rec is None:
            result.skipped.append(SkippedSegment(segment, "port is not a whole number"))
            continue
        result.records.append(rec)

    for skip in result.skipped:
        LOG.debug("Skipping tunnel segment %r: %s", skip.segment, skip.reason)
    return result


def decode(raw: Optional[str]) -> List[TunnelRecord]:
    """Decode the Tunnels setting. Malformed segments are dropped silently."""
    return decode_with_skips(raw).records
