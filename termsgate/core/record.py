"""
================================================================================
ACCEPTANCE RECORD - Persisted Acceptance State
================================================================================

One record per machine describing the outcome of the most recent prompt.

Record Fields:
    accepted                 - Whether the most recent prompt was accepted
    accepted_terms_version   - Terms version tied to the acceptance event
    acceptance_timestamp     - When the terms were accepted (UTC)
    accepted_by              - Principal that ran the prompt
    acceptance_count         - Cumulative number of acceptance events
    reminder_count           - Prompts without acceptance since last acceptance
    last_reminder_timestamp  - Last prompt that ended without acceptance

Storage Format:
    Plain JSON with ISO-8601 timestamps plus a SHA-256 checksum over the
    canonical field payload. A record whose checksum does not match is
    treated as corrupted by the store.

Transitions:
    AcceptanceRecord.for_acceptance(previous, version, identity, now)
    AcceptanceRecord.for_reminder(previous, identity, now)

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import hashlib
import json
from dataclasses import dataclass, asdict, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

FIELDS = (
    'accepted',
    'accepted_terms_version',
    'acceptance_timestamp',
    'accepted_by',
    'acceptance_count',
    'reminder_count',
    'last_reminder_timestamp',
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _parse_ts(value: Any) -> Optional[datetime]:
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be an ISO-8601 string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_count(name: str, value: Any) -> int:
    # bool is an int subclass; a flipped flag must not pass as a counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class AcceptanceRecord:
    accepted: bool = False
    accepted_terms_version: str = ''
    acceptance_timestamp: Optional[datetime] = None
    accepted_by: str = ''
    acceptance_count: int = 0
    reminder_count: int = 0
    last_reminder_timestamp: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.accepted, bool):
            raise ValueError(f"accepted must be a boolean, got {self.accepted!r}")
        _require_count('acceptance_count', self.acceptance_count)
        _require_count('reminder_count', self.reminder_count)
        if self.accepted:
            if not self.accepted_terms_version:
                raise ValueError("Accepted record requires a terms version")
            if self.acceptance_timestamp is None:
                raise ValueError("Accepted record requires an acceptance timestamp")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    @classmethod
    def for_acceptance(cls, previous: Optional['AcceptanceRecord'], terms_version: str,
                       identity: str, now: Optional[datetime] = None) -> 'AcceptanceRecord':
        """Build the record written when the user accepts the terms."""
        prior_count = previous.acceptance_count if previous else 0
        return cls(
            accepted=True,
            accepted_terms_version=terms_version,
            acceptance_timestamp=now or utc_now(),
            accepted_by=identity,
            acceptance_count=prior_count + 1,
            reminder_count=0,
            last_reminder_timestamp=None,
        )

    @classmethod
    def for_reminder(cls, previous: Optional['AcceptanceRecord'], identity: str,
                     now: Optional[datetime] = None) -> 'AcceptanceRecord':
        """Build the record written when a prompt ends without acceptance.

        The prior acceptance history (version, timestamp, count) is kept for
        auditing, but ``accepted`` is cleared so the next evaluation prompts.
        """
        now = now or utc_now()
        if previous is None:
            return cls(accepted=False, accepted_by=identity, reminder_count=1,
                       last_reminder_timestamp=now)
        return replace(
            previous,
            accepted=False,
            reminder_count=previous.reminder_count + 1,
            last_reminder_timestamp=now,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['acceptance_timestamp'] = _format_ts(self.acceptance_timestamp)
        data['last_reminder_timestamp'] = _format_ts(self.last_reminder_timestamp)
        data['checksum'] = compute_checksum(data)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AcceptanceRecord':
        """Parse a stored payload; raises ValueError on any inconsistency."""
        if not isinstance(data, dict):
            raise ValueError("Acceptance record must be a JSON object")
        missing = [name for name in FIELDS if name not in data]
        if missing:
            raise ValueError(f"Acceptance record missing fields: {', '.join(missing)}")
        if data.get('checksum') != compute_checksum(data):
            raise ValueError("Acceptance record checksum mismatch")
        return cls(
            accepted=data['accepted'],
            accepted_terms_version=data['accepted_terms_version'] or '',
            acceptance_timestamp=_parse_ts(data['acceptance_timestamp']),
            accepted_by=data['accepted_by'] or '',
            acceptance_count=data['acceptance_count'],
            reminder_count=data['reminder_count'],
            last_reminder_timestamp=_parse_ts(data['last_reminder_timestamp']),
        )


def compute_checksum(data: Dict[str, Any]) -> str:
    payload = {name: data.get(name) for name in FIELDS}
    canonical = json.dumps(payload, sort_keys=True, separators=(',', ':'), default=str)
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()
