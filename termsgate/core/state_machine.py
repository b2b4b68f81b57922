"""
Acceptance decision logic.

Pure functions over (stored record, current terms version, force flag).
Nothing here touches the disk, the clock or the UI.
"""

from enum import Enum
from typing import Optional

from termsgate.core.record import AcceptanceRecord


class Decision(Enum):
    ALREADY_ACCEPTED = 'already_accepted'
    MUST_PROMPT = 'must_prompt'


def decide(record: Optional[AcceptanceRecord], current_terms_version: str,
           force: bool = False) -> Decision:
    """
    Decide whether the user has to be prompted.

    Acceptance never expires on its own; only a terms version change (or an
    explicit force) invalidates it. Reminder counters are not consulted.
    """
    if force:
        return Decision.MUST_PROMPT
    if record is None:
        return Decision.MUST_PROMPT
    if not record.accepted:
        return Decision.MUST_PROMPT
    if record.accepted_terms_version != current_terms_version:
        return Decision.MUST_PROMPT
    return Decision.ALREADY_ACCEPTED


def dismissal_allowed(record: Optional[AcceptanceRecord], max_dismissals: int) -> bool:
    """True while the user may still postpone the prompt."""
    if max_dismissals <= 0:
        return False
    reminders = record.reminder_count if record else 0
    return reminders < max_dismissals
