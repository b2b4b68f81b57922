"""
================================================================================
PROMPT SESSION - Single Interactive Acceptance Attempt
================================================================================

Drives one acceptance attempt from presentation to a terminal state.

States:
    IDLE -> PRESENTING -> ACCEPTED | BLOCKED

    PRESENTING -> ACCEPTED
        Only on the explicit accept action, and only once the new record has
        been written. Side effects in order:
            1. write-through to the AcceptanceStore
            2. resume the interaction blocker
            3. release the surface (window, focus lock)

    PRESENTING -> BLOCKED
        Surface closed without a decision, surface could not be created,
        store write failed, or the user postponed while dismissal was still
        allowed. The next logon/startup/reminder trigger re-prompts.

    PRESENTING -> PRESENTING
        Dismiss requested after the dismissal budget is spent; the prompt is
        shown again without the dismiss option.

Resource Safety:
    The blocker is held through interaction_suspended() and the surface is
    released in a finally block, so every exit path (including unexpected
    exceptions and SystemExit from signal handlers) gives the desktop back.

Return Value:
    run() -> bool, True only when the acceptance is durably recorded.

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import getpass
import logging
from enum import Enum
from typing import Callable, Optional

from termsgate.core.errors import PresentationError, StoreError
from termsgate.core.record import AcceptanceRecord, utc_now
from termsgate.core.state_machine import dismissal_allowed
from termsgate.ui.base import UserAction, interaction_suspended
from termsgate.utils.terms import read_terms

logger = logging.getLogger("termsgate")


class SessionState(Enum):
    IDLE = 'idle'
    PRESENTING = 'presenting'
    ACCEPTED = 'accepted'
    BLOCKED = 'blocked'


def current_identity() -> str:
    try:
        return getpass.getuser()
    except Exception:
        # getuser() raises when no login name can be determined (e.g. services)
        return 'unknown'


class PromptSession:
    """One prompt attempt; construct a new session per invocation."""

    def __init__(self, config, store, surface, blocker,
                 content_loader: Optional[Callable[[], Optional[str]]] = None,
                 clock: Optional[Callable] = None,
                 identity: Optional[str] = None):
        self.config = config
        self.store = store
        self.surface = surface
        self.blocker = blocker
        self.content_loader = content_loader or (lambda: read_terms(config.terms_file))
        self.clock = clock or utc_now
        self.identity = identity or current_identity()
        self.state = SessionState.IDLE

    def run(self) -> bool:
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Prompt session already ran (state={self.state.value})")

        self.state = SessionState.PRESENTING
        logger.info(f"Presenting terms version {self.config.terms_version} to {self.identity}")
        try:
            content = self.content_loader()
            if not content:
                raise PresentationError(f"No terms content available at {self.config.terms_file}")

            previous = self.store.read()
            with interaction_suspended(self.blocker):
                accepted = self._present_until_decided(content, previous)
            return accepted
        except PresentationError as e:
            logger.error(f"Acceptance prompt could not be shown: {e}")
            self.state = SessionState.BLOCKED
            return False
        except BaseException:
            self.state = SessionState.BLOCKED
            raise
        finally:
            try:
                self.surface.release()
            except Exception as e:
                logger.warning(f"Failed to release prompt surface: {e}")
            logger.info(f"Prompt session finished in state {self.state.value}")

    def _present_until_decided(self, content: str, previous: Optional[AcceptanceRecord]) -> bool:
        dismissible = dismissal_allowed(previous, self.config.max_dismissals)
        while True:
            action = self.surface.present(content, dismissible=dismissible)

            if action is UserAction.ACCEPT:
                return self._record_acceptance(previous)

            if action is UserAction.DISMISS:
                if dismissible:
                    self._record_reminder(previous)
                    self.state = SessionState.BLOCKED
                    return False
                logger.info("Dismissal limit reached; presenting terms again")
                continue

            logger.warning("Prompt closed without a decision")
            self._record_reminder(previous)
            self.state = SessionState.BLOCKED
            return False

    def _record_acceptance(self, previous: Optional[AcceptanceRecord]) -> bool:
        record = AcceptanceRecord.for_acceptance(
            previous, self.config.terms_version, self.identity, now=self.clock()
        )
        try:
            self.store.write(record)
        except StoreError as e:
            logger.error(f"Acceptance NOT recorded, user will be prompted again: {e}")
            self.state = SessionState.BLOCKED
            return False
        self.state = SessionState.ACCEPTED
        logger.info(
            f"Terms {record.accepted_terms_version} accepted by {record.accepted_by} "
            f"(acceptance #{record.acceptance_count})"
        )
        return True

    def _record_reminder(self, previous: Optional[AcceptanceRecord]):
        record = AcceptanceRecord.for_reminder(previous, self.identity, now=self.clock())
        try:
            self.store.write(record)
        except StoreError as e:
            logger.warning(f"Could not record reminder: {e}")
            return
        logger.info(f"Prompt postponed (reminder {record.reminder_count} of {self.config.max_dismissals})")
