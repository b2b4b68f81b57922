"""
UI collaborator interfaces for the prompt session.

A surface shows the terms and blocks until the user acts; a blocker
suspends alternate desktop interaction while the surface is up. Both are
swapped for fakes in tests.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Optional

logger = logging.getLogger("termsgate")


class UserAction(Enum):
    ACCEPT = 'accept'
    DISMISS = 'dismiss'


class PromptSurface:
    """Blocking presentation of the terms."""

    def present(self, content: str, dismissible: bool = False) -> Optional[UserAction]:
        """
        Show the terms and wait for the user.

        Returns:
            UserAction.ACCEPT, UserAction.DISMISS (only when dismissible),
            or None if the surface closed without a decision.

        Raises:
            PresentationError: the surface could not be created.
        """
        raise NotImplementedError

    def release(self):
        """Drop any window, focus lock or terminal state still held."""


class InteractionBlocker:
    """Suspends alternate interaction (task switching, shell hotkeys)."""

    def suspend(self):
        raise NotImplementedError

    def resume(self):
        raise NotImplementedError


class NullInteractionBlocker(InteractionBlocker):
    """Blocker that does nothing; used when blocking is disabled."""

    def suspend(self):
        pass

    def resume(self):
        pass


@contextmanager
def interaction_suspended(blocker: InteractionBlocker):
    """Suspend interaction for the duration of the block; always resume."""
    try:
        blocker.suspend()
    except Exception as e:
        logger.warning(f"Interaction blocker failed to suspend: {e}")
    try:
        yield blocker
    finally:
        try:
            blocker.resume()
        except Exception as e:
            logger.warning(f"Interaction blocker failed to resume: {e}")
