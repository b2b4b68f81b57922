"""
Run-mode entry for the acceptance gate.

Reads the stored record, decides, and only builds a prompt session when the
user actually has to be prompted. Shared by ``cli.py run`` and the prompt
agent.
"""

import logging
from typing import Optional

from termsgate.core.session import PromptSession
from termsgate.core.state_machine import Decision, decide
from termsgate.core.store import AcceptanceStore
from termsgate.scheduler.instance import single_instance
from termsgate.ui import build_blocker, build_surface

logger = logging.getLogger("termsgate")


def evaluate(config, store: Optional[AcceptanceStore] = None, force: bool = False) -> Decision:
    store = store or AcceptanceStore.from_config(config)
    return decide(store.read(), config.terms_version, force)


def run_gate(config, force: bool = False, store=None, surface=None, blocker=None,
             ui: Optional[str] = None) -> bool:
    """
    Evaluate the stored acceptance and prompt if required.

    Returns:
        True if the current terms are (now) accepted, False otherwise.
    """
    store = store or AcceptanceStore.from_config(config)
    decision = decide(store.read(), config.terms_version, force)
    if decision is Decision.ALREADY_ACCEPTED:
        logger.info(f"Terms {config.terms_version} already accepted; nothing to do")
        return True

    logger.info(f"Acceptance required for terms {config.terms_version}"
                + (" (forced)" if force else ""))
    session = PromptSession(
        config,
        store,
        surface or build_surface(config, ui=ui),
        blocker or build_blocker(config),
    )
    return session.run()


def run_gate_once(config, force: bool = False, store=None, **kwargs) -> Optional[bool]:
    """run_gate() under the cross-process single-instance guard.

    Returns None, without presenting anything, when another agent is
    already prompting; that agent owns the outcome.
    """
    store = store or AcceptanceStore.from_config(config)
    with single_instance(store.instance_lock_file) as acquired:
        if not acquired:
            return None
        return run_gate(config, force=force, store=store, **kwargs)
