"""
================================================================================
CORE MODULE - Acceptance Logic
================================================================================

Central package for the acceptance state machine and its persistence.

Exported Classes:
    AcceptanceRecord - Persisted acceptance state (one per machine)
    AcceptanceStore - Atomic, fail-safe record storage
    Decision - ALREADY_ACCEPTED / MUST_PROMPT
    PromptSession - One interactive acceptance attempt
    SessionState - IDLE / PRESENTING / ACCEPTED / BLOCKED

Exported Functions:
    decide(record, terms_version, force) - Pure prompt decision
    dismissal_allowed(record, max_dismissals) - Whether "later" is offered

Run Mode:
    termsgate.core.gate.run_gate(config, force) - Evaluate and prompt

Usage:
    from termsgate.core import AcceptanceStore, decide, Decision

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

from termsgate.core.errors import (
    TermsGateError,
    ConfigError,
    StoreError,
    PresentationError,
    InstallError,
    UninstallError,
)
from termsgate.core.record import AcceptanceRecord
from termsgate.core.state_machine import Decision, decide, dismissal_allowed
from termsgate.core.store import AcceptanceStore
from termsgate.core.session import PromptSession, SessionState

__all__ = [
    'TermsGateError',
    'ConfigError',
    'StoreError',
    'PresentationError',
    'InstallError',
    'UninstallError',
    'AcceptanceRecord',
    'Decision',
    'decide',
    'dismissal_allowed',
    'AcceptanceStore',
    'PromptSession',
    'SessionState',
]
