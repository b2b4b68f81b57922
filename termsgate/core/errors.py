"""
Exception hierarchy for the acceptance gate.

Every failure the gate can report maps onto one of these classes so the
orchestrator can turn it into a definite exit status.
"""


class TermsGateError(Exception):
    """Base class for all gate errors."""


class ConfigError(TermsGateError):
    """Configuration is missing a required value or holds an invalid one."""


class StoreError(TermsGateError):
    """Persisted acceptance state could not be written or cleared."""


class PresentationError(TermsGateError):
    """The acceptance prompt could not be shown to the user."""


class InstallError(TermsGateError):
    """Trigger registration failed."""


class UninstallError(TermsGateError):
    """Trigger removal or state cleanup failed."""
