"""
================================================================================
TERMSGATE PACKAGE - Mandatory Terms Acceptance Gate
================================================================================

Top-level package for the acceptance gate shared by the installer (cli.py)
and the prompt agent (prompt_agent.py).

Package Structure:
    termsgate/core/       - Acceptance record, store, decision, prompt session
    termsgate/scheduler/  - Trigger registration, trigger daemon, instance guard
    termsgate/ui/         - Prompt surfaces and interaction blockers
    termsgate/utils/      - Shared utilities (logging, config, constants)

Design Principles:
    - Explicit immutable configuration, no ambient settings
    - Fail-safe toward re-prompting
    - Resources released on every exit path
    - Test-friendly collaborators (surface, blocker, clock)

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

__version__ = "2026.1"
__author__ = "TermsGate Team"
