"""
================================================================================
UTILS MODULE - Shared Utilities and Helpers
================================================================================

Shared infrastructure used by the installer, the prompt agent and the daemon.

Exported Functions:
    Logging:
        - setup_logging() - Initialize logging infrastructure
        - set_run_context(context) - Set execution context
        - log(level, message) - Fire-and-forget log helper
        - logger - Main application logger

    Configuration:
        - load_config() - Load configuration from config.json
        - get_app_config() - Load and freeze configuration
        - AppConfig - Immutable configuration passed to components

    Terms:
        - read_terms() - Read the terms text to display

Usage:
    from termsgate.utils import logger, get_app_config
    from termsgate.utils.constants import APP_IDENTIFIER

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

from .logger import setup_logging, set_run_context, log, logger
from .config import load_config, get_app_config, AppConfig
from .terms import read_terms

__all__ = [
    'setup_logging',
    'set_run_context',
    'log',
    'logger',
    'load_config',
    'get_app_config',
    'AppConfig',
    'read_terms',
]
