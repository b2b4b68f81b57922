"""
================================================================================
CONSTANTS - System-Wide Configuration Values
================================================================================

Static values shared by the installer, the prompt agent and the trigger
daemon. Organized by functional category.

Constant Categories:
    1. File Paths - Directory and file locations
    2. Store - Acceptance record naming and locking
    3. Scheduling - Trigger names and registration defaults
    4. Prompt - Dismissal and reminder defaults

File Path Constants:
    All paths are relative to BASE_DIR (working directory at import time)
    Supports monkeypatching for test isolation

    Example:
        CONFIG_FILE = BASE_DIR / 'configs' / 'config.json'
        LOG_DIR = BASE_DIR / 'outputs' / 'logs'

Note:
    Values in this file are STATIC. For deployment-specific settings
    (organization, terms version, store root) use config.json via
    termsgate.utils.config.

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

from pathlib import Path

# ==========================================
# FILE PATHS
# ==========================================
BASE_DIR = Path.cwd()
CONFIG_DIR = BASE_DIR / 'configs'
CONFIG_FILE = CONFIG_DIR / 'config.json'
OUTPUT_DIR = BASE_DIR / 'outputs'
LOG_DIR = OUTPUT_DIR / 'logs'
CONFIG_ENV_VAR = 'TERMSGATE_CONFIG'

# ==========================================
# ACCEPTANCE STORE
# ==========================================
APP_IDENTIFIER = 'TermsAcceptance'  # Fixed key under the organization
STORE_FILENAME = 'acceptance.json'
STORE_FILE_MODE = 0o644  # World-readable, owner-writable
STORE_LOCK_TIMEOUT_SECONDS = 10
INSTANCE_LOCK_FILENAME = 'agent.lock'

# ==========================================
# SCHEDULING
# ==========================================
TRIGGER_LOGON = 'logon'
TRIGGER_STARTUP = 'startup'
TRIGGER_REMINDER = 'reminder'
VALID_TRIGGERS = (TRIGGER_LOGON, TRIGGER_STARTUP, TRIGGER_REMINDER)
DEFAULT_TASK_NAME = 'TermsAcceptance'
MULTIPLE_INSTANCES_POLICY = 'ignore_new'
SESSION_START_JOB_ID = 'session-start'
REMINDER_JOB_ID = 'reminder'
AGENT_COMMAND = 'termsgate-agent'

# ==========================================
# PROMPT
# ==========================================
DEFAULT_TERMS_VERSION = '3.3.0'
DEFAULT_MAX_DISMISSALS = 3
DEFAULT_REMINDER_HOURS = 4
UI_CONSOLE = 'console'
UI_TK = 'tk'
VALID_UIS = (UI_CONSOLE, UI_TK)
# Trigger-launched agents have no terminal; they always use the window
AGENT_UI = UI_TK
