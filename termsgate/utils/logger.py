"""
================================================================================
LOGGER - Unified Logging Configuration
================================================================================

Centralized logging infrastructure for all application contexts.

Logging Contexts:
    - 'installer' - Deployment orchestrator (install/uninstall/run/status)
    - 'agent' - Prompt agent launched by a registered trigger
    - 'daemon' - Trigger daemon (APScheduler loop)
    - 'test' - Unit and integration tests
    - 'imported' - Library/module imports (no output)

Log Destinations:
    1. File Logs - {log_dir}/{timestamp}.{context}.log
    2. Console Output - stdout
    3. Rotating Backups - 5MB max per file, 5 backup files

Log Format:
    {timestamp} {level} [{context}]: {message}
    Example: 2026-10-19 08:01:12 INFO [agent]: Terms 3.3.0 accepted by jdoe

Features:
    - Context-aware records (installer vs agent vs daemon)
    - Rotating file handlers (prevents disk space issues)
    - UTF-8 encoding support
    - Graceful fallback if log directory unavailable
    - log(level, message) helper that never raises

Usage:
    from termsgate.utils.logger import setup_logging, logger

    setup_logging('agent', config.log_dir)
    logger.info('Evaluating acceptance state')

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import sys
import logging
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

logger = logging.getLogger("termsgate")
logger.setLevel(logging.INFO)
logger.addHandler(logging.NullHandler())

LOG_FORMAT = "%(asctime)s %(levelname)s [%(run_context)s]: %(message)s"

# Global run context state
_RUN_CONTEXT = 'imported'


class RunContextFilter(logging.Filter):
    """
    Logging filter that adds run context to all log records
    Allows distinguishing installer, agent and daemon output in shared logs
    """

    def filter(self, record):
        record.run_context = _RUN_CONTEXT
        return True


def set_run_context(context: str, log_dir: Optional[Path] = None, console: bool = True):
    """
    Set the execution context for logging

    Args:
        context: String identifier ('installer', 'agent', 'daemon', 'test')
        log_dir: Directory for rotating log files (defaults to LOG_DIR)
        console: Attach a stdout handler
    """
    global _RUN_CONTEXT
    _RUN_CONTEXT = context

    # Clear existing handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        if not isinstance(h, logging.NullHandler):
            h.close()
    logger.addHandler(logging.NullHandler())

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler.addFilter(RunContextFilter())
        logger.addHandler(console_handler)

    if log_dir is None:
        from termsgate.utils.constants import LOG_DIR
        log_dir = LOG_DIR

    # Setup file handler with rotating backups
    try:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file = log_dir / f"{timestamp}.{context}.log"

        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=5_000_000,  # 5MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.addFilter(RunContextFilter())
        logger.addHandler(file_handler)
    except OSError as e:
        # Logging must never decide the outcome of a prompt
        logger.warning(f"File logging unavailable ({log_dir}): {e}")


def setup_logging(context: str = 'imported', log_dir: Optional[Path] = None, console: bool = True):
    """
    Initialize logging for the application

    Args:
        context: Execution context identifier
        log_dir: Directory for rotating log files
        console: Attach a stdout handler
    """
    set_run_context(context, log_dir=log_dir, console=console)
    return logger


def get_run_context() -> str:
    return _RUN_CONTEXT


_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}


def log(level, message):
    """Fire-and-forget logging entry point used by the orchestrator."""
    if isinstance(level, str):
        level = _LEVELS.get(level.lower(), logging.INFO)
    try:
        logger.log(level, message)
    except Exception:
        ts_prefix = datetime.now().strftime("[%H:%M:%S] ")
        print(f"{ts_prefix}{message}")
