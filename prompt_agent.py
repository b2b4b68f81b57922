#!/usr/bin/env python3
"""
================================================================================
PROMPT AGENT - Trigger-Launched Acceptance Prompt
================================================================================

The executable registered with the scheduler triggers. Shares state with the
installer only through the acceptance store and the schedule registration.

Modes:
    termsgate-agent [--force]   One gated session under the instance guard
    termsgate-agent --watch     Trigger daemon (APScheduler), launched at logon

Termination:
    SIGTERM/SIGHUP are turned into SystemExit so the session's cleanup
    (blocker resume, window release) runs before the process exits.

Exit Codes:
    0 - accepted, already accepted, or another agent is already prompting
    1 - not accepted, or internal error

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import sys
import signal
import argparse

from termsgate.core.gate import run_gate_once
from termsgate.scheduler import ScheduleManager
from termsgate.utils.config import get_app_config
from termsgate.utils.constants import VALID_UIS
from termsgate.utils.logger import logger, setup_logging


def _exit_on_signal(signum, frame):
    raise SystemExit(1)


def install_signal_handlers():
    for name in ('SIGTERM', 'SIGHUP'):
        sig = getattr(signal, name, None)
        if sig is not None:
            signal.signal(sig, _exit_on_signal)


def main(argv=None):
    parser = argparse.ArgumentParser(description='TermsGate prompt agent')
    parser.add_argument('--config', help='Path to config.json')
    parser.add_argument('--force', action='store_true', help='Prompt even if already accepted')
    parser.add_argument('--ui', choices=VALID_UIS, help='Prompt surface (default: prompt.ui)')
    parser.add_argument('--watch', action='store_true', help='Run the trigger daemon')
    args = parser.parse_args(argv)

    install_signal_handlers()
    try:
        config = get_app_config(args.config)
        setup_logging('daemon' if args.watch else 'agent', config.log_dir)

        if args.watch:
            manager = ScheduleManager(config)
            return 0 if manager.serve() else 1

        accepted = run_gate_once(config, force=args.force, ui=args.ui)
        if accepted is None:
            # The agent already prompting reports the outcome
            return 0
        return 0 if accepted else 1
    except KeyboardInterrupt:
        logger.warning("Prompt agent interrupted")
        return 1
    except Exception:
        logger.exception("Prompt agent failed")
        return 1


if __name__ == '__main__':
    sys.exit(main())
