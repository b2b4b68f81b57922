#!/usr/bin/env python3
"""
================================================================================
CLI - Deployment Orchestrator
================================================================================

Installer-side command line for the terms acceptance gate:
    - install     Register logon/startup/reminder triggers for the agent
    - uninstall   Remove triggers, autostart entry and stored acceptance
    - run         Evaluate acceptance and prompt if required
    - status      Show the stored record, decision and registration
    - reset       Clear stored acceptance so the next run re-prompts

Exit Codes:
    0 - success (installed / removed / accepted or already accepted)
    1 - failure (registration error / blocked / another prompt active / internal error)

Usage:
    python cli.py [--config PATH] [command] [options]
    python cli.py --help

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import sys
import json
import argparse
from typing import Any

from termsgate.core.errors import InstallError, StoreError, UninstallError
from termsgate.core.gate import evaluate, run_gate_once
from termsgate.core.store import AcceptanceStore
from termsgate.scheduler import ScheduleManager
from termsgate.utils.config import get_app_config
from termsgate.utils.constants import VALID_TRIGGERS, VALID_UIS
from termsgate.utils.logger import log, logger, setup_logging


# ANSI color codes
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def _pretty_json(payload: Any):
    """Render JSON to stdout with stable formatting."""
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def print_header(text):
    """Print formatted header"""
    print(f"\n{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text:^70}{Colors.ENDC}")
    print(f"{Colors.BOLD}{Colors.BLUE}{'=' * 70}{Colors.ENDC}\n")

def print_success(text):
    """Print success message"""
    print(f"{Colors.GREEN}✓{Colors.ENDC} {text}")

def print_error(text):
    """Print error message"""
    print(f"{Colors.RED}✗{Colors.ENDC} {text}")

def print_info(text):
    """Print info message"""
    print(f"{Colors.CYAN}ℹ{Colors.ENDC} {text}")


def cmd_install(args, config):
    """Register triggers that run the prompt agent"""
    print_header("INSTALL ACCEPTANCE TRIGGERS")
    manager = ScheduleManager(config)
    triggers = args.triggers or list(config.triggers)
    command = manager.agent_command()
    print_info(f"Task: {config.task_name}")
    print_info(f"Triggers: {', '.join(triggers)}")
    print_info(f"Command: {' '.join(command)}")

    try:
        manager.install(triggers, command)
    except InstallError as e:
        log('error', f"Install failed: {e}")
        print_error(f"Install failed: {e}")
        return False

    print_success(f"Task {config.task_name} registered")
    return True


def cmd_uninstall(args, config):
    """Remove triggers and stored acceptance"""
    print_header("UNINSTALL ACCEPTANCE TRIGGERS")
    manager = ScheduleManager(config)
    try:
        manager.uninstall()
    except UninstallError as e:
        log('error', f"Uninstall failed: {e}")
        print_error(f"Uninstall failed: {e}")
        return False

    print_success(f"Task {config.task_name} removed and acceptance state cleared")
    return True


def cmd_run(args, config):
    """Evaluate acceptance and prompt if required"""
    accepted = run_gate_once(config, force=args.force, ui=args.ui)
    if accepted is None:
        print_error("Another acceptance prompt is already active; nothing was recorded")
        return False
    if accepted:
        print_success(f"Terms {config.terms_version} accepted")
    else:
        print_error(f"Terms {config.terms_version} not accepted")
    return accepted


def cmd_status(args, config):
    """Show stored acceptance, decision and registration"""
    store = AcceptanceStore.from_config(config)
    record = store.read()
    decision = evaluate(config, store=store)
    registration = ScheduleManager(config, store=store).get_registration()

    payload = {
        'organization': config.organization,
        'terms_version': config.terms_version,
        'store': str(store.record_file),
        'record': record.to_dict() if record else None,
        'decision': decision.value,
        'registration': registration,
    }
    if args.json:
        _pretty_json(payload)
        return True

    print_header("ACCEPTANCE STATUS")
    print_info(f"Organization:   {config.organization}")
    print_info(f"Terms version:  {config.terms_version}")
    print_info(f"Store:          {store.record_file}")
    if record is None:
        print_info("Record:         none")
    else:
        print_info(f"Accepted:       {record.accepted} (version {record.accepted_terms_version or '-'})")
        if record.acceptance_timestamp:
            print_info(f"Accepted at:    {record.acceptance_timestamp.isoformat()} by {record.accepted_by}")
        print_info(f"Acceptances:    {record.acceptance_count}")
        print_info(f"Reminders:      {record.reminder_count}")
    print_info(f"Decision:       {decision.value}")
    if registration:
        print_info(f"Registered:     {', '.join(registration.get('triggers', []))}")
    else:
        print_info("Registered:     no")
    return True


def cmd_reset(args, config):
    """Clear stored acceptance so the next run prompts again"""
    store = AcceptanceStore.from_config(config)
    try:
        store.clear()
    except StoreError as e:
        log('error', f"Reset failed: {e}")
        print_error(f"Reset failed: {e}")
        return False
    print_success("Stored acceptance cleared")
    return True


def build_parser():
    parser = argparse.ArgumentParser(
        description='TermsGate - Mandatory terms of use acceptance',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s install                    # Register logon/startup/reminder triggers
  %(prog)s install --trigger logon    # Register only the logon trigger
  %(prog)s run                        # Prompt if the current terms are not accepted
  %(prog)s run --force                # Prompt even if already accepted
  %(prog)s status --json              # Machine-readable status
  %(prog)s uninstall                  # Remove triggers and stored acceptance
        '''
    )
    parser.add_argument('--config', help='Path to config.json (default: $TERMSGATE_CONFIG or configs/config.json)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    parser_install = subparsers.add_parser('install', help='Register scheduler triggers')
    parser_install.add_argument('--trigger', dest='triggers', action='append', choices=VALID_TRIGGERS,
                                help='Trigger to register (repeatable; default: schedule.triggers)')
    parser_install.set_defaults(func=cmd_install)

    parser_uninstall = subparsers.add_parser('uninstall', help='Remove triggers and stored acceptance')
    parser_uninstall.set_defaults(func=cmd_uninstall)

    parser_run = subparsers.add_parser('run', help='Evaluate acceptance and prompt if required')
    parser_run.add_argument('--force', action='store_true', help='Ignore stored acceptance and always prompt')
    parser_run.add_argument('--ui', choices=VALID_UIS, help='Prompt surface (default: prompt.ui)')
    parser_run.set_defaults(func=cmd_run)

    parser_status = subparsers.add_parser('status', help='Show acceptance status')
    parser_status.add_argument('--json', action='store_true', help='Print status as JSON')
    parser_status.set_defaults(func=cmd_status)

    parser_reset = subparsers.add_parser('reset', help='Clear stored acceptance')
    parser_reset.set_defaults(func=cmd_reset)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no command specified, show help
    if not args.command:
        parser.print_help()
        return 0

    try:
        config = get_app_config(args.config)
        # Keep stdout clean for machine-readable output
        setup_logging('installer', config.log_dir, console=not getattr(args, 'json', False))
        success = args.func(args, config)
        return 0 if success else 1
    except KeyboardInterrupt:
        print_info("\nOperation cancelled by user")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error in '{args.command}'")
        print_error(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
