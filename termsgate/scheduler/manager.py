"""
================================================================================
SCHEDULER - Trigger Registration and Trigger Daemon
================================================================================

Registers the recurring triggers that run the prompt agent, and hosts them
in an APScheduler loop.

Registration Storage:
    configs/schedule_config.json

    Format:
    {
        "tasks": {
            "TermsAcceptance": {
                "command": ["termsgate-agent", "--config", "/opt/tg/configs/config.json"],
                "triggers": ["logon", "startup", "reminder"],
                "reminder_hours": 4,
                "multiple_instances": "ignore_new",
                "installed_at": "2026-10-19T08:00:00+00:00"
            }
        }
    }

    Tasks are keyed by name, so installing again replaces the registration
    instead of duplicating it.

Trigger Types:
    logon / startup:
        A one-shot "session-start" job fired as soon as the daemon starts.
        The daemon itself is launched at logon by an XDG autostart entry.

    reminder:
        Interval job every reminder_hours, re-prompting users who postponed.

Instance Policy:
    "ignore_new" - jobs use max_instances=1 and coalesce=True; a trigger
    that fires while a prompt is still running is dropped. Separate agent
    processes are serialized by single_instance() in the agent itself.

Lifecycle:
    The daemon stops on its own once a prompt run exits 0 and the store
    reports the current terms as accepted, or when a trigger fires after
    the task was uninstalled.

Usage:
    from termsgate.scheduler import ScheduleManager

    manager = ScheduleManager(config)
    manager.install(config.triggers, manager.agent_command())
    manager.serve()        # trigger daemon (termsgate-agent --watch)
    manager.uninstall()

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""
import json
import logging
import os
import shutil
import subprocess
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import filelock
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from termsgate.core.errors import InstallError, StoreError, UninstallError
from termsgate.core.state_machine import Decision, decide
from termsgate.core.store import AcceptanceStore
from termsgate.scheduler.autostart import remove_desktop_entry, write_desktop_entry
from termsgate.utils.constants import (
    AGENT_COMMAND,
    AGENT_UI,
    MULTIPLE_INSTANCES_POLICY,
    REMINDER_JOB_ID,
    SESSION_START_JOB_ID,
    STORE_LOCK_TIMEOUT_SECONDS,
    TRIGGER_LOGON,
    TRIGGER_REMINDER,
    TRIGGER_STARTUP,
    VALID_TRIGGERS,
)

logger = logging.getLogger("termsgate")


class ScheduleManager:
    """Manages trigger registration and the trigger daemon"""

    def __init__(self, config, store: Optional[AcceptanceStore] = None, scheduler=None):
        self.config = config
        self.config_file = Path(config.schedule_file)
        self.lock_file = Path(str(self.config_file) + '.lock')
        self.store = store or AcceptanceStore.from_config(config)
        self.scheduler = scheduler
        self._run_lock = threading.Lock()
        self._stopped = threading.Event()

    # ------------------------------------------------------------------
    # Registration file
    # ------------------------------------------------------------------
    def load_schedule_config(self) -> Dict:
        """Load registrations; an unreadable file reads as empty."""
        if not self.config_file.exists():
            return {'tasks': {}}

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load schedule config: {e}")
            return {'tasks': {}}

        if not isinstance(data, dict) or not isinstance(data.get('tasks'), dict):
            logger.error(f"Schedule config {self.config_file} has no task table, ignoring it")
            return {'tasks': {}}
        return data

    def save_schedule_config(self, config: Dict):
        """Save registrations atomically; raises OSError or filelock.Timeout."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        lock = filelock.FileLock(str(self.lock_file), timeout=STORE_LOCK_TIMEOUT_SECONDS)
        with lock:
            fd, tmp_name = tempfile.mkstemp(prefix='.schedule-', suffix='.tmp',
                                            dir=str(self.config_file.parent))
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(config, f, indent=4)
                os.chmod(tmp_name, 0o644)
                os.replace(tmp_name, self.config_file)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass
                raise
        logger.info("Schedule configuration saved")

    def registrations(self) -> Dict[str, Dict]:
        return dict(self.load_schedule_config()['tasks'])

    def get_registration(self) -> Optional[Dict]:
        return self.registrations().get(self.config.task_name)

    def agent_command(self) -> List[str]:
        """Command line the triggers run: the prompt agent bound to this config.

        Triggers fire without a terminal, so the agent is pinned to the
        window surface regardless of prompt.ui.
        """
        command = [shutil.which(AGENT_COMMAND) or AGENT_COMMAND]
        if self.config.config_file:
            command += ['--config', str(self.config.config_file)]
        command += ['--ui', AGENT_UI]
        return command

    # ------------------------------------------------------------------
    # Install / uninstall
    # ------------------------------------------------------------------
    def install(self, triggers: Sequence[str], command: Sequence[str]):
        """Register (or replace) the task; raises InstallError."""
        trigger_set = list(dict.fromkeys(str(t).lower() for t in triggers))
        if not trigger_set:
            raise InstallError("At least one trigger is required")
        unknown = [t for t in trigger_set if t not in VALID_TRIGGERS]
        if unknown:
            raise InstallError(
                f"Unknown trigger(s): {', '.join(unknown)} (valid: {', '.join(VALID_TRIGGERS)})"
            )
        command = [str(part) for part in command]
        if not command:
            raise InstallError("A command to run is required")

        registration = {
            'command': command,
            'triggers': trigger_set,
            'reminder_hours': self.config.reminder_hours,
            'multiple_instances': MULTIPLE_INSTANCES_POLICY,
            'installed_at': datetime.now(timezone.utc).isoformat(),
        }

        try:
            schedule = self.load_schedule_config()
            replaced = self.config.task_name in schedule['tasks']
            schedule['tasks'][self.config.task_name] = registration
            self.save_schedule_config(schedule)
            write_desktop_entry(self.config.autostart_dir, self.config.task_name, command + ['--watch'])
        except filelock.Timeout as e:
            raise InstallError(f"Timed out waiting for {self.lock_file}") from e
        except OSError as e:
            raise InstallError(f"Failed to register task {self.config.task_name}: {e}") from e

        logger.info(
            f"Task {'replaced' if replaced else 'registered'}: {self.config.task_name} "
            f"(triggers: {', '.join(trigger_set)})"
        )

    def uninstall(self):
        """Remove the task, its autostart entry and the stored acceptance.

        Succeeds when everything is already gone. Raises UninstallError if
        any part could not be removed; the remaining parts are still attempted.
        """
        errors = []

        try:
            self._remove_registration()
        except filelock.Timeout:
            errors.append(f"timed out waiting for {self.lock_file}")
        except OSError as e:
            errors.append(f"registration: {e}")

        try:
            remove_desktop_entry(self.config.autostart_dir, self.config.task_name)
        except OSError as e:
            errors.append(f"autostart entry: {e}")

        try:
            self.store.clear()
        except StoreError as e:
            errors.append(f"acceptance store: {e}")

        if errors:
            raise UninstallError("; ".join(errors))
        logger.info(f"Task uninstalled: {self.config.task_name}")

    def _remove_registration(self):
        if not self.config_file.exists():
            return
        schedule = self.load_schedule_config()
        removed = schedule['tasks'].pop(self.config.task_name, None)
        if schedule['tasks']:
            if removed is not None:
                self.save_schedule_config(schedule)
            return
        lock = filelock.FileLock(str(self.lock_file), timeout=STORE_LOCK_TIMEOUT_SECONDS)
        with lock:
            if self.config_file.exists():
                self.config_file.unlink()
        if self.lock_file.exists():
            self.lock_file.unlink()

    # ------------------------------------------------------------------
    # Trigger daemon
    # ------------------------------------------------------------------
    def _ensure_scheduler(self):
        if self.scheduler is None:
            self.scheduler = BackgroundScheduler(
                job_defaults={'coalesce': True, 'max_instances': 1}
            )
        return self.scheduler

    def run_prompt_command(self, command: Sequence[str]) -> Optional[int]:
        """Run the prompt agent (called by scheduler jobs).

        The agent inherits the daemon's stdio; its window is the only thing
        the user interacts with.
        """
        if not self._run_lock.acquire(blocking=False):
            logger.info("Prompt already running; ignoring trigger")
            return None
        try:
            if self.get_registration() is None:
                logger.info(f"Task {self.config.task_name} is no longer registered; stopping trigger daemon")
                self._stopped.set()
                return None

            logger.info(f"Running prompt agent: {' '.join(command)}")
            result = subprocess.run(list(command))

            if result.returncode == 0:
                logger.info("Prompt agent completed successfully")
                if self._terms_accepted():
                    logger.info("Current terms accepted; stopping trigger daemon")
                    self._stopped.set()
            else:
                logger.warning(f"Prompt agent exited with {result.returncode}")
            return result.returncode
        except OSError as e:
            logger.error(f"Error running prompt agent: {e}")
            return None
        finally:
            self._run_lock.release()

    def _terms_accepted(self) -> bool:
        return decide(self.store.read(), self.config.terms_version) is Decision.ALREADY_ACCEPTED

    def add_schedule(self, job_id: str, trigger, command: Sequence[str]):
        self._ensure_scheduler().add_job(
            func=self.run_prompt_command,
            trigger=trigger,
            id=job_id,
            kwargs={'command': list(command)},
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
        )
        logger.info(f"Schedule added: {job_id} ({trigger})")

    def reload_schedules(self) -> int:
        """Rebuild jobs from the registration; returns the number of jobs."""
        scheduler = self._ensure_scheduler()
        for job in scheduler.get_jobs():
            scheduler.remove_job(job.id)

        registration = self.get_registration()
        if not registration:
            logger.info(f"No registration for task {self.config.task_name}")
            return 0

        command = registration.get('command') or self.agent_command()
        triggers = registration.get('triggers', [])
        count = 0

        if TRIGGER_LOGON in triggers or TRIGGER_STARTUP in triggers:
            self.add_schedule(SESSION_START_JOB_ID, DateTrigger(run_date=datetime.now(timezone.utc)), command)
            count += 1
        if TRIGGER_REMINDER in triggers:
            hours = int(registration.get('reminder_hours') or self.config.reminder_hours)
            self.add_schedule(REMINDER_JOB_ID, IntervalTrigger(hours=hours), command)
            count += 1

        logger.info(f"Loaded {count} trigger job(s) for {self.config.task_name}")
        return count

    def serve(self, timeout: Optional[float] = None) -> bool:
        """Run the trigger daemon until it has nothing left to do (or timeout).

        Returns True when the terms were accepted or the task was removed.
        """
        if self._terms_accepted():
            logger.info("Current terms already accepted; trigger daemon not needed")
            return True
        if self.reload_schedules() == 0:
            logger.warning("Nothing to schedule; is the task installed?")
            return False

        self.scheduler.start()
        logger.info("Trigger daemon started")
        try:
            self._stopped.wait(timeout)
        finally:
            self.shutdown()
        return self._stopped.is_set()

    def shutdown(self):
        """Shutdown the scheduler"""
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shut down")
