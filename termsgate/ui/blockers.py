"""
Keyboard-level interaction blocker.

Best-effort suppression of the shell shortcuts a user could use to get
around the acceptance window: Windows/menu keys, Alt+Tab, Alt+F4, Ctrl+W
and Ctrl+Esc. Ctrl+Alt+Del cannot be blocked from user mode.

Hooks are process-wide; they are released on resume() and die with the
process, so a crash cannot leave the desktop locked.
"""

import logging

import keyboard

from termsgate.ui.base import InteractionBlocker

logger = logging.getLogger("termsgate")

BLOCKED_KEYS = ('left windows', 'right windows', 'apps')


class HotkeyBlocker(InteractionBlocker):

    def __init__(self):
        self._blocked = []
        self._hook = None

    def suspend(self):
        for key in BLOCKED_KEYS:
            try:
                keyboard.block_key(key)
                self._blocked.append(key)
            except Exception as e:
                logger.warning(f"Cannot block key {key}: {e}")

        try:
            self._hook = keyboard.hook(self._filter, suppress=True)
        except Exception as e:
            logger.warning(f"Cannot install keyboard hook: {e}")
            self._hook = None

    @staticmethod
    def _filter(event):
        if event.event_type != 'down':
            return True
        name = (event.name or '').lower()
        try:
            if name in ('f4', 'tab') and keyboard.is_pressed('alt'):
                return False
            if name == 'w' and keyboard.is_pressed('ctrl'):
                return False
            if name == 'esc' and keyboard.is_pressed('ctrl'):
                return False
        except Exception:
            # Key state lookups can fail mid-teardown; let the key through
            return True
        return True

    def resume(self):
        errors = []
        if self._hook is not None:
            try:
                keyboard.unhook(self._hook)
            except Exception as e:
                errors.append(f"hook: {e}")
            self._hook = None
        for key in self._blocked:
            try:
                keyboard.unblock_key(key)
            except Exception as e:
                errors.append(f"{key}: {e}")
        self._blocked = []
        if errors:
            logger.warning(f"Keyboard blocker release incomplete ({'; '.join(errors)}), unhooking all")
            keyboard.unhook_all()
