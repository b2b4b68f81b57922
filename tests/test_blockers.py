"""Tests for the keyboard hotkey blocker (keyboard calls are faked)."""
from types import SimpleNamespace

import keyboard
import pytest

from termsgate.ui.blockers import BLOCKED_KEYS, HotkeyBlocker


@pytest.fixture
def fake_keyboard(monkeypatch):
    state = {'blocked': [], 'unblocked': [], 'hooks': [], 'unhooked': [], 'unhook_all': 0, 'pressed': set()}

    monkeypatch.setattr(keyboard, 'block_key', lambda key: state['blocked'].append(key))
    monkeypatch.setattr(keyboard, 'unblock_key', lambda key: state['unblocked'].append(key))

    def fake_hook(callback, suppress=False):
        state['hooks'].append((callback, suppress))
        return callback

    def fake_unhook_all():
        state['unhook_all'] += 1

    monkeypatch.setattr(keyboard, 'hook', fake_hook)
    monkeypatch.setattr(keyboard, 'unhook', lambda hook: state['unhooked'].append(hook))
    monkeypatch.setattr(keyboard, 'unhook_all', fake_unhook_all)
    monkeypatch.setattr(keyboard, 'is_pressed', lambda key: key in state['pressed'])
    return state


def key_down(name):
    return SimpleNamespace(event_type='down', name=name)


class TestHotkeyBlocker:

    def test_suspend_and_resume(self, fake_keyboard):
        blocker = HotkeyBlocker()
        blocker.suspend()
        assert fake_keyboard['blocked'] == list(BLOCKED_KEYS)
        assert len(fake_keyboard['hooks']) == 1
        assert fake_keyboard['hooks'][0][1] is True

        blocker.resume()
        assert fake_keyboard['unblocked'] == list(BLOCKED_KEYS)
        assert len(fake_keyboard['unhooked']) == 1
        assert fake_keyboard['unhook_all'] == 0

    def test_resume_twice_is_harmless(self, fake_keyboard):
        blocker = HotkeyBlocker()
        blocker.suspend()
        blocker.resume()
        blocker.resume()
        assert fake_keyboard['unblocked'] == list(BLOCKED_KEYS)

    def test_failed_release_unhooks_all(self, fake_keyboard, monkeypatch):
        blocker = HotkeyBlocker()
        blocker.suspend()

        def broken_unblock(key):
            raise ValueError(key)

        monkeypatch.setattr(keyboard, 'unblock_key', broken_unblock)
        blocker.resume()
        assert fake_keyboard['unhook_all'] == 1

    def test_suspend_survives_missing_permissions(self, fake_keyboard, monkeypatch):
        def denied(*args, **kwargs):
            raise ImportError("You must be root to use this library on linux.")

        monkeypatch.setattr(keyboard, 'block_key', denied)
        monkeypatch.setattr(keyboard, 'hook', denied)

        blocker = HotkeyBlocker()
        blocker.suspend()
        blocker.resume()
        assert fake_keyboard['unblocked'] == []
        assert fake_keyboard['unhooked'] == []

    @pytest.mark.parametrize('modifier,key', [('alt', 'f4'), ('alt', 'tab'), ('ctrl', 'w'), ('ctrl', 'esc')])
    def test_shortcuts_suppressed(self, fake_keyboard, modifier, key):
        fake_keyboard['pressed'].add(modifier)
        assert HotkeyBlocker._filter(key_down(key)) is False

    def test_plain_keys_pass(self, fake_keyboard):
        assert HotkeyBlocker._filter(key_down('y')) is True
        assert HotkeyBlocker._filter(key_down('tab')) is True
        assert HotkeyBlocker._filter(SimpleNamespace(event_type='up', name='f4')) is True
