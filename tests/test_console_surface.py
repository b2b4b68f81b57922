"""Tests for the terminal acceptance prompt and the UI factories."""
import sys
from unittest.mock import patch

import pytest

from termsgate.core.errors import PresentationError
from termsgate.ui import build_blocker, build_surface
from termsgate.ui.base import NullInteractionBlocker, UserAction, interaction_suspended
from termsgate.ui.console import ConsoleSurface


@pytest.fixture
def surface():
    return ConsoleSurface('Contoso', '3.3.0', require_tty=False)


class TestConsoleSurface:

    @patch('builtins.input', return_value='yes')
    def test_accept(self, mock_input, surface, capsys):
        assert surface.present('Be nice.') is UserAction.ACCEPT
        out = capsys.readouterr().out
        assert 'CONTOSO - TERMS OF USE (version 3.3.0)' in out
        assert 'Be nice.' in out

    @patch('builtins.input', side_effect=['no', 'maybe', ' YES '])
    def test_no_decline_path(self, mock_input, surface, capsys):
        assert surface.present('Be nice.') is UserAction.ACCEPT
        assert mock_input.call_count == 3
        assert 'required' in capsys.readouterr().out

    @patch('builtins.input', return_value='later')
    def test_later_when_dismissible(self, mock_input, surface):
        assert surface.present('Be nice.', dismissible=True) is UserAction.DISMISS

    @patch('builtins.input', side_effect=['later', 'yes'])
    def test_later_not_offered_when_not_dismissible(self, mock_input, surface):
        assert surface.present('Be nice.', dismissible=False) is UserAction.ACCEPT
        assert mock_input.call_count == 2

    @patch('builtins.input', side_effect=EOFError)
    def test_eof_closes_without_decision(self, mock_input, surface):
        assert surface.present('Be nice.') is None

    @patch('builtins.input', side_effect=KeyboardInterrupt)
    def test_interrupt_closes_without_decision(self, mock_input, surface):
        assert surface.present('Be nice.') is None

    def test_requires_terminal(self, monkeypatch):
        class NotATerminal:
            def isatty(self):
                return False

        monkeypatch.setattr(sys, 'stdin', NotATerminal())
        with pytest.raises(PresentationError):
            ConsoleSurface('Contoso', '3.3.0').present('Be nice.')

    def test_release_is_noop(self, surface):
        surface.release()


class TestFactories:

    def test_console_surface_by_default(self, app_config):
        surface = build_surface(app_config)
        assert isinstance(surface, ConsoleSurface)
        assert surface.terms_version == '3.3.0'

    def test_ui_override(self, app_config):
        assert isinstance(build_surface(app_config, ui='CONSOLE'), ConsoleSurface)

    def test_null_blocker_when_blocking_disabled(self, app_config):
        assert isinstance(build_blocker(app_config), NullInteractionBlocker)


def test_interaction_suspended_resumes_on_error(blocker, events):
    with pytest.raises(ValueError):
        with interaction_suspended(blocker):
            assert blocker.suspended is True
            raise ValueError("boom")
    assert events == ['suspend', 'resume']
    assert blocker.suspended is False
