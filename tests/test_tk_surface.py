"""Tests for the fullscreen window surface that can run without a display."""
import pytest

tk = pytest.importorskip('tkinter')

from termsgate.core import gate
from termsgate.core.errors import PresentationError
from termsgate.ui import build_surface
from termsgate.ui import tk_surface
from termsgate.ui.tk_surface import TkSurface


@pytest.fixture
def no_display(monkeypatch):
    def broken_tk(*args, **kwargs):
        raise tk.TclError("no display name and no $DISPLAY environment variable")

    monkeypatch.setattr(tk_surface.tk, 'Tk', broken_tk)


class TestTkSurface:

    def test_missing_display_raises_presentation_error(self, no_display):
        surface = TkSurface('Contoso', '3.3.0')
        with pytest.raises(PresentationError, match='Cannot open acceptance window'):
            surface.present('Be nice.')
        assert surface._root is None

    def test_release_before_present_is_noop(self):
        surface = TkSurface('Contoso', '3.3.0')
        surface.release()
        surface.release()
        assert surface._root is None

    def test_factory_builds_window_surface(self, app_config):
        surface = build_surface(app_config, ui='tk')
        assert isinstance(surface, TkSurface)
        assert surface.organization == 'Contoso'
        assert surface.terms_version == '3.3.0'

    def test_gate_without_display_blocks(self, app_config, store, blocker, no_display):
        surface = TkSurface(app_config.organization, app_config.terms_version)
        assert gate.run_gate(app_config, store=store, surface=surface, blocker=blocker) is False
        assert store.read() is None
