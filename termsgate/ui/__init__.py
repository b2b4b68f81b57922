"""
UI collaborators: prompt surfaces and interaction blockers.

Usage:
    from termsgate.ui import build_surface, build_blocker

    surface = build_surface(config)
    blocker = build_blocker(config)
"""

from termsgate.ui.base import (
    UserAction,
    PromptSurface,
    InteractionBlocker,
    NullInteractionBlocker,
    interaction_suspended,
)
from termsgate.utils.constants import UI_TK


def build_surface(config, ui=None) -> PromptSurface:
    """Create the surface selected by prompt.ui (or an explicit override)."""
    ui = (ui or config.ui).lower()
    if ui == UI_TK:
        # tkinter needs a display; only load it when asked for
        from termsgate.ui.tk_surface import TkSurface
        return TkSurface(config.organization, config.terms_version)
    from termsgate.ui.console import ConsoleSurface
    return ConsoleSurface(config.organization, config.terms_version)


def build_blocker(config) -> InteractionBlocker:
    if not config.block_input:
        return NullInteractionBlocker()
    from termsgate.ui.blockers import HotkeyBlocker
    return HotkeyBlocker()


__all__ = [
    'UserAction',
    'PromptSurface',
    'InteractionBlocker',
    'NullInteractionBlocker',
    'interaction_suspended',
    'build_surface',
    'build_blocker',
]
