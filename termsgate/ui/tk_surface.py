"""
Fullscreen tkinter acceptance window.

The window is topmost, undecorated and ignores the window manager's close
request; it keeps lifting itself until the user clicks "I Accept" (or
"Remind me later" while dismissal is still allowed).
"""

import logging
from typing import Optional

import tkinter as tk
from tkinter import scrolledtext

from termsgate.core.errors import PresentationError
from termsgate.ui.base import PromptSurface, UserAction

logger = logging.getLogger("termsgate")

BG = "#1f2933"
FG = "white"
REFOCUS_MS = 250


class TkSurface(PromptSurface):

    def __init__(self, organization: str, terms_version: str):
        self.organization = organization
        self.terms_version = terms_version
        self._root = None
        self._refocus_job = None

    def present(self, content: str, dismissible: bool = False) -> Optional[UserAction]:
        # A re-presentation replaces the window left by the previous round
        self.release()
        try:
            root = tk.Tk()
        except tk.TclError as e:
            raise PresentationError(f"Cannot open acceptance window: {e}") from e
        self._root = root
        result = {'action': None}

        root.title(f"{self.organization} Terms of Use")
        root.configure(bg=BG)
        root.attributes("-fullscreen", True)
        root.attributes("-topmost", True)
        root.overrideredirect(True)

        def block_close():
            logger.debug("Window close attempted on acceptance prompt, ignored.")
            root.attributes("-topmost", True)

        root.protocol("WM_DELETE_WINDOW", block_close)

        frame = tk.Frame(root, bg=BG)
        frame.place(relx=0.5, rely=0.5, anchor=tk.CENTER, relwidth=0.7, relheight=0.85)

        tk.Label(
            frame,
            text=f"{self.organization} Terms of Use (version {self.terms_version})",
            font=("Arial", 20, "bold"),
            fg=FG,
            bg=BG,
            pady=10,
        ).pack(fill=tk.X)

        text = scrolledtext.ScrolledText(frame, wrap=tk.WORD, font=("Arial", 12))
        text.insert(tk.END, content)
        text.configure(state=tk.DISABLED)
        text.pack(fill=tk.BOTH, expand=True, pady=10)

        buttons = tk.Frame(frame, bg=BG)
        buttons.pack(pady=10)

        def finish(action):
            result['action'] = action
            root.quit()

        accept = tk.Button(
            buttons,
            text="I Accept",
            font=("Arial", 14),
            width=16,
            bg="#5cb85c",
            fg=FG,
            command=lambda: finish(UserAction.ACCEPT),
        )
        accept.pack(side=tk.LEFT, padx=10)

        if dismissible:
            tk.Button(
                buttons,
                text="Remind me later",
                font=("Arial", 14),
                width=16,
                command=lambda: finish(UserAction.DISMISS),
            ).pack(side=tk.LEFT, padx=10)

        def continuous_lift():
            if root.winfo_exists():
                root.lift()
                root.attributes("-topmost", True)
                self._refocus_job = root.after(REFOCUS_MS, continuous_lift)

        accept.focus_set()
        self._refocus_job = root.after(REFOCUS_MS, continuous_lift)
        root.mainloop()
        return result['action']

    def release(self):
        root, self._root = self._root, None
        if root is None:
            return
        try:
            if self._refocus_job is not None:
                root.after_cancel(self._refocus_job)
            root.destroy()
        except tk.TclError as e:
            logger.debug(f"Acceptance window already gone: {e}")
        finally:
            self._refocus_job = None
