"""
================================================================================
CONSOLE SURFACE - Terminal Acceptance Prompt
================================================================================

Displays the terms on stdout and loops on input() until the user accepts.

Responses:
    yes    - Accept the terms
    later  - Postpone (only offered while dismissal is allowed)
    no     - Refused; acceptance is required, the prompt repeats

There is no decline path that ends the session. Closing stdin (EOF) or
interrupting with Ctrl+C ends the prompt without a decision.

Author: TermsGate Team
Last Modified: October 2026
================================================================================
"""

import sys
from typing import Optional

from termsgate.core.errors import PresentationError
from termsgate.ui.base import PromptSurface, UserAction


class ConsoleSurface(PromptSurface):

    def __init__(self, organization: str, terms_version: str, require_tty: bool = True):
        self.organization = organization
        self.terms_version = terms_version
        self.require_tty = require_tty

    def present(self, content: str, dismissible: bool = False) -> Optional[UserAction]:
        if self.require_tty and not (hasattr(sys.stdin, "isatty") and sys.stdin.isatty()):
            raise PresentationError("No interactive terminal available for the acceptance prompt")

        print("\n" + "=" * 80)
        print(f"{self.organization.upper()} - TERMS OF USE (version {self.terms_version})")
        print("=" * 80 + "\n")
        print(content)
        print("\n" + "=" * 80)
        print("ACCEPTANCE REQUIRED")
        print("=" * 80 + "\n")

        if dismissible:
            question = "Type 'yes' to accept these terms, or 'later' to be reminded: "
        else:
            question = "Type 'yes' to accept these terms: "

        while True:
            try:
                response = input(question).strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("\nPrompt closed without accepting.")
                return None

            if response == 'yes':
                print("\n✓ Terms accepted.")
                return UserAction.ACCEPT
            elif response == 'later' and dismissible:
                print("\nYou will be reminded again shortly.")
                return UserAction.DISMISS
            elif response == 'no':
                print("Acceptance of these terms is required to continue using this computer.")
            else:
                print("Please enter 'yes' to accept." if not dismissible
                      else "Please enter 'yes' or 'later'.")
