# ABOUTME: Interactive terminal prompts for mechanism and role selection
# ABOUTME: Wraps questionary so prompts render on stderr, keeping stdout for the export line

"""Terminal prompts."""

import sys
from collections.abc import Sequence

import questionary
from prompt_toolkit.output import create_output

from .console import err_console


class Prompter:
    """Asks the user for input on the controlling terminal via stderr."""

    def __init__(self, output=None):
        self._output = output

    @property
    def output(self):
        if self._output is None:
            self._output = create_output(stdout=sys.stderr)
        return self._output

    def show(self, message: str) -> None:
        err_console.print(message, markup=False)

    def text(self, message: str) -> str:
        return self._ask(questionary.text(message, output=self.output))

    def secret(self, message: str) -> str:
        """Prompt without echoing the typed value."""
        return self._ask(questionary.password(message, output=self.output))

    @staticmethod
    def _ask(question) -> str:
        answer = question.ask()
        if answer is None:  # User cancelled (Ctrl+C)
            raise KeyboardInterrupt
        return answer


def parse_selection(answer: str | None, count: int) -> int | None:
    """Map a 1-based numeric answer to a list index, or None when invalid."""
    try:
        choice = int((answer or "").strip())
    except ValueError:
        return None
    if 1 <= choice <= count:
        return choice - 1
    return None


def select_option(prompter: Prompter, title: str, labels: Sequence[str]) -> int:
    """Return the index of the option the user picks.

    A single option is chosen without prompting. Otherwise the options are
    listed with 1-based numbers and the user is asked until a number in
    range is entered.
    """
    if not labels:
        raise ValueError("No options to select from")
    if len(labels) == 1:
        return 0

    prompter.show(f"\n{title}")
    for i, label in enumerate(labels):
        prompter.show(f"  [{i + 1}] {label}")

    while True:
        index = parse_selection(prompter.text(f"Selection (1-{len(labels)}):"), len(labels))
        if index is not None:
            return index
        prompter.show("Invalid selection, please try again.")
