# triage/commands.py
"""
SMS control keywords. These are checked before any symptom extraction so a
control word is never read as a symptom report.
"""

import re
from typing import Optional, Tuple

from models import Command

# Checked in this order; the first hit wins.
COMMAND_PATTERNS: Tuple[Tuple[Command, "re.Pattern[str]"], ...] = (
    (Command.HELP, re.compile(r"\bhelp\b", re.IGNORECASE)),
    (Command.STOP, re.compile(r"\bstop\b", re.IGNORECASE)),
    (Command.START, re.compile(r"\bstart\b", re.IGNORECASE)),
)


def interpret_command(text: Optional[str]) -> Optional[Command]:
    """
    Return the control command contained in ``text``, if any.

    Keywords must appear as whole words: "help me, I have a fever" is HELP,
    while "it started bleeding" is not START.
    """
    if not text:
        return None

    for command, pattern in COMMAND_PATTERNS:
        if pattern.search(text):
            return command
    return None
