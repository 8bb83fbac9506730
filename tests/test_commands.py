"""
Tests for SMS control keywords.
"""
import pytest

from models import Command
from triage.commands import interpret_command


class TestInterpretCommand:

    @pytest.mark.parametrize("text,expected", [
        ("HELP", Command.HELP),
        ("help", Command.HELP),
        ("Stop", Command.STOP),
        ("start", Command.START),
        ("please stop sending", Command.STOP),
    ])
    def test_keywords(self, text, expected):
        assert interpret_command(text) == expected

    def test_no_command(self):
        assert interpret_command("bleeding since morning") is None
        assert interpret_command("") is None
        assert interpret_command(None) is None

    def test_whole_words_only(self):
        """'started' and 'helpful' are not commands"""
        assert interpret_command("it started bleeding") is None
        assert interpret_command("the nurse was helpful") is None
        assert interpret_command("non-stopping pain") is None

    def test_help_takes_precedence(self):
        assert interpret_command("stop? no, help") == Command.HELP

    def test_help_wins_over_urgent_symptom(self):
        assert interpret_command("help, heavy bleeding") == Command.HELP
