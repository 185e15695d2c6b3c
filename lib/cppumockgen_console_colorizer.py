# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

from enum import Enum

from rich.console import Console
from rich.markup import escape


class Color(Enum):
    LIGHT_RED = "bright_red"
    LIGHT_GREEN = "bright_green"
    YELLOW = "yellow"


class ConsoleColorizer:
    """Tints the prefix of the lines written to a stream, only when a terminal is attached."""

    def __init__(self, stream, force_terminal=None):
        self.stream = stream
        # Diagnostics are passed through as written, never wrapped or highlighted
        self.console = Console(file=stream, force_terminal=force_terminal, highlight=False, emoji=False,
                               soft_wrap=True)

    def write(self, prefix, color, message):
        """Writes ``prefix`` tinted and ``message`` untinted, ending the line."""
        self.console.print(f"[{color.value}]{escape(prefix)}[/]{escape(message)}")
