"""Terminal helpers."""

import sys
from typing import Optional, TextIO

# Erase the screen and move the cursor home.
CLEAR_SEQUENCE = "\x1b[2J\x1b[H"


def clear_terminal(stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    stream.write(CLEAR_SEQUENCE)
    stream.flush()
