"""Terminal styling for command line diagnostics.

Public API
----------
paint(text, style)       → str wrapped in ANSI codes
should_use_color(stream) → bool (TTY detection + NO_COLOR)
"""

import os


# ANSI escape codes for the styles used by the command line
CODES = {
    "error": "\033[1;31m",   # bold red
    "reset": "\033[0m",
}


def paint(text, style):
    """Wrap text in the ANSI codes for a style.

    Args:
        text: (str) Text to style
        style: (str) Key of CODES

    Returns:
        (str) Styled text ending with a reset code
    """
    return f"{CODES[style]}{text}{CODES['reset']}"


def should_use_color(stream):
    """(bool) Diagnostics written to stream should be styled.

    Styling is used only for terminals, and never when the NO_COLOR
    environment variable is present (https://no-color.org/), whatever
    its value.
    """
    if "NO_COLOR" in os.environ:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
