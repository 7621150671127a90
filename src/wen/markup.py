"""Translate the small in-band tag vocabulary into ANSI escape sequences."""

import re
from types import MappingProxyType

RESET = "\033[0m"

TAG_CODES = MappingProxyType(
    {
        "<red>": "\033[31m",
        "</red>": RESET,
        "<green>": "\033[32m",
        "</green>": RESET,
        "<blue>": "\033[34m",
        "</blue>": RESET,
        "<bold>": "\033[1m",
        "</bold>": RESET,
        "<yellow>": "\033[33m",
        "</yellow>": RESET,
    }
)

# A literal backslash-e shorthand, e.g. "\e[7m". Digits only, no ";" lists.
_SHORTHAND = re.compile(r"\\e\[([0-9]+)m")


def render(text: str) -> str:
    """Replace known tags and ``\\e[<n>m`` shorthand with terminal escape codes.

    Anything not recognized, including half-written tags, is left untouched.
    """
    for tag, code in TAG_CODES.items():
        text = text.replace(tag, code)
    return _SHORTHAND.sub("\033[\\1m", text)
