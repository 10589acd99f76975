# xpcard/utils/text_utils.py
from typing import Callable

import regex

ELLIPSIS = "..."

# Pillow cannot draw color emoji with a regular TrueType font
_EMOJI_PATTERN = regex.compile(r"\p{Emoji_Presentation}|\p{Extended_Pictographic}")


def strip_emojis(text: str) -> str:
    """Remove emoji and pictographic code points"""
    if not text:
        return ""
    return _EMOJI_PATTERN.sub("", text)


def truncate_text_with_ellipsis(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
) -> str:
    """
    Shorten ``text`` so that it fits ``max_width`` pixels, ending with "...".

    ``measure`` returns the rendered width of a string in the target font.
    Text that already fits is returned unchanged. Otherwise the longest prefix
    that fits next to the ellipsis is found by binary search over prefix
    lengths, so only O(log n) measurements are made.
    """
    if measure(text) <= max_width:
        return text

    available_width = max_width - measure(ELLIPSIS)

    low, high = 0, len(text)
    result = ""
    while low <= high:
        mid = (low + high) // 2
        prefix = text[:mid]
        if measure(prefix) <= available_width:
            result = prefix
            low = mid + 1
        else:
            high = mid - 1

    return result + ELLIPSIS


def format_xp_text(xp: int, xp_needed: int) -> str:
    return f"{xp:,} / {xp_needed:,} XP"
