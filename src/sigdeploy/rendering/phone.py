"""Mobile-number formatting for the ``%Mobile_padded%`` placeholder."""

from __future__ import annotations

import re

_INTERNATIONAL = re.compile(r"^\+(\d{7,15})$")

# E.164 calling codes shorter than three digits. Anything else is 3 digits.
_ONE_DIGIT_CODES = frozenset({"1", "7"})
_TWO_DIGIT_CODES = frozenset({
    "20", "27", "30", "31", "32", "33", "34", "36", "39", "40", "41", "43",
    "44", "45", "46", "47", "48", "49", "51", "52", "53", "54", "55", "56",
    "57", "58", "60", "61", "62", "63", "64", "65", "66", "81", "82", "84",
    "86", "90", "91", "92", "93", "94", "95", "98",
})

# national number length -> group widths
_GROUPING: dict[int, tuple[int, ...]] = {
    9: (3, 3, 3),
    10: (3, 3, 4),
    7: (3, 4),
}


def strip_invisible(value: str) -> str:
    """Drop everything outside visible ASCII (0x21-0x7E), spaces included."""
    return "".join(ch for ch in value if "!" <= ch <= "~")


def split_country_code(digits: str) -> tuple[str, str]:
    """Split an international digit string into (calling code, national number)."""
    if digits[:1] in _ONE_DIGIT_CODES:
        return digits[:1], digits[1:]
    if digits[:2] in _TWO_DIGIT_CODES:
        return digits[:2], digits[2:]
    return digits[:3], digits[3:]


def group_national(national: str) -> str:
    widths = _GROUPING.get(len(national))
    if widths is None:
        return national
    parts = []
    pos = 0
    for width in widths:
        parts.append(national[pos:pos + width])
        pos += width
    return " ".join(parts)


def format_mobile(raw: str) -> str:
    """Format ``+<cc><national>`` as ``+<cc> <grouped national>``.

    Input that is not an international number (after stripping invisible
    characters) is returned unchanged.
    """
    cleaned = strip_invisible(raw)
    match = _INTERNATIONAL.match(cleaned)
    if match is None:
        return raw
    code, national = split_country_code(match.group(1))
    if not 6 <= len(national) <= 12:
        return raw
    return f"+{code} {group_national(national)}"
