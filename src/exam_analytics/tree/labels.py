"""
Module: tree.labels

Purpose:
    Label heuristics used when adding questions: guess the next sibling's
    label from the previous one ("3" -> "4", "b" -> "c", "iii" -> "iv")
    and a first child's label from its parent ("1" -> "a", "a" -> "i").

Key Functions:
    - next_sibling_label(): Next label in the same sequence, "" if unknown
    - first_child_label(): Label for the first child of a parent
    - to_roman_numeral(): Lowercase roman numeral for a positive integer

Dependencies:
    - re (std)

Used By:
    - tree.operations.next_child_label
    - tree.scaffold
"""

from __future__ import annotations

import re

_NUMERIC_RE = re.compile(r"^\d+$")
_LOWER_RE = re.compile(r"^[a-z]$")
_UPPER_RE = re.compile(r"^[A-Z]$")

# Sub-part romans run i..xii; "xii" has no successor.
_ROMAN_SEQUENCE = ("i", "ii", "iii", "iv", "v", "vi", "vii", "viii", "ix", "x", "xi", "xii")

_ROMAN_VALUES = (
    (1000, "m"), (900, "cm"), (500, "d"), (400, "cd"),
    (100, "c"), (90, "xc"), (50, "l"), (40, "xl"),
    (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
)


def to_roman_numeral(num: int) -> str:
    """
    Convert a positive integer to a lowercase roman numeral.

    Example:
        >>> to_roman_numeral(14)
        'xiv'
    """
    if num <= 0:
        return ""
    parts = []
    for value, symbol in _ROMAN_VALUES:
        count, num = divmod(num, value)
        parts.append(symbol * count)
    return "".join(parts)


def next_sibling_label(previous: str) -> str:
    """
    Guess the label that follows ``previous`` among siblings.

    Rules, first match wins:
        - "" -> "1"
        - digits -> incremented number
        - roman i..xi (any case) -> next roman, lowercase
        - single lowercase/uppercase letter -> next letter, same case
        - anything else (including "z", "Z", "xii") -> ""

    Single letters that are also romans ("i", "v", "x") continue the
    roman sequence.

    Never raises; an empty return means the caller must ask for a label.
    """
    if not previous:
        return "1"
    text = previous.strip()

    if _NUMERIC_RE.match(text):
        return str(int(text) + 1)

    lower = text.lower()
    if lower in _ROMAN_SEQUENCE:
        index = _ROMAN_SEQUENCE.index(lower) + 1
        return _ROMAN_SEQUENCE[index] if index < len(_ROMAN_SEQUENCE) else ""

    if _LOWER_RE.match(text) and text != "z":
        return chr(ord(text) + 1)
    if _UPPER_RE.match(text) and text != "Z":
        return chr(ord(text) + 1)

    return ""


def first_child_label(parent_label: str) -> str:
    """
    Label for the first sub-question of a parent.

    A numbered question gets lettered parts ("1" -> "a"); a lettered part
    gets roman parts ("a" -> "i"). Anything else starts at "a".
    """
    text = (parent_label or "").strip()
    if _NUMERIC_RE.match(text):
        return "a"
    if _LOWER_RE.match(text) or _UPPER_RE.match(text):
        return "i"
    return "a"
