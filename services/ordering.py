"""Natural ordering for hierarchical sensor paths.

Runs of ASCII digits compare by their integer value and every other
character compares literally, so ``fan_tach/fan10`` sorts after
``fan_tach/fan2``. Where exactly one side has a digit at the point of
comparison, the digit side sorts first. A path that is a prefix of another
sorts first.
"""

from __future__ import annotations

import re
from typing import Iterable, Tuple, Union

_TOKEN_RE = re.compile(r"(?P<digits>[0-9]+)|(?P<text>[^0-9])")

Token = Tuple[int, Union[int, str]]

_DIGITS = 0
_TEXT = 1


def _tokens(path: str) -> tuple[Token, ...]:
    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(path):
        digits = match.group("digits")
        if digits is not None:
            tokens.append((_DIGITS, int(digits)))
        else:
            tokens.append((_TEXT, match.group("text")))
    return tuple(tokens)


def natural_key(path: str) -> tuple[tuple[Token, ...], str]:
    """Sort key for a sensor path.

    The raw path is kept as a final tie-breaker so that paths differing only
    in leading zeros (``fan01`` and ``fan1``) still have a fixed order.
    """
    return _tokens(path), path


def compare_paths(left: str, right: str) -> int:
    left_key = natural_key(left)
    right_key = natural_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def sort_paths(paths: Iterable[str]) -> list[str]:
    return sorted(paths, key=natural_key)
