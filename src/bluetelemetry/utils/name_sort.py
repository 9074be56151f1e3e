"""
Number-aware name ordering

Field names often end in an index ("Servo 2", "Servo 10"). Plain string
comparison puts "Servo 10" before "Servo 2"; the key below compares the
index numerically when the rest of the name matches.
"""

import re
from typing import Iterable, List, Optional, Tuple

_SUFFIX_RE = re.compile(r"([+-]?[0-9]+)$")


def split_numeric_suffix(name: str) -> Tuple[str, Optional[int]]:
    """
    Split a trailing signed decimal numeral off a name.

    Returns:
        (prefix, number) or (name, None) when the name has no numeral suffix
    """
    match = _SUFFIX_RE.search(name)
    if match is None:
        return name, None
    return name[:match.start()], int(match.group(1))


def name_sort_key(name: str) -> Tuple[str, int, str]:
    prefix, number = split_numeric_suffix(name)
    if number is None:
        return name, -1, name
    return prefix, abs(number), name


def compare_names(a: str, b: str) -> int:
    """Three-way comparison using name_sort_key (-1, 0 or 1)."""
    ka, kb = name_sort_key(a), name_sort_key(b)
    return (ka > kb) - (ka < kb)


def sorted_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=name_sort_key)
