"""
Number-aware name ordering tests
"""

import itertools
from functools import cmp_to_key

from bluetelemetry.utils.name_sort import (
    compare_names,
    name_sort_key,
    sorted_names,
    split_numeric_suffix,
)

NAMES = [
    "Function9", "Function8", "Function10", "Function2", "Function",
    "Servo 2", "Servo 10", "Servo 1", "Servo packet 1-16", "Servo packet 17-32",
    "A", "A1", "B", "Temp-5", "Temp5", "Temp+3",
]


class TestSplitNumericSuffix:
    """Test suffix extraction."""

    def test_plain_suffix(self):
        """Digits at the end."""
        assert split_numeric_suffix("Function10") == ("Function", 10)
        assert split_numeric_suffix("Servo 2") == ("Servo ", 2)

    def test_signed_suffix(self):
        """A sign in front of the digits belongs to the number."""
        assert split_numeric_suffix("Temp-5") == ("Temp", -5)
        assert split_numeric_suffix("Servo packet 1-16") == ("Servo packet 1", -16)

    def test_no_suffix(self):
        """Names without a trailing numeral."""
        assert split_numeric_suffix("Tx Voltage") == ("Tx Voltage", None)
        assert split_numeric_suffix("") == ("", None)


class TestOrdering:
    """Test the resulting order."""

    def test_function_names(self):
        """Indices compare numerically."""
        names = ["Function9", "Function8", "Function10", "Function2"]
        assert sorted_names(names) == ["Function2", "Function8", "Function9", "Function10"]

    def test_mixed(self):
        """Names without an index sort before indexed names with the same prefix."""
        assert sorted_names(["B", "A1", "A"]) == ["A", "A1", "B"]

    def test_absolute_value(self):
        """Negative suffixes compare by magnitude."""
        assert sorted_names(["Temp5", "Temp-5", "Temp+3"]) == ["Temp+3", "Temp-5", "Temp5"]

    def test_compare_names(self):
        """Three-way comparison."""
        assert compare_names("Servo 2", "Servo 10") == -1
        assert compare_names("Servo 10", "Servo 2") == 1
        assert compare_names("Servo 2", "Servo 2") == 0

    def test_comparator_matches_key(self):
        """Comparator and key produce the same order."""
        assert sorted(NAMES, key=cmp_to_key(compare_names)) == sorted_names(NAMES)

    def test_strict_weak_ordering(self):
        """Irreflexive, antisymmetric and transitive over a sample."""
        for a in NAMES:
            assert compare_names(a, a) == 0
        for a, b in itertools.permutations(NAMES, 2):
            assert compare_names(a, b) == -compare_names(b, a)
        for a, b, c in itertools.permutations(NAMES, 3):
            if compare_names(a, b) < 0 and compare_names(b, c) < 0:
                assert compare_names(a, c) < 0

    def test_key_shape(self):
        """Keys carry prefix, magnitude and the full name."""
        assert name_sort_key("Gyro 3") == ("Gyro ", 3, "Gyro 3")
        assert name_sort_key("Gyro") == ("Gyro", -1, "Gyro")
