from __future__ import annotations

import pytest

from BundleUpload.backend.app.core.duplicates import find_duplicates
from BundleUpload.backend.app.core.validation import is_valid_identifier


def test_valid_identifier_has_leading_zero_and_ten_digits():
    assert is_valid_identifier("0554739033")


@pytest.mark.parametrize(
    "identifier",
    [
        "554739033",
        "05547390330",
        "1554739033",
        "055473903a",
        "0554 739033",
        "+233554739033",
        "",
        "０５５４７３９０３３",
    ],
)
def test_invalid_identifiers(identifier):
    assert not is_valid_identifier(identifier)


def test_find_duplicates_reports_each_repeat_once_in_order():
    identifiers = ["a", "b", "a", "c", "b", "a", "c"]

    assert find_duplicates(identifiers) == ["a", "b", "c"]


def test_find_duplicates_without_repeats():
    assert find_duplicates(["0201234567", "0554739033"]) == []
    assert find_duplicates([]) == []


def test_find_duplicates_accepts_generators():
    assert find_duplicates(x for x in ["x", "y", "y"]) == ["y"]
