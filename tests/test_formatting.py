"""Tests for ``engine.formatting`` helpers."""

from __future__ import annotations

import pytest

from engine.formatting import bold_latex, math_latex, paste_nicely, sub_latex


@pytest.mark.parametrize(
    "items, expected",
    [
        ([], ""),
        (["CC"], "CC"),
        (["HG", "PRD"], "HG and PRD"),
        (("HG", "PRD", "CC"), "HG, PRD and CC"),
        ([1951, 2018], "1951 and 2018"),
    ],
)
def test_paste_nicely(items, expected):
    assert paste_nicely(items) == expected


def test_paste_nicely_custom_separators():
    assert paste_nicely(["A27", "A2W", "All"], initial="; ", conjunction=" or ") == "A27; A2W or All"


def test_latex_helpers():
    assert bold_latex("Region") == r"\textbf{Region}"
    assert math_latex("q_1") == "$q_1$"
    assert sub_latex("q1") == r"\mli{q}_{1}"
    assert sub_latex("q1 and q2") == r"\mli{q}_{1} and \mli{q}_{2}"
    assert sub_latex("SoG") == "SoG"
