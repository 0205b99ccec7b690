#!/usr/bin/env python3
"""
Shared fixtures for the shien test suite.
"""

import pytest


def make_row(date_label, fields=None):
    """A sheet row: the date column followed by 25 shift fields."""
    if fields is None:
        fields = [f"f{i}" for i in range(25)]
    return [date_label] + list(fields)


@pytest.fixture
def sample_fields():
    """The 25 fields after the date column; x/y/z mark the columns the slots skip."""
    return ["A", "x", "B", "y", "C", "D", "z", "E", "F", "G", "H", "I", "J",
            "K", "L", "M", "N", "O", "P", "Q", "R", "S", "T", "U", "V"]


@pytest.fixture
def sample_rows(sample_fields):
    return [
        ["", "1st", "", "2nd", "", "lunch"] + [""] * 20,
        make_row("5/20(Mon)", sample_fields),
        make_row("5/21(Tue)"),
        make_row("5/22(Wed)"),
        ["memo", "not a day"],
    ]
