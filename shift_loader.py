#!/usr/bin/env python3
"""
Shift Loader
Turns the rows of the OFLS schedule sheet into a ShiftTable.
"""

import re
import sys
from typing import Dict, Iterable, List, Sequence

from shift_models import DayRecord, MIN_SLOT_FIELDS, SLOT_SPECS, ShiftTable


DAY_KEY_PATTERN = re.compile(r'(\d+)/(\d+)')

# Stray punctuation left at the end of merged cells in the sheet.
TRAILING_JUNK = '/,*$'


def normalize_day_key(text: str) -> str:
    """
    Find the first "M/D" in text and return it without zero padding.

    Args:
        text: Any string, e.g. "5/22(Wed)" or "03/09"

    Returns:
        Day key like "5/22", or "" when text contains no month/day
    """
    match = DAY_KEY_PATTERN.search(text)
    if not match:
        return ''
    return f"{int(match.group(1))}/{int(match.group(2))}"


def extract_slots(fields: Sequence[str]) -> tuple:
    """
    Build the 10 slots of a day from the fields that follow the date column.

    Args:
        fields: At least MIN_SLOT_FIELDS text fields

    Returns:
        Tuple of slot strings in SLOT_SPECS order

    Raises:
        IndexError: If fields is too short for the slot layout
    """
    if len(fields) < MIN_SLOT_FIELDS:
        raise IndexError(f"expected at least {MIN_SLOT_FIELDS} fields, got {len(fields)}")

    slots = []
    for spec in SLOT_SPECS:
        value = spec.separator.join(fields[spec.start:spec.stop])
        if spec.strip:
            value = value.rstrip(TRAILING_JUNK)
        slots.append(value)
    return tuple(slots)


def build_shift_table(rows: Iterable[List[str]], warn=True) -> ShiftTable:
    """
    Build a ShiftTable from sheet rows.

    Only rows whose first cell contains a month/day are used. Rows that
    have a date but are too short for the slot layout are skipped.

    Args:
        rows: Rows of text fields, first field is the date label
        warn: Print a warning to stderr for each skipped row

    Returns:
        ShiftTable keyed by "M/D"
    """
    records: Dict[str, DayRecord] = {}
    skipped = 0

    for line_number, row in enumerate(rows, start=1):
        if not row:
            continue
        key = normalize_day_key(row[0])
        if not key:
            continue

        try:
            slots = extract_slots(row[1:])
        except IndexError as err:
            skipped += 1
            if warn:
                print(f"Warning: skipping row {line_number} ({row[0]!r}): {err}", file=sys.stderr)
            continue

        records[key] = DayRecord(date=row[0], slots=slots)

    if skipped and warn:
        print(f"Warning: {skipped} dated row(s) were too short and skipped", file=sys.stderr)

    return ShiftTable(records)
