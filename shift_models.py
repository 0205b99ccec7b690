#!/usr/bin/env python3
"""
Shift Data Models
Data classes for the OFLS shift schedule.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class SlotSpec:
    """Where one slot of a Day Record comes from in a source row."""
    name: str
    label: str       # label used by the single-day view
    start: int
    stop: int
    separator: str = ','
    strip: bool = True
    header: Optional[str] = None  # column title in the table view, None = not shown


# Positions are relative to the fields after the date column.
SLOT_SPECS: Tuple[SlotSpec, ...] = (
    SlotSpec('first', '1st', 0, 1, separator='，', header='1st'),
    SlotSpec('second', '2nd', 2, 3, header='2nd'),
    SlotSpec('lunch', 'lun', 4, 6, header='lunch'),
    SlotSpec('third', '3rd', 7, 9, header='3rd'),
    SlotSpec('fourth', '4th', 10, 12, header='4th'),
    SlotSpec('fifth', '5th', 13, 15, header='5th'),
    SlotSpec('night', 'nig', 16, 21, header='night'),
    SlotSpec('mur', '-----\nmur', 22, 23, strip=False),
    SlotSpec('hig', 'hig', 23, 24, strip=False),
    SlotSpec('etc', 'etc', 24, 25, strip=False),
)

SLOT_COUNT = len(SLOT_SPECS)
MIN_SLOT_FIELDS = max(spec.stop for spec in SLOT_SPECS)


@dataclass(frozen=True)
class DayRecord:
    """One calendar day's shift schedule."""
    date: str
    slots: Tuple[str, ...] = field(default=('',) * SLOT_COUNT)

    def __post_init__(self):
        if len(self.slots) != SLOT_COUNT:
            raise ValueError(f"DayRecord needs {SLOT_COUNT} slots, got {len(self.slots)}")

    @classmethod
    def empty(cls) -> 'DayRecord':
        """Blank record shown for a day the sheet has no row for."""
        return cls(date='')

    def slot(self, name: str) -> str:
        """Return a slot by its SlotSpec name."""
        for spec, value in zip(SLOT_SPECS, self.slots):
            if spec.name == name:
                return value
        raise KeyError(name)


def day_key(day: date) -> str:
    """Format a date as the table key "M/D" (no year, no padding)."""
    return f"{day.month}/{day.day}"


class ShiftTable:
    """Read-only mapping of day key ("M/D") to DayRecord."""

    def __init__(self, records: Optional[Dict[str, DayRecord]] = None):
        self._records = dict(records or {})

    def get(self, key: str) -> Optional[DayRecord]:
        return self._records.get(key)

    def on(self, day: date) -> Optional[DayRecord]:
        """Look up the record for a concrete date; the year is ignored."""
        return self._records.get(day_key(day))

    def at_offset(self, today: date, offset: int) -> Optional[DayRecord]:
        """Look up the record `offset` days from `today`."""
        return self.on(today + timedelta(days=offset))

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self):
        return f"ShiftTable(days={len(self._records)})"
