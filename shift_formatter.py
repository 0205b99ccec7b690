#!/usr/bin/env python3
"""
Shift Formatter
Renders DayRecords as labeled text or as a week grid.
"""

import unicodedata
from typing import List, Optional, Sequence

from shift_models import DayRecord, SLOT_SPECS


TABLE_SPECS = [spec for spec in SLOT_SPECS if spec.header]


def display_width(text: str) -> int:
    """Terminal columns taken by text; wide and full-width characters count as 2."""
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ('W', 'F') else 1
    return width


def pad(text: str, width: int, center: bool = False) -> str:
    gap = width - display_width(text)
    if center:
        left = gap // 2
        return ' ' * left + text + ' ' * (gap - left)
    return text + ' ' * gap


class ShiftFormatter:
    """Formats DayRecords for the terminal."""

    TABLE_HEADER = ['Date'] + [spec.header for spec in TABLE_SPECS]

    def format_day(self, record: Optional[DayRecord]) -> str:
        """
        Format one day as its date followed by one "label : names" line per slot.

        Args:
            record: The day's record, None when the sheet has no such day

        Returns:
            Multi-line text; a missing day renders with blank date and slots
        """
        if record is None:
            record = DayRecord.empty()

        lines = [record.date]
        for spec, names in zip(SLOT_SPECS, record.slots):
            lines.append(f"{spec.label} : {names}")
        return '\n'.join(lines)

    def format_week(self, records: Sequence[Optional[DayRecord]]) -> str:
        """Format several days, separated by a blank line."""
        return '\n\n'.join(self.format_day(record) for record in records)

    def table_rows(self, records: Sequence[Optional[DayRecord]]) -> List[List[str]]:
        """Build the table view rows: date plus the core shift slots."""
        rows = []
        for record in records:
            if record is None:
                record = DayRecord.empty()
            rows.append([record.date] + [record.slot(spec.name) for spec in TABLE_SPECS])
        return rows

    def format_week_table(self, records: Sequence[Optional[DayRecord]]) -> str:
        """
        Render days as a bordered grid with a Date column and the 7 core shifts.

        Example:
            +------+-----+
            | Date | 1st |
            +------+-----+
            | 5/22 | Ann |
            +------+-----+
        """
        return self.render_grid(self.TABLE_HEADER, self.table_rows(records))

    def render_grid(self, header: List[str], rows: List[List[str]]) -> str:
        # A cell may hold several lines; each logical row is as tall as its tallest cell
        split_rows = [[cell.split('\n') for cell in row] for row in rows]

        widths = [display_width(title) for title in header]
        for row in split_rows:
            for col_idx, cell_lines in enumerate(row):
                for line in cell_lines:
                    widths[col_idx] = max(widths[col_idx], display_width(line))

        border = '+' + '+'.join('-' * (w + 2) for w in widths) + '+'

        output_lines = [border]
        output_lines.append(
            '| ' + ' | '.join(pad(title, w, center=True) for title, w in zip(header, widths)) + ' |'
        )
        output_lines.append(border)

        for row in split_rows:
            height = max(len(cell_lines) for cell_lines in row)
            for line_idx in range(height):
                cells = []
                for cell_lines, w in zip(row, widths):
                    text = cell_lines[line_idx] if line_idx < len(cell_lines) else ''
                    cells.append(pad(text, w))
                output_lines.append('| ' + ' | '.join(cells) + ' |')

        output_lines.append(border)
        return '\n'.join(output_lines)
