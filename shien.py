#!/usr/bin/env python3
"""
shien - show time shift of OFLS
Command-line interface for looking up the shift schedule by day or week.
"""

import argparse
import sys
from datetime import date
from typing import Callable, Optional, Union

from date_resolver import InvalidArgument, resolve_day, resolve_week
from sheet_source import SheetConfig, SheetFetchError, load_rows
from shift_formatter import ShiftFormatter
from shift_loader import build_shift_table
from shift_models import ShiftTable


__version__ = '0.0.1'


class ShiftViewer:
    """Answers day and week questions against a loaded ShiftTable."""

    def __init__(self, table: ShiftTable, today: Union[date, Callable[[], date], None] = None,
                 formatter: Optional[ShiftFormatter] = None):
        """
        Initialize the viewer.

        Args:
            table: Schedule loaded from the sheet
            today: Fixed reference date, or a callable returning it (default: date.today)
            formatter: Output formatter (default: ShiftFormatter())
        """
        self.table = table
        self.formatter = formatter or ShiftFormatter()
        if today is None:
            self._today = date.today
        elif isinstance(today, date):
            self._today = lambda: today
        else:
            self._today = today

    def today(self) -> str:
        return self.day('')

    def day(self, arg: str) -> str:
        """Schedule of one day as text, or the invalid-argument message."""
        try:
            key = resolve_day(arg, self._today())
        except InvalidArgument as err:
            return str(err)
        return self.formatter.format_day(self.table.get(key))

    def week(self, arg: str) -> str:
        """Schedule of a Monday-Friday week as text, or the invalid-argument message."""
        try:
            days = resolve_week(arg, self._today())
        except InvalidArgument as err:
            return str(err)
        return self.formatter.format_week([self.table.on(day) for day in days])

    def week_table(self, arg: str) -> str:
        """Schedule of a Monday-Friday week as a grid, or the invalid-argument message."""
        try:
            days = resolve_week(arg, self._today())
        except InvalidArgument as err:
            return str(err)
        return self.formatter.format_week_table([self.table.on(day) for day in days])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='shien',
        description='show time shift of OFLS',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Today's shift
  shien

  # Shift on May 22, and three days from now
  shien d 5/22
  shien d 3

  # This week, the week containing 5/22, and next week
  shien w
  shien w 5/22
  shien w 1

  # Next week as a table
  shien t 1

Environment Variables:
  OFLS_KEY         - Required. Spreadsheet document id.
  OFLS_GID         - Required. Id of the schedule tab.
  OFLS_TIMEOUT     - Optional. Download timeout in seconds (default: 30).
  OFLS_CREDENTIALS - Optional. Service account JSON; read through the Sheets API.

  Set in .env file or with: export OFLS_KEY='your-spreadsheet-id'
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.set_defaults(handler=lambda viewer, day: viewer.today(), day='')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    date_parser = subparsers.add_parser('date', aliases=['d'],
                                        help='show date shift ex) shien d 5/22; shien d 3;')
    date_parser.add_argument('day', nargs='?', default='',
                             help='M/D or day offset from today (default: today)')
    date_parser.set_defaults(handler=lambda viewer, day: viewer.day(day))

    week_parser = subparsers.add_parser('week', aliases=['w'],
                                        help='show week shift ex) shien w 5/22; shien w 1;')
    week_parser.add_argument('day', nargs='?', default='',
                             help='M/D in the week or week offset from this week (default: this week)')
    week_parser.set_defaults(handler=lambda viewer, day: viewer.week(day))

    table_parser = subparsers.add_parser('table', aliases=['t'],
                                         help='show week shift as a table ex) shien t 5/22; shien t 1;')
    table_parser.add_argument('day', nargs='?', default='',
                              help='M/D in the week or week offset from this week (default: this week)')
    table_parser.set_defaults(handler=lambda viewer, day: viewer.week_table(day))

    return parser


def main(argv=None) -> int:
    """Main entry point for command-line interface."""
    parser = build_parser()
    # Only the first argument after a command counts, even one argparse takes for an option
    args, extra = parser.parse_known_args(argv)
    if args.command is None and extra:
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    day = args.day or (extra[0] if extra else '')

    try:
        config = SheetConfig.from_env()
        table = build_shift_table(load_rows(config))
    except EnvironmentError as e:
        print(f"Environment Error: {e}", file=sys.stderr)
        return 1
    except SheetFetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    viewer = ShiftViewer(table)
    print(args.handler(viewer, day))
    return 0


if __name__ == "__main__":
    sys.exit(main())
