#!/usr/bin/env python3
"""
Tests for the shien command line and the ShiftViewer it drives.
"""

from datetime import date, timedelta

import pytest

import shien
from conftest import make_row
from date_resolver import INVALID_ARGUMENT_MESSAGE
from sheet_source import SheetConfig, SheetFetchError
from shift_formatter import ShiftFormatter
from shift_loader import build_shift_table
from shift_models import day_key


# 2024-05-22 is a Wednesday
WEDNESDAY = date(2024, 5, 22)


def rows_around(today, days=10):
    """One row per day from a week before today, each slot naming the day."""
    rows = []
    for offset in range(-days, days + 1):
        day = today + timedelta(days=offset)
        rows.append(make_row(f"{day_key(day)}({day:%a})", [f"p{day.day}"] * 25))
    return rows


@pytest.fixture
def viewer():
    return shien.ShiftViewer(build_shift_table(rows_around(WEDNESDAY)), today=WEDNESDAY)


class TestShiftViewer:

    def test_today(self, viewer):
        assert viewer.today().startswith("5/22(Wed)\n1st : p22\n")

    def test_day_by_offset_and_date(self, viewer):
        assert viewer.day("1").startswith("5/23(Thu)\n")
        assert viewer.day("-2").startswith("5/20(Mon)\n")
        assert viewer.day("5/24").startswith("5/24(Fri)\n")

    def test_unknown_day_is_blank(self, viewer):
        assert viewer.day("12/25") == ShiftFormatter().format_day(None)
        assert viewer.day("100") == ShiftFormatter().format_day(None)

    def test_invalid_argument_message(self, viewer):
        assert viewer.day("abc") == INVALID_ARGUMENT_MESSAGE
        assert viewer.week("abc") == INVALID_ARGUMENT_MESSAGE
        assert viewer.week_table("abc") == INVALID_ARGUMENT_MESSAGE

    def test_out_of_range_offset_message(self, viewer):
        assert viewer.day("3000000") == INVALID_ARGUMENT_MESSAGE
        assert viewer.week("-500000") == INVALID_ARGUMENT_MESSAGE
        assert viewer.week_table("500000") == INVALID_ARGUMENT_MESSAGE

    def test_week(self, viewer):
        blocks = viewer.week("").split("\n\n")

        assert [block.split("\n")[0] for block in blocks] == [
            "5/20(Mon)", "5/21(Tue)", "5/22(Wed)", "5/23(Thu)", "5/24(Fri)",
        ]

    def test_weeks_outside_sheet_are_blank(self, viewer):
        assert viewer.week("1").split("\n\n")[0].startswith("5/27(Mon)\n")

        blocks = viewer.week("2").split("\n\n")

        assert len(blocks) == 5
        assert set(blocks) == {ShiftFormatter().format_day(None)}

    def test_week_table(self, viewer):
        lines = viewer.week_table("5/22").split("\n")

        assert len(lines) == 9
        assert "5/20(Mon)" in lines[3]
        assert "5/24(Fri)" in lines[7]

    def test_today_callable(self):
        days = iter([WEDNESDAY, WEDNESDAY + timedelta(days=1)])
        viewer = shien.ShiftViewer(build_shift_table(rows_around(WEDNESDAY)), today=lambda: next(days))

        assert viewer.today().startswith("5/22(Wed)")
        assert viewer.today().startswith("5/23(Thu)")


class TestMain:

    @pytest.fixture
    def sheet(self, monkeypatch):
        """Serve rows around the real today instead of the network."""
        loads = []

        def fake_load_rows(config):
            loads.append(config)
            return rows_around(date.today())

        monkeypatch.setattr(shien.SheetConfig, "from_env",
                            classmethod(lambda cls: SheetConfig(key="k", gid="0")))
        monkeypatch.setattr(shien, "load_rows", fake_load_rows)
        return loads

    def test_default_is_today(self, sheet, capsys):
        assert shien.main([]) == 0

        out = capsys.readouterr().out
        assert out.startswith(day_key(date.today()) + "(")
        assert len(sheet) == 1

    @pytest.mark.parametrize("argv", [["date", "1"], ["d", "1"]])
    def test_date_command(self, sheet, capsys, argv):
        assert shien.main(argv) == 0

        tomorrow = date.today() + timedelta(days=1)
        assert capsys.readouterr().out.startswith(day_key(tomorrow) + "(")

    @pytest.mark.parametrize("command", ["week", "w"])
    def test_week_command(self, sheet, capsys, command):
        assert shien.main([command]) == 0

        assert capsys.readouterr().out.count("\n1st : ") == 5

    @pytest.mark.parametrize("command", ["table", "t"])
    def test_table_command(self, sheet, capsys, command):
        assert shien.main([command, "0"]) == 0

        out = capsys.readouterr().out
        assert "| Date " in out
        assert out.count("\n") == 9

    def test_invalid_argument_exits_normally(self, sheet, capsys):
        assert shien.main(["d", "abc"]) == 0

        assert capsys.readouterr().out == INVALID_ARGUMENT_MESSAGE + "\n"

    def test_missing_configuration_is_fatal(self, monkeypatch, capsys):
        def missing(cls):
            raise EnvironmentError("OFLS_KEY environment variable is not set.")

        monkeypatch.setattr(shien.SheetConfig, "from_env", classmethod(missing))

        assert shien.main(["d"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "OFLS_KEY" in captured.err

    def test_fetch_failure_is_fatal(self, sheet, monkeypatch, capsys):
        def broken(config):
            raise SheetFetchError("Could not download schedule: 404 Client Error")

        monkeypatch.setattr(shien, "load_rows", broken)

        assert shien.main(["w"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "404" in captured.err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            shien.main(["--version"])

        assert excinfo.value.code == 0
        assert "0.0.1" in capsys.readouterr().out

    def test_bad_credentials_file_is_fatal(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "creds.json"
        path.write_text('{"type": "service_account"}')
        config = SheetConfig(key="k", gid="0", credentials_path=str(path))
        monkeypatch.setattr(shien.SheetConfig, "from_env", classmethod(lambda cls: config))

        assert shien.main(["d"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Invalid service account credentials" in captured.err

    @pytest.mark.parametrize("argv", [["d", "-abc"], ["w", "--soon"], ["t", "-x"]])
    def test_option_like_argument_is_invalid(self, sheet, capsys, argv):
        assert shien.main(argv) == 0

        assert capsys.readouterr().out == INVALID_ARGUMENT_MESSAGE + "\n"

    def test_negative_offset_is_a_day(self, sheet, capsys):
        assert shien.main(["d", "-1"]) == 0

        yesterday = date.today() - timedelta(days=1)
        assert capsys.readouterr().out.startswith(day_key(yesterday) + "(")

    def test_only_first_argument_counts(self, sheet, capsys):
        assert shien.main(["d", "1", "2"]) == 0

        tomorrow = date.today() + timedelta(days=1)
        assert capsys.readouterr().out.startswith(day_key(tomorrow) + "(")

    def test_unknown_option_without_command(self, sheet):
        with pytest.raises(SystemExit) as excinfo:
            shien.main(["-abc"])

        assert excinfo.value.code == 2
