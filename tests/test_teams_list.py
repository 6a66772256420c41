import pytest

from scoresheet.exceptions import ParseException
from scoresheet.roster import parse_teams_list


def test_blank_cells_carry_forward():
    entries = parse_teams_list(
        [
            "Jane Doe\tRed\t9",
            "Amy Lee\t\t",
            "",
            "John Smith\tBlue\t",
            "Bob Ray\t\tYear 12\r\n",
        ]
    )
    assert [(e.full_name, e.team_name, e.year_level) for e in entries] == [
        ("Jane Doe", "Red", 9),
        ("Amy Lee", "Red", 9),
        ("John Smith", "Blue", 9),
        ("Bob Ray", "Blue", 12),
    ]
    assert entries[2].row_number == 4


def test_rows_without_a_name_only_set_defaults():
    entries = parse_teams_list(["\tGreen\t7", "Zoe Park"])
    assert len(entries) == 1
    assert entries[0].team_name == "Green"
    assert entries[0].year_level == 7


def test_bad_year_reports_row():
    with pytest.raises(ParseException) as excinfo:
        parse_teams_list(["Jane Doe\tRed\t9", "Amy Lee\tRed\tnine"])
    assert excinfo.value.row_number == 2
