from datetime import datetime

import pytest

from scoresheet.exceptions import ParseException
from scoresheet.formatter import SubmissionNormalizer, parse_timestamp
from scoresheet.models import ColumnRole

from conftest import SUBMISSION_HEADER, make_export, row


@pytest.fixture
def normalizer(roster):
    return SubmissionNormalizer(roster)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2024/03/01 9:15:00 AM GMT+10", datetime(2024, 2, 29, 23, 15)),
        ("2024/03/01 9:15:00 PM GMT-3:30", datetime(2024, 3, 2, 0, 45)),
        ("2024/03/01 9:15:00 PM", datetime(2024, 3, 1, 21, 15)),
        ("2024-03-01T09:15:00", datetime(2024, 3, 1, 9, 15)),
        ("2024-03-01T09:15:00+01:00", datetime(2024, 3, 1, 8, 15)),
        ("01/03/2024 09:15:00", datetime(2024, 3, 1, 9, 15)),
        ("01/03/2024 09:15", datetime(2024, 3, 1, 9, 15)),
    ],
)
def test_parse_timestamp(text, expected):
    assert parse_timestamp(text) == expected


@pytest.mark.parametrize("text", ["", "yesterday", "2024/13/45 9:00:00 AM"])
def test_parse_timestamp_rejects(text):
    with pytest.raises(ValueError):
        parse_timestamp(text)


def test_header_roles(normalizer):
    columns = normalizer.read_header("\t".join(SUBMISSION_HEADER + ["Comments"]))
    assert [c.role for c in columns] == [
        ColumnRole.TIMESTAMP,
        ColumnRole.EMAIL,
        ColumnRole.NAME,
        ColumnRole.YEAR,
        ColumnRole.TEAM,
        ColumnRole.SOLO_ITEMS,
        ColumnRole.GROUP_ITEMS,
        ColumnRole.IGNORE,
    ]


def test_missing_required_column(normalizer):
    with pytest.raises(ParseException) as excinfo:
        normalizer.parse("Timestamp\tFull Name\n")
    assert excinfo.value.row_number == 1
    assert "Year" in str(excinfo.value)


def test_empty_input(normalizer):
    with pytest.raises(ParseException):
        normalizer.parse("")


def test_parse_rows(normalizer, levels, teams):
    export = make_export(
        row("Jane Doe", solo="ART; Poetry Recital", group="Group Song"),
        row("John Smith", year="Year 9", team="Blue", solo="", group=""),
    )
    first, second = normalizer.parse(export)

    assert first.row_number == 2
    assert first.timestamp == datetime(2024, 3, 1, 9, 15)
    assert first.email == "jane@school.edu"
    assert first.claimed_name == "Jane Doe"
    assert first.search_key == "jane doe"
    assert first.claimed_year_level == 9
    assert first.claimed_level == levels[1]
    assert first.claimed_team == teams[0]
    assert first.solo_item_codes == ["ART", "Poetry Recital"]
    assert first.group_item_codes == ["Group Song"]
    assert first.details == ["AR", "PoRe/IN", "GrSo/IN"]

    assert second.claimed_team.name == "Blue"
    assert second.item_codes == []


def test_unknown_codes_marked_in_details(normalizer):
    (submission,) = normalizer.parse(make_export(row("Jane Doe", solo="Juggling")))
    assert submission.details == ["Juggling?"]


def test_blank_lines_skipped_but_counted(normalizer):
    export = make_export(row("Jane Doe")) + "\n" + "\t".join(row("Amy Lee")) + "\n"
    first, second = normalizer.parse(export)
    assert (first.row_number, second.row_number) == (2, 4)


def test_unknown_team_is_kept_as_claimed(normalizer):
    (submission,) = normalizer.parse(make_export(row("Jane Doe", team="Green")))
    assert submission.claimed_team is None
    assert submission.claimed_team_name == "Green"


def test_several_name_columns_are_joined(roster):
    export = "Timestamp\tFirst Name\tLast Name\tYear\n01/03/2024 09:15\tJane\tDoe\t9\n"
    (submission,) = SubmissionNormalizer(roster).parse(export)
    assert submission.claimed_name == "Jane Doe"


@pytest.mark.parametrize(
    "bad_row,reason",
    [
        (["01/03/2024 09:15:00", "x@y.com", "Jane Doe", "9"], "columns"),
        (row("Jane Doe", when="sometime"), "timestamp"),
        (row("Jane Doe", year="nine"), "Year"),
    ],
)
def test_malformed_row_aborts_with_row_number(normalizer, bad_row, reason):
    export = make_export(row("Amy Lee"), bad_row)
    with pytest.raises(ParseException) as excinfo:
        normalizer.parse(export)
    assert excinfo.value.row_number == 3
    assert reason.lower() in str(excinfo.value).lower()


def test_invalid_email_is_kept(normalizer):
    cells = row("Jane Doe")
    cells[1] = "Not An Email"
    (submission,) = normalizer.parse(make_export(cells))
    assert submission.email == "not an email"
