from datetime import datetime

import pytest

from scoresheet.exceptions import (
    InvalidConfigurationException,
    LinkageException,
    ParseException,
    ParticipantNotFoundException,
)
from scoresheet.models import FixAction, ParticipantChanged, SubmissionStatus
from scoresheet.session import ScoresheetSession

from conftest import GUIDELINE, TEAMS_LIST, make_export, row


def test_from_guideline_allocates_chest_numbers(session):
    assert session.config.name == "Athletics Carnival"
    assert {i.full_name: i.chest_number for i in session.roster.individuals} == {
        "Jane Doe": 301,
        "Amy Lee": 302,
        "John Smith": 401,
        "Bob Ray": 601,
    }


def test_invalid_config_rejected():
    guideline = dict(GUIDELINE, config={"match_threshold": -1})
    with pytest.raises(InvalidConfigurationException):
        ScoresheetSession.from_guideline(guideline, TEAMS_LIST)


def test_end_to_end_reconciliation(session):
    events = []
    session.notifier.subscribe(events.append, ParticipantChanged)

    assigned, mismatch = session.import_submissions(
        make_export(
            row("Jane Doe", when="01/03/2024 09:15:00", solo="ART"),
            row("Jane D0e", when="02/03/2024 09:15:00", solo="Poetry Recital"),
        )
    )

    jane = session.roster.find_participant(301)
    assert assigned.status is SubmissionStatus.ASSIGNED
    assert jane.submission_timestamp == datetime(2024, 3, 1, 9, 15)
    assert [item.code for item in jane.joined_items] == ["ART"]

    assert mismatch.status is SubmissionStatus.MISMATCH
    assert mismatch.match_score > 0.8
    assert events == [ParticipantChanged(301, "submission applied (automatic)")]

    assert session.submissions == (assigned, mismatch)
    assert session.pending_review() == [mismatch]


def test_parse_error_leaves_roster_untouched(session):
    export = make_export(row("Jane Doe"), row("Amy Lee", year="?"))

    with pytest.raises(ParseException) as excinfo:
        session.import_submissions(export)

    assert excinfo.value.row_number == 3
    assert not session.roster.find_participant(301).is_form_submitted
    assert session.submissions == ()


def test_operator_fix_through_session(session):
    (fuzzy,) = session.import_submissions(make_export(row("Amy Leigh", solo="ART")))

    assert session.suggest_fix(fuzzy, 302).action is FixAction.ASSIGN
    assert session.apply_fix(fuzzy, 302) is SubmissionStatus.ASSIGNED
    assert session.pending_review() == []

    with pytest.raises(ParticipantNotFoundException):
        session.apply_fix(fuzzy, 999)


def test_scores_and_standings(session):
    session.import_submissions(
        make_export(
            row("Jane Doe", solo="ART"),
            row("John Smith", team="Blue", solo="ART"),
        )
    )

    session.add_score("ART", 301, "4+5, 9")
    session.add_score("ART", 401, [5, 5])

    assert [(s.name, s.points) for s in session.standings()] == [
        ("Red", 10.0),
        ("Blue", 8.0),
    ]

    session.clear_score("ART", 301)
    assert [(s.name, s.points) for s in session.standings()] == [
        ("Blue", 10.0),
        ("Red", 0.0),
    ]

    with pytest.raises(LinkageException):
        session.add_score("Juggling", 301, [9])


def test_to_dict(session):
    session.import_submissions(make_export(row("Jane Doe", solo="ART")))
    session.add_score("ART", 301, [9])

    data = session.to_dict()

    assert data["config"]["name"] == "Athletics Carnival"
    assert data["submissions"][0]["status"] == "Assigned"
    assert data["submissions"][0]["match_chest_number"] == 301
    assert data["scores"]["ART"][0]["place"] == 1
    assert data["standings"][0] == {"place": 1, "name": "Red", "points": 10.0}
