from datetime import datetime

import pytest

from scoresheet.models import (
    CompetitionItem,
    ItemKind,
    Level,
    ScoresheetConfig,
    Team,
)
from scoresheet.roster import RosterIndex
from scoresheet.session import ScoresheetSession

SUBMISSION_HEADER = [
    "Timestamp",
    "Email Address",
    "Full Name",
    "Year Level",
    "Team",
    "Solo Items",
    "Group Items",
]

GUIDELINE = {
    "config": {"name": "Athletics Carnival", "match_workers": 2},
    "teams": [{"name": "Red", "colour": "#ff0000"}, {"name": "Blue"}],
    "levels": [
        {"code": "JR", "name": "Junior", "lower_year": 5, "upper_year": 8},
        {"code": "IN", "name": "Intermediate", "lower_year": 9, "upper_year": 10},
        {"code": "SR", "name": "Senior", "lower_year": 11, "upper_year": 12},
    ],
    "items": [
        {"code": "ART", "kind": "solo"},
        {"code": "Poetry Recital/IN", "kind": "solo", "is_on_stage": True},
        {"code": "Speech/JR", "kind": "solo", "is_on_stage": True},
        {"code": "Group Song/IN", "kind": "group", "duration_minutes": 5},
    ],
}

TEAMS_LIST = [
    "Jane Doe\tRed\t9",
    "Amy Lee\t\t",
    "John Smith\tBlue\t9",
    "Bob Ray\t\t12",
]


def make_export(*rows):
    """Build a tab separated submissions export with the standard header."""
    lines = ["\t".join(SUBMISSION_HEADER)]
    for row in rows:
        lines.append("\t".join(row))
    return "\n".join(lines) + "\n"


def row(name, year="9", team="Red", when="01/03/2024 09:15:00", solo="ART", group=""):
    return [when, f"{name.split()[0]}@School.edu", name, year, team, solo, group]


@pytest.fixture
def config():
    return ScoresheetConfig(name="Test Carnival", match_workers=2)


@pytest.fixture
def teams():
    return [Team("Red"), Team("Blue")]


@pytest.fixture
def levels():
    return [
        Level("JR", "Junior", 5, 8),
        Level("IN", "Intermediate", 9, 10),
        Level("SR", "Senior", 11, 12),
    ]


@pytest.fixture
def items():
    return [
        CompetitionItem("ART"),
        CompetitionItem("Poetry Recital/IN", is_on_stage=True),
        CompetitionItem("Speech/JR", is_on_stage=True),
        CompetitionItem("Group Song/IN", kind=ItemKind.GROUP),
    ]


@pytest.fixture
def roster(teams, levels, items, config):
    roster = RosterIndex(teams, levels, items, config=config)
    roster.add_individual("Jane Doe", "Red", 9)
    roster.add_individual("Amy Lee", "Red", 9)
    roster.add_individual("John Smith", "Blue", 9)
    roster.add_individual("Bob Ray", "Blue", 12)
    return roster


@pytest.fixture
def session():
    return ScoresheetSession.from_guideline(GUIDELINE, TEAMS_LIST)


@pytest.fixture
def t1():
    return datetime(2024, 3, 1, 9, 15)
