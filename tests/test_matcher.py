from datetime import datetime

from scoresheet.constants import DISTANCE_EXCEEDED
from scoresheet.formatter import Matcher
from scoresheet.models import Individual, Submission


def _individuals(*names):
    return [Individual(name, 9) for name in names]


def _submission(row_number, name):
    return Submission(
        row_number=row_number,
        raw_fields=[],
        timestamp=datetime(2024, 3, 1),
        claimed_name=name,
        search_key=name.casefold(),
        claimed_year_level=9,
    )


def test_exact_match_short_circuits():
    people = _individuals("Jane Dow", "Jane Doe", "JANE DOE")
    result = Matcher().find_best_match("  jane   DOE", people)
    assert result.candidate is people[1]
    assert result.distance == 0
    assert result.score == 1.0


def test_closest_within_threshold():
    people = _individuals("John Smith", "Jane Doe")
    result = Matcher().find_best_match("Jane D0e", people)
    assert result.candidate is people[1]
    assert result.distance == 1
    assert result.score == 0.875


def test_first_minimum_wins_ties():
    people = _individuals("Jane Dox", "Jane Doy")
    assert Matcher().find_best_match("Jane Doe", people).candidate is people[0]
    assert Matcher().find_best_match("Jane Doe", people[::-1]).candidate is people[1]


def test_nothing_within_threshold():
    result = Matcher(threshold=2).find_best_match("Bartholomew", _individuals("Jane Doe"))
    assert result.candidate is None
    assert result.distance == DISTANCE_EXCEEDED
    assert result.score == 0.0


def test_match_all_keeps_order_and_fills_submissions():
    people = _individuals("Jane Doe", "John Smith", "Amy Lee")
    submissions = [
        _submission(i + 2, name)
        for i, name in enumerate(["Amy Lee", "Jon Smith", "Nobody Atall", "Jane Doe"])
    ]

    matched = Matcher().match_all(submissions, people, max_workers=3)

    assert matched is submissions
    assert [s.row_number for s in matched] == [2, 3, 4, 5]
    assert [s.match_candidate for s in matched] == [people[2], people[1], None, people[0]]
    assert [s.match_distance for s in matched][:2] == [0, 1]


def test_match_all_single_worker():
    people = _individuals("Jane Doe")
    (submission,) = Matcher().match_all([_submission(2, "jane doe")], people, 1)
    assert submission.match_candidate is people[0]
