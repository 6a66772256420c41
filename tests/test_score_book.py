import pytest

from scoresheet.exceptions import InvalidScoreException, ScoreNotFoundException
from scoresheet.models import ScoreChanged
from scoresheet.scoring import ScoreBook


@pytest.fixture
def book(roster):
    return ScoreBook(roster)


@pytest.fixture
def art_entrants(roster):
    art = roster.find_item("ART")
    people = [roster.find_participant(n) for n in (301, 302, 401)]
    for person in people:
        roster.join_item(person, art)
    return art, people


def _places(item):
    return [item.scores[n].place for n in sorted(item.scores)]


def test_ties_share_a_place_and_consume_the_next(book, art_entrants):
    art, (jane, amy, john) = art_entrants
    book.add_score(art, jane, [9])
    book.add_score(art, amy, [9])
    book.add_score(art, john, [7])

    assert [art.scores[p.chest_number].place for p in (jane, amy, john)] == [1, 1, 3]
    assert [art.scores[p.chest_number].points for p in (jane, amy, john)] == [
        10.0,
        10.0,
        5.0,
    ]


def test_distinct_averages_rank_in_order(book, art_entrants):
    art, (jane, amy, john) = art_entrants
    book.add_score(art, amy, [4])
    book.add_score(art, john, [3])
    book.add_score(art, jane, [5])

    ranked = book.recalculate_winners(art)

    assert [s.average_marks for s in ranked] == [5, 4, 3]
    assert [s.place for s in ranked] == [1, 2, 3]


def test_places_past_the_schedule_earn_nothing(roster, book):
    art = roster.find_item("ART")
    for number, mark in zip((301, 302, 401, 601), (9, 8, 7, 6)):
        person = roster.find_participant(number)
        roster.join_item(person, art)
        book.add_score(art, person, [mark])

    assert art.scores[601].place == 4
    assert art.scores[601].points == 0.0


def test_readding_replaces_the_score(book, art_entrants):
    art, (jane, amy, _) = art_entrants
    book.add_score(art, jane, [5, 6])
    book.add_score(art, amy, [7])
    replacement = book.add_score(art, jane, [9, 9], author="judge")

    assert len(art.scores) == 2
    assert book.get_score(art, jane) is replacement
    assert replacement.average_marks == 9
    assert _places(art) == [1, 2]


def test_clear_score(book, art_entrants):
    art, (jane, amy, _) = art_entrants
    book.add_score(art, jane, [9])
    book.add_score(art, amy, [8])

    event = book.clear_score(art, jane)

    assert event == ScoreChanged("ART", 301, cleared=True)
    assert book.get_score(art, jane) is None
    assert art.scores[302].place == 1
    with pytest.raises(ScoreNotFoundException):
        book.clear_score(art, jane)


def test_average_uses_configured_precision(roster, art_entrants):
    roster.config.marks_precision = 1
    art, (jane, _, _) = art_entrants
    score = ScoreBook(roster).add_score(art, jane, [7, 8, 8])
    assert score.average_marks == 7.7


def test_invalid_entries(roster, book, art_entrants):
    art, (jane, _, _) = art_entrants
    bob = roster.find_participant(601)

    with pytest.raises(InvalidScoreException):
        book.add_score(art, jane, [])
    with pytest.raises(InvalidScoreException):
        book.add_score(art, bob, [9])

    song = roster.find_item("Group Song/IN")
    with pytest.raises(InvalidScoreException):
        book.add_score(song, jane, [9])

    group = roster.create_group(song, [jane])
    with pytest.raises(InvalidScoreException):
        book.add_score(art, group, [9])
    assert book.add_score(song, group, [9]).points == 20.0


def test_add_score_emits_event(roster, book, art_entrants):
    art, (jane, _, _) = art_entrants
    events = []
    roster.notifier.subscribe(events.append, ScoreChanged)

    book.add_score(art, jane, [9])

    assert events == [ScoreChanged("ART", 301)]


def test_weighted_scoring(roster, art_entrants):
    roster.config.weighted_scoring = True
    roster.config.individual_weight = 1.5
    roster.config.group_weight = 2.0
    book = ScoreBook(roster)
    art, (jane, amy, _) = art_entrants
    song = roster.find_item("Group Song/IN")
    group = roster.create_group(song, [jane, amy])

    assert book.add_score(art, jane, [8, 9]).points == 12.75
    assert book.add_score(song, group, [7]).points == 14.0


def test_group_points_go_to_the_group_team_only(roster, book):
    song = roster.find_item("Group Song/IN")
    jane, amy = roster.find_participant(301), roster.find_participant(302)
    group = roster.create_group(song, [jane, amy])
    book.add_score(song, group, [9])

    assert book.item_team_points(song) == {"Red": 20.0}
    assert book.scores_for(group) == {"Group Song/IN": song.scores[group.chest_number]}
    assert book.scores_for(jane) == {}
