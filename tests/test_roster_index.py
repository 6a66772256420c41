import pytest

from scoresheet.exceptions import (
    DuplicateChestNumberException,
    InvalidGroupException,
    LinkageException,
    ParticipantNotFoundException,
    RosterException,
)
from scoresheet.models import (
    CompetitionItem,
    Group,
    ItemKind,
    Level,
    ParticipantChanged,
    ScoresheetConfig,
    SubmissionStatus,
    Team,
)
from scoresheet.roster import RosterIndex
from scoresheet.session import ScoresheetSession

from conftest import GUIDELINE, make_export, row


def test_chest_numbers_follow_input_order(roster):
    numbers = {i.full_name: i.chest_number for i in roster.individuals}
    # Intermediate is level 1, Red team 0, Blue team 1, two teams
    assert numbers == {
        "Jane Doe": 301,
        "Amy Lee": 302,
        "John Smith": 401,
        "Bob Ray": 601,
    }


def test_small_buckets():
    config = ScoresheetConfig(chest_number_start=100, chest_number_capacity=50)
    roster = RosterIndex(
        [Team("Red"), Team("Blue")], [Level("JR", "Junior", 7, 8)], config=config
    )
    first = roster.add_individual("A One", "Red", 7)
    second = roster.add_individual("B Two", "red", 8)
    assert (first.chest_number, second.chest_number) == (101, 102)


def test_unknown_team_or_year_leaves_number_unassigned(roster):
    stray = roster.add_individual("Stray Student", "Green", 9)
    assert stray.chest_number == 0
    assert stray.team is None

    too_young = roster.add_individual("Tiny Tim", "Red", 2)
    assert too_young.chest_number == 0
    assert too_young.level is None
    assert too_young in roster.individuals


def test_duplicate_chest_number_rejected(roster):
    with pytest.raises(DuplicateChestNumberException):
        roster.add_individual("Copy Cat", "Red", 9, chest_number=301)


def test_lookups(roster, levels):
    assert roster.find_team(" red ").name == "Red"
    assert roster.find_team("") is None
    with pytest.raises(LinkageException):
        roster.require_team("Green")

    assert roster.level_for_year(9) == levels[1]
    assert roster.level_for_year(4) is None

    jane = roster.find_participant(301)
    assert jane.full_name == "Jane Doe"
    assert roster.find_by_search_key("JANE  doe") is jane
    with pytest.raises(ParticipantNotFoundException):
        roster.require_participant(999)


def test_first_matching_level_band_wins():
    overlapping = [Level("A", "A", 1, 10), Level("B", "B", 5, 12)]
    roster = RosterIndex([Team("Red")], overlapping)
    assert roster.level_for_year(7).code == "A"
    assert roster.level_for_year(11).code == "B"


def test_item_levels_resolved_from_code(roster, levels):
    assert roster.find_item("Poetry Recital/IN").level == levels[1]
    assert roster.find_item("ART").level is None
    assert roster.find_item("poetry recital/in") is roster.find_item("Poetry Recital/IN")


def test_resolve_item_code(roster, levels):
    intermediate, junior = levels[1], levels[0]

    assert roster.resolve_item_code("Poetry Recital", intermediate).code == (
        "Poetry Recital/IN"
    )
    assert roster.resolve_item_code("ART", intermediate).code == "ART"
    # Wrong level or wrong kind do not resolve
    assert roster.resolve_item_code("Poetry Recital", junior) is None
    assert roster.resolve_item_code("Poetry Recital/IN", junior) is None
    assert roster.resolve_item_code("Group Song", intermediate, ItemKind.SOLO) is None
    assert roster.resolve_item_code("Group Song", intermediate, ItemKind.GROUP)
    assert roster.resolve_item_code("Juggling", intermediate) is None


def test_join_and_unjoin(roster):
    jane = roster.find_participant(301)
    art = roster.find_item("ART")

    assert roster.join_item(jane, art)
    assert not roster.join_item(jane, art)
    assert jane in art.individuals and art in jane.joined_items

    roster.unjoin_all(jane)
    assert jane.joined_items == []
    assert jane not in art.individuals


def test_rename_emits_event(roster):
    events = []
    roster.notifier.subscribe(events.append)
    jane = roster.find_participant(301)

    event = roster.rename_individual(jane, "Jane  Doe-Smith")

    assert jane.search_key == "jane doe-smith"
    assert events == [event] == [ParticipantChanged(301, "renamed")]


def test_rename_rejects_blank_name(roster):
    jane = roster.find_participant(301)

    with pytest.raises(RosterException, match="Name cannot be empty"):
        roster.rename_individual(jane, "   ")
    assert jane.full_name == "Jane Doe"


class TestGroups:
    def test_create_group(self, roster):
        song = roster.find_item("Group Song/IN")
        jane, amy = roster.find_participant(301), roster.find_participant(302)

        group = roster.create_group(song, [jane, amy], leader=jane)

        # Virtual group level is index 3; Red is team 0
        assert group.chest_number == 701
        assert group.team.name == "Red"
        assert group in song.groups
        assert song in jane.joined_items
        assert roster.find_participant(701) is group

        second = roster.create_group(song, [amy])
        assert second.chest_number == 702

    def test_group_numbers_increase_past_existing(self, roster):
        song = roster.find_item("Group Song/IN")
        jane, amy = roster.find_participant(301), roster.find_participant(302)
        roster.create_group(song, [jane], chest_number=705)
        assert roster.create_group(song, [amy]).chest_number == 706

    def test_group_rules(self, roster):
        song = roster.find_item("Group Song/IN")
        jane, john = roster.find_participant(301), roster.find_participant(401)

        with pytest.raises(InvalidGroupException):
            roster.create_group(song, [])
        with pytest.raises(InvalidGroupException):
            roster.create_group(song, [jane, john])
        with pytest.raises(InvalidGroupException):
            roster.create_group(roster.find_item("ART"), [jane])
        with pytest.raises(InvalidGroupException):
            roster.create_group(song, [jane], leader=john)

    def test_members_and_leader(self, roster):
        song = roster.find_item("Group Song/IN")
        jane, amy = roster.find_participant(301), roster.find_participant(302)
        group = roster.create_group(song, [jane])

        roster.add_group_member(group, amy)
        roster.set_group_leader(group, amy)
        assert group.members == [jane, amy]
        assert group.display_name == "Amy Lee's group"

        roster.remove_group_member(group, amy)
        assert group.leader is None
        assert group.members == [jane]
        assert amy not in song.individuals
        assert song not in amy.joined_items
        assert jane in song.individuals

        with pytest.raises(InvalidGroupException):
            roster.add_group_member(group, roster.find_participant(401))
        with pytest.raises(InvalidGroupException):
            roster.set_group_leader(group, amy)


def test_dict_round_trip(roster):
    song = roster.find_item("Group Song/IN")
    jane, amy = roster.find_participant(301), roster.find_participant(302)
    roster.join_item(jane, roster.find_item("ART"))
    roster.create_group(song, [jane, amy], leader=amy)

    restored = RosterIndex.from_dict(roster.to_dict())

    assert restored.to_dict() == roster.to_dict()
    group = restored.find_participant(701)
    assert isinstance(group, Group)
    assert group.leader.full_name == "Amy Lee"


def test_from_guideline_dict():
    roster = RosterIndex.from_dict(GUIDELINE)
    assert [t.name for t in roster.teams] == ["Red", "Blue"]
    assert roster.teams[0].colour == "#ff0000"
    assert roster.find_item("Group Song/IN").kind is ItemKind.GROUP
    assert roster.find_item("Poetry Recital/IN").is_on_stage


def test_unknown_level_suffix_leaves_item_open(roster):
    item = roster.add_item(CompetitionItem("Chess/XX"))
    assert item.level is None


def test_member_of_two_groups_stays_joined(roster):
    song = roster.find_item("Group Song/IN")
    jane, amy = roster.find_participant(301), roster.find_participant(302)
    first = roster.create_group(song, [jane, amy])
    roster.create_group(song, [amy])

    roster.remove_group_member(first, amy)

    assert song in amy.joined_items
    assert amy in song.individuals


def test_round_trip_keeps_submission_state(session):
    jane = session.roster.find_participant(301)
    session.import_submissions(make_export(row("Jane Doe")))

    restored = RosterIndex.from_dict(session.roster.to_dict())
    restored_jane = restored.find_participant(301)

    assert restored_jane.submission_timestamp == jane.submission_timestamp
    assert restored_jane.submission_email == "jane@school.edu"
    assert restored_jane.submission_name == "Jane Doe"

    reloaded = ScoresheetSession(restored)
    (again,) = reloaded.import_submissions(make_export(row("Jane Doe")))
    assert again.status is SubmissionStatus.IGNORED
