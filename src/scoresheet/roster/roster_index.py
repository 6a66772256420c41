"""In-memory roster of one competition.

The roster owns the teams, levels, competition items, individuals and
groups of a session. All mutation goes through its methods; every method
that changes a participant takes :attr:`RosterIndex.lock` and emits a
:class:`~scoresheet.models.events.ParticipantChanged` event.
"""

# Scoresheet
# Copyright (C) 2025  Scoresheet developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import threading
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from scoresheet.constants import CODE_LEVEL_SEPARATOR
from scoresheet.exceptions import (
    DuplicateChestNumberException,
    InvalidGroupException,
    LinkageException,
    ParticipantNotFoundException,
    RosterException,
)
from scoresheet.models.competition_item import CompetitionItem
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.enums import ItemKind
from scoresheet.models.events import ParticipantChanged, RosterNotifier, ScoreChanged
from scoresheet.models.level import Level
from scoresheet.models.participant import Group, Individual, Participant
from scoresheet.models.team import Team
from scoresheet.roster.chest_numbers import ChestNumberAllocator
from scoresheet.roster.teams_list import TeamsListEntry
from scoresheet.utils import setup_logger
from scoresheet.utils.text import normalize_name
from scoresheet.utils.validation import validate_non_empty

logger = setup_logger(__name__)


class RosterIndex:
    """Teams, levels, items and participants of one competition.

    Teams and levels are fixed when the roster is created, since their
    order determines the chest number buckets.
    """

    def __init__(
        self,
        teams: Sequence[Team],
        levels: Sequence[Level],
        items: Iterable[CompetitionItem] = (),
        config: Optional[ScoresheetConfig] = None,
        notifier: Optional[RosterNotifier] = None,
    ):
        self.config = config or ScoresheetConfig()
        self.notifier = notifier or RosterNotifier()
        self.lock = threading.RLock()

        self.teams: List[Team] = list(teams)
        self.levels: List[Level] = list(levels)
        self.items: Dict[str, CompetitionItem] = {}
        self._individuals: List[Individual] = []
        self._by_chest_number: Dict[int, Participant] = {}

        team_names = [team.name for team in self.teams]
        if len(set(team_names)) != len(team_names):
            raise RosterException(f"Duplicate team names: {team_names}")

        for item in items:
            self.add_item(item)

        self.allocator = ChestNumberAllocator(
            team_count=len(self.teams),
            level_count=len(self.levels),
            start=self.config.chest_number_start,
            capacity=self.config.chest_number_capacity,
        )

    # ========== Lookups ==========

    @property
    def individuals(self) -> List[Individual]:
        """Snapshot of the individuals in roster order."""
        return list(self._individuals)

    @property
    def groups(self) -> List[Group]:
        return [group for item in self.items.values() for group in item.groups]

    def find_team(self, name: Optional[str]) -> Optional[Team]:
        """Find a team by name, ignoring case and surrounding whitespace."""
        if not name or not name.strip():
            return None
        key = normalize_name(name)
        for team in self.teams:
            if normalize_name(team.name) == key:
                return team
        return None

    def require_team(self, name: str) -> Team:
        """Like :meth:`find_team` but a missing team is a linkage error."""
        team = self.find_team(name)
        if team is None:
            raise LinkageException("team", name, "not in the roster")
        return team

    def team_index(self, team: Team) -> int:
        try:
            return self.teams.index(team)
        except ValueError:
            raise LinkageException("team", team.name, "not in the roster") from None

    def level_index(self, level: Level) -> int:
        try:
            return self.levels.index(level)
        except ValueError:
            raise LinkageException("level", level.code, "not in the roster") from None

    def find_level(self, code: Optional[str]) -> Optional[Level]:
        if not code:
            return None
        for level in self.levels:
            if level.code.casefold() == code.strip().casefold():
                return level
        return None

    def level_for_year(self, year_level: int) -> Optional[Level]:
        """Return the first level whose band contains ``year_level``."""
        for level in self.levels:
            if level.within(year_level):
                return level
        return None

    def find_item(self, code: str) -> Optional[CompetitionItem]:
        item = self.items.get(code)
        if item is not None:
            return item
        key = code.strip().casefold()
        for candidate in self.items.values():
            if candidate.code.casefold() == key:
                return candidate
        return None

    def resolve_item_code(
        self,
        code: str,
        level: Optional[Level],
        kind: Optional[ItemKind] = None,
    ) -> Optional[CompetitionItem]:
        """Resolve a code from a submission to an item.

        Submission codes usually omit the level, so ``code`` is tried as
        given and then with the participant's level appended. Items of
        another level or of the wrong kind do not resolve.

        Returns:
            The item, or None if nothing suitable exists
        """
        code = code.strip()
        if not code:
            return None

        candidates = [code]
        if level is not None:
            candidates.append(f"{code}{CODE_LEVEL_SEPARATOR}{level.code}")

        for candidate in candidates:
            item = self.find_item(candidate)
            if item is None:
                continue
            if kind is not None and item.kind is not kind:
                continue
            if item.level is not None and level is not None and item.level != level:
                continue
            return item
        return None

    def find_participant(self, chest_number: int) -> Optional[Participant]:
        return self._by_chest_number.get(chest_number)

    def require_participant(self, chest_number: int) -> Participant:
        participant = self.find_participant(chest_number)
        if participant is None:
            raise ParticipantNotFoundException(
                f"No participant with chest number {chest_number}"
            )
        return participant

    def find_by_search_key(self, search_key: str) -> Optional[Individual]:
        """Return the first individual whose search key equals ``search_key``."""
        key = normalize_name(search_key)
        for individual in self._individuals:
            if individual.search_key == key:
                return individual
        return None

    # ========== Items ==========

    def add_item(self, item: CompetitionItem) -> CompetitionItem:
        """Add a competition item, resolving its level from the code suffix."""
        if item.code in self.items:
            raise RosterException(f"Duplicate item code: {item.code}")

        if item.level is None and item.level_code:
            item.level = self.find_level(item.level_code)
            if item.level is None:
                logger.warning(
                    f"Item {item.code}: unknown level '{item.level_code}', "
                    "item is open to all levels"
                )

        self.items[item.code] = item
        return item

    # ========== Individuals ==========

    def add_individual(
        self,
        full_name: str,
        team_name: str,
        year_level: int,
        chest_number: Optional[int] = None,
    ) -> Individual:
        """Add an individual and allocate their chest number.

        An individual whose team is unknown or whose year is outside every
        level band is still added, with chest number 0, so the problem can
        be fixed by hand.

        Args:
            full_name: Name as listed
            team_name: Team as listed
            year_level: School year
            chest_number: Use this number instead of allocating one

        Returns:
            The new individual

        Raises:
            DuplicateChestNumberException: If ``chest_number`` is taken
        """
        with self.lock:
            team = self.find_team(team_name)
            level = self.level_for_year(year_level)
            individual = Individual(full_name, year_level, team=team, level=level)

            if chest_number:
                self._register(chest_number, individual)
                self.allocator.observe(chest_number)
            elif team is not None and level is not None:
                number = self.allocator.next_individual(
                    self.level_index(level), self.team_index(team)
                )
                self._register(number, individual)
            else:
                if team is None:
                    logger.warning(f"{individual.full_name}: unknown team '{team_name}'")
                if level is None:
                    logger.warning(
                        f"{individual.full_name}: year {year_level} is outside every level"
                    )

            self._individuals.append(individual)
            logger.debug(f"Added {individual!r}")
            return individual

    def load_teams_list(self, entries: Iterable[TeamsListEntry]) -> List[Individual]:
        """Add every teams list entry, in order."""
        added = [
            self.add_individual(entry.full_name, entry.team_name, entry.year_level)
            for entry in entries
        ]
        logger.info(f"Roster has {len(self._individuals)} individuals")
        return added

    def rename_individual(
        self, individual: Individual, full_name: str
    ) -> ParticipantChanged:
        """Change an individual's name; the search key follows.

        Raises:
            RosterException: If the new name is blank
        """
        name = validate_non_empty(full_name, "Name")
        if not name:
            raise RosterException(name.error_message or "Name cannot be empty")

        with self.lock:
            old_name = individual.full_name
            individual.full_name = name.sanitized_value or ""
            logger.info(f"Renamed '{old_name}' to '{individual.full_name}'")
            return self.notify_changed(individual, "renamed")

    def join_item(self, individual: Individual, item: CompetitionItem) -> bool:
        """Add an individual to an item.

        Returns:
            False if the individual had already joined
        """
        with self.lock:
            if item in individual.joined_items:
                return False
            individual.joined_items.append(item)
            item.individuals.append(individual)
            return True

    def unjoin_item(self, individual: Individual, item: CompetitionItem) -> bool:
        """Remove an individual from an item.

        A score the individual had in the item is dropped with them, and a
        cleared :class:`ScoreChanged` is emitted so team totals follow.

        Returns:
            False if the individual had not joined
        """
        with self.lock:
            if item not in individual.joined_items:
                return False
            individual.joined_items.remove(item)
            if individual in item.individuals:
                item.individuals.remove(individual)

            if item.scores.pop(individual.chest_number, None) is not None:
                logger.info(
                    f"Dropped score for #{individual.chest_number} in {item.code}: "
                    "no longer joined"
                )
                self.notifier.emit(
                    ScoreChanged(item.code, individual.chest_number, cleared=True)
                )
            return True

    def unjoin_all(self, individual: Individual) -> None:
        """Remove an individual from every item they joined."""
        with self.lock:
            for item in list(individual.joined_items):
                self.unjoin_item(individual, item)

    # ========== Groups ==========

    def create_group(
        self,
        item: CompetitionItem,
        members: Sequence[Individual],
        leader: Optional[Individual] = None,
        chest_number: Optional[int] = None,
    ) -> Group:
        """Enter a group in a group item and allocate its chest number.

        Raises:
            InvalidGroupException: If the item is not a group item, there are
                no members, members come from different teams, or the leader
                is not a member
        """
        if item.kind is not ItemKind.GROUP:
            raise InvalidGroupException(f"{item.code} is not a group item")
        if not members:
            raise InvalidGroupException("A group needs at least one member")

        team = members[0].team
        if team is None:
            raise InvalidGroupException(f"{members[0].full_name} has no team")
        if any(member.team != team for member in members):
            raise InvalidGroupException(f"All members must be from team {team.name}")
        if leader is not None and leader not in members:
            raise InvalidGroupException(f"{leader.full_name} is not a member")

        with self.lock:
            number = chest_number or self.allocator.next_group(
                self.team_index(team),
                (group.chest_number for group in self.groups),
            )
            group = Group(item=item, team=team, members=list(members), leader=leader)
            self._register(number, group)
            item.groups.append(group)
            for member in group.members:
                self.join_item(member, item)

            logger.info(f"Created group {number} in {item.code} for {team.name}")
            self.notify_changed(group, "group created")
            return group

    def add_group_member(self, group: Group, individual: Individual) -> ParticipantChanged:
        if individual.team != group.team:
            raise InvalidGroupException(
                f"{individual.full_name} is not in team {group.team.name}"
            )
        with self.lock:
            if individual not in group.members:
                group.members.append(individual)
                self.join_item(individual, group.item)
            return self.notify_changed(group, "member added")

    def remove_group_member(
        self, group: Group, individual: Individual
    ) -> ParticipantChanged:
        """Remove a member; removing the leader leaves the group leaderless."""
        with self.lock:
            if individual in group.members:
                group.members.remove(individual)
                in_other_group = any(
                    individual in other.members
                    for other in group.item.groups
                    if other is not group
                )
                if not in_other_group:
                    self.unjoin_item(individual, group.item)
            if group.leader is individual:
                group.leader = None
            return self.notify_changed(group, "member removed")

    def set_group_leader(
        self, group: Group, leader: Optional[Individual]
    ) -> ParticipantChanged:
        if leader is not None and leader not in group.members:
            raise InvalidGroupException(f"{leader.full_name} is not a member")
        with self.lock:
            group.leader = leader
            return self.notify_changed(group, "leader changed")

    # ========== Registration and Events ==========

    def _register(self, chest_number: int, participant: Participant) -> None:
        if chest_number in self._by_chest_number:
            raise DuplicateChestNumberException(
                f"Chest number {chest_number} is already assigned to "
                f"{self._by_chest_number[chest_number].display_name}"
            )
        participant.chest_number = chest_number
        self._by_chest_number[chest_number] = participant

    def notify_changed(
        self, participant: Participant, reason: str
    ) -> ParticipantChanged:
        """Emit a change event for a participant and return it."""
        event = ParticipantChanged(participant.chest_number, reason)
        self.notifier.emit(event)
        return event

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the roster to dictionary."""
        return {
            "teams": [team.to_dict() for team in self.teams],
            "levels": [level.to_dict() for level in self.levels],
            "items": [item.to_dict() for item in self.items.values()],
            "individuals": [individual.to_dict() for individual in self._individuals],
            "groups": [group.to_dict() for group in self.groups],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[ScoresheetConfig] = None,
        notifier: Optional[RosterNotifier] = None,
    ) -> "RosterIndex":
        """Build a roster from a guideline dictionary.

        ``teams``, ``levels`` and ``items`` are required. ``individuals``
        (with their memberships and last submission) and ``groups``, as
        written by :meth:`to_dict`, are optional.
        """
        roster = cls(
            teams=[Team.from_dict(team) for team in data.get("teams", [])],
            levels=[Level.from_dict(level) for level in data.get("levels", [])],
            items=[CompetitionItem.from_dict(item) for item in data.get("items", [])],
            config=config,
            notifier=notifier,
        )

        for entry in data.get("individuals", []):
            individual = roster.add_individual(
                entry["full_name"],
                entry.get("team") or "",
                int(entry["year_level"]),
                chest_number=entry.get("chest_number") or None,
            )
            for code in entry.get("joined_items", []):
                item = roster.find_item(code)
                if item is None:
                    raise LinkageException("item", code, individual.full_name)
                roster.join_item(individual, item)

            timestamp = entry.get("submission_timestamp")
            if timestamp:
                individual.submission_timestamp = datetime.fromisoformat(timestamp)
            individual.submission_email = entry.get("submission_email") or ""
            individual.submission_name = entry.get("submission_name") or ""

        for entry in data.get("groups", []):
            item = roster.find_item(entry["item"])
            if item is None:
                raise LinkageException("item", entry["item"], "group item")
            members = [roster.require_participant(n) for n in entry.get("members", [])]
            leader_number = entry.get("leader")
            group = roster.create_group(
                item,
                members,
                roster.require_participant(leader_number) if leader_number else None,
                chest_number=entry.get("chest_number") or None,
            )
            logger.debug(f"Loaded group {group.chest_number}")

        return roster
