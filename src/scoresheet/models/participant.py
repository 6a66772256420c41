"""Participants: individuals and the groups they form.

Both variants share a small interface (:class:`Competitor`) so the score
book and the team aggregator can treat them alike; everything else about
them is kept separate.
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

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Union

from scoresheet.constants import UNASSIGNED_CHEST_NUMBER
from scoresheet.models.level import Level
from scoresheet.models.score import Score
from scoresheet.models.team import Team
from scoresheet.utils.text import normalize_name

if TYPE_CHECKING:
    from scoresheet.models.competition_item import CompetitionItem


class Competitor(Protocol):
    """What every participant variant exposes."""

    kind: str
    chest_number: int
    team: Optional[Team]

    @property
    def display_name(self) -> str: ...

    @property
    def scores(self) -> Dict[str, Score]: ...


class Individual:
    """A single student on the roster.

    ``search_key`` is kept in step with ``full_name``: assigning a new name
    recomputes it.
    """

    kind = "individual"

    def __init__(
        self,
        full_name: str,
        year_level: int,
        team: Optional[Team] = None,
        level: Optional[Level] = None,
        chest_number: int = UNASSIGNED_CHEST_NUMBER,
    ):
        self._full_name = ""
        self.search_key = ""
        self.full_name = full_name
        self.year_level = year_level
        self.team = team
        self.level = level
        self.chest_number = chest_number
        self.joined_items: List["CompetitionItem"] = []
        self.submission_timestamp: Optional[datetime] = None
        self.submission_email = ""
        self.submission_name = ""

    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = " ".join((value or "").split())
        self.search_key = normalize_name(self._full_name)

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def is_form_submitted(self) -> bool:
        """Whether a submission has ever been applied to this individual."""
        return self.submission_timestamp is not None

    @property
    def scores(self) -> Dict[str, Score]:
        """Scores held by this individual, keyed by item code."""
        return {
            item.code: item.scores[self.chest_number]
            for item in self.joined_items
            if self.chest_number in item.scores
        }

    def __repr__(self) -> str:
        team = self.team.name if self.team else None
        return (
            f"Individual({self.full_name!r}, chest_number={self.chest_number}, "
            f"team={team!r}, year_level={self.year_level})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize individual to dictionary."""
        return {
            "full_name": self.full_name,
            "year_level": self.year_level,
            "team": self.team.name if self.team else None,
            "level": self.level.code if self.level else None,
            "chest_number": self.chest_number,
            "joined_items": [item.code for item in self.joined_items],
            "submission_timestamp": (
                self.submission_timestamp.isoformat()
                if self.submission_timestamp
                else None
            ),
            "submission_email": self.submission_email,
            "submission_name": self.submission_name,
        }


@dataclass(eq=False)
class Group:
    """A group entry in a group competition item.

    A group is itself a participant: it holds a chest number and a score,
    and its points count for its team. All members belong to that team.

    Attributes
    ----------
    item : CompetitionItem
        The group item the group is entered in.
    team : Team
        Team of every member.
    members : list of Individual
        Members in the order they were added.
    leader : Individual, optional
        One of the members, or None.
    chest_number : int
        Allocated from the team's group bucket.
    """

    item: "CompetitionItem"
    team: Team
    members: List[Individual] = field(default_factory=list)
    leader: Optional[Individual] = None
    chest_number: int = UNASSIGNED_CHEST_NUMBER

    kind = "group"

    @property
    def display_name(self) -> str:
        if self.leader is not None:
            return f"{self.leader.full_name}'s group"
        return f"Group {self.chest_number}"

    @property
    def scores(self) -> Dict[str, Score]:
        score = self.item.scores.get(self.chest_number)
        return {self.item.code: score} if score else {}

    def __repr__(self) -> str:
        return (
            f"Group(item={self.item.code!r}, chest_number={self.chest_number}, "
            f"team={self.team.name!r}, members={len(self.members)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize group to dictionary."""
        return {
            "item": self.item.code,
            "team": self.team.name,
            "chest_number": self.chest_number,
            "members": [member.chest_number for member in self.members],
            "leader": self.leader.chest_number if self.leader else None,
        }


Participant = Union[Individual, Group]
