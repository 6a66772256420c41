"""Team data class."""

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
from typing import Any, Dict


@dataclass
class Team:
    """A team (house) that participants compete for.

    Attributes
    ----------
    name : str
        Unique team name.
    colour : str
        Display colour, informational only.
    points : float
        Current team total, maintained by the team aggregator.
    """

    name: str
    colour: str = field(default="", compare=False)
    points: float = field(default=0.0, compare=False)

    def __hash__(self) -> int:
        return hash(self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize team to dictionary."""
        return {"name": self.name, "colour": self.colour}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Deserialize team from dictionary."""
        return cls(name=data["name"], colour=data.get("colour", ""))
