"""TeamStanding data class."""

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

from dataclasses import dataclass
from typing import Any, Dict

from scoresheet.utils.text import ordinal


@dataclass(frozen=True)
class TeamStanding:
    """A team's position in the standings.

    Attributes
    ----------
    place : int
        Competition-ranking place; teams on equal points share a place.
    name : str
        Team name.
    points : float
        Team total.
    """

    place: int
    name: str
    points: float

    def __str__(self) -> str:
        return f"{ordinal(self.place):>5}  {self.name:<20} {self.points:g}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing to dictionary."""
        return {"place": self.place, "name": self.name, "points": self.points}
