"""Level data class."""

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


@dataclass(frozen=True)
class Level:
    """A competition level covering an inclusive band of school years.

    Attributes
    ----------
    code : str
        Short code used as the suffix of item codes (e.g. "JR").
    name : str
        Display name (e.g. "Junior").
    lower_year : int
        Lowest year level in the band.
    upper_year : int
        Highest year level in the band.
    """

    code: str
    name: str
    lower_year: int
    upper_year: int

    def within(self, year_level: int) -> bool:
        """Check whether a year level falls inside this band."""
        return self.lower_year <= year_level <= self.upper_year

    def to_dict(self) -> Dict[str, Any]:
        """Serialize level to dictionary."""
        return {
            "code": self.code,
            "name": self.name,
            "lower_year": self.lower_year,
            "upper_year": self.upper_year,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Level":
        """Deserialize level from dictionary."""
        return cls(
            code=data["code"],
            name=data.get("name", data["code"]),
            lower_year=int(data["lower_year"]),
            upper_year=int(data["upper_year"]),
        )
