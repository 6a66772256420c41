"""Score data class."""

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
from typing import Any, Dict, List, Optional, Sequence, Tuple

from scoresheet.constants import CRITERIA_SEPARATOR, JUDGE_SEPARATOR, MARKS_PRECISION
from scoresheet.exceptions import InvalidScoreException
from scoresheet.utils.text import ordinal


@dataclass
class Score:
    """Marks awarded to one participant in one competition item.

    Attributes
    ----------
    chest_number : int
        Chest number of the participant the marks belong to.
    marks : tuple of float
        One mark per judge, in entry order. Never empty.
    author : str
        Who entered the marks.
    created_at : datetime
        When the marks were entered.
    precision : int
        Decimal places ``average_marks`` is rounded to.
    place : int, optional
        Competition-ranking place within the item, set by the score book.
    points : float
        Team points earned for the place, set by the score book.
    """

    chest_number: int
    marks: Tuple[float, ...]
    author: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    precision: int = MARKS_PRECISION
    place: Optional[int] = None
    points: float = 0.0

    def __post_init__(self):
        if not self.marks:
            raise InvalidScoreException(
                f"Score for chest number {self.chest_number} has no marks"
            )
        try:
            self.marks = tuple(float(mark) for mark in self.marks)
        except (TypeError, ValueError) as e:
            raise InvalidScoreException(
                f"Marks for chest number {self.chest_number} must be numbers: {e}"
            ) from e

    @property
    def average_marks(self) -> float:
        """Mean of the judges' marks rounded to ``precision`` places."""
        return round(sum(self.marks) / len(self.marks), self.precision)

    def marks_to_string(self) -> str:
        """Format the marks the way they are entered, e.g. ``"8, 7.5, 9"``."""
        return f"{JUDGE_SEPARATOR} ".join(f"{mark:g}" for mark in self.marks)

    @staticmethod
    def parse(text: str) -> List[float]:
        """Parse entered marks text into one mark per judge.

        Judges are separated by ``,`` and a judge's criteria by ``+``; the
        criteria of each judge are summed. Blank judges are skipped.

        Args:
            text: Marks as typed, e.g. ``"4+3, 5+2.5, 6"``

        Returns:
            List of marks, one per judge

        Raises:
            InvalidScoreException: If a number cannot be parsed or no judge
                marks are present
        """
        marks = []
        for judge in (text or "").split(JUDGE_SEPARATOR):
            if not judge.strip():
                continue
            try:
                marks.append(
                    sum(float(part) for part in judge.split(CRITERIA_SEPARATOR))
                )
            except ValueError as e:
                raise InvalidScoreException(f"Invalid marks '{judge.strip()}'") from e

        if not marks:
            raise InvalidScoreException("No marks entered")
        return marks

    def __str__(self) -> str:
        place = ordinal(self.place) if self.place else "-"
        return (
            f"#{self.chest_number}: {self.average_marks:g} "
            f"({self.marks_to_string()}) {place}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize score to dictionary."""
        return {
            "chest_number": self.chest_number,
            "marks": list(self.marks),
            "author": self.author,
            "created_at": self.created_at.isoformat(),
            "average_marks": self.average_marks,
            "place": self.place,
            "points": self.points,
        }

    @classmethod
    def from_marks(
        cls,
        chest_number: int,
        marks: Sequence[float],
        author: str = "",
        created_at: Optional[datetime] = None,
        precision: int = MARKS_PRECISION,
    ) -> "Score":
        """Create a score from any sequence of marks."""
        return cls(
            chest_number=chest_number,
            marks=tuple(marks),
            author=author,
            created_at=created_at or datetime.now(),
            precision=precision,
        )
