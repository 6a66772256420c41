"""Submission records produced by the submissions normalizer."""

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
from typing import Any, Dict, List, Optional

from scoresheet.constants import DISTANCE_EXCEEDED
from scoresheet.models.enums import ColumnRole, Provenance, SubmissionStatus
from scoresheet.models.level import Level
from scoresheet.models.participant import Individual
from scoresheet.models.team import Team


@dataclass(frozen=True)
class SubmissionColumn:
    """A header cell of a submissions export and the role it plays."""

    index: int
    header: str
    role: ColumnRole

    @classmethod
    def classify(cls, index: int, header: str) -> "SubmissionColumn":
        return cls(index=index, header=header.strip(), role=ColumnRole.classify(header))


@dataclass
class Submission:
    """One registration row and what reconciliation made of it.

    Submissions are not part of the roster. They are created by parsing,
    filled in by matching and classified by the reconciler.

    Attributes
    ----------
    row_number : int
        1-based line in the input (the header is line 1).
    raw_fields : list of str
        Cells exactly as read.
    timestamp : datetime
        When the form was submitted (naive, UTC for zoned inputs).
    email : str
        Lower-cased email, may be empty.
    phone : str
        Phone number as entered, may be empty.
    claimed_name : str
        Name as typed by the student.
    search_key : str
        Normalized ``claimed_name``.
    claimed_year_level : int
        Year level as typed.
    claimed_level : Level, optional
        Level whose band contains ``claimed_year_level``.
    claimed_team_name : str
        Team as typed, may be empty when the export has no team column.
    claimed_team : Team, optional
        Roster team named by ``claimed_team_name``.
    solo_item_codes, group_item_codes : list of str
        Requested item codes in the order they were listed.
    match_candidate : Individual, optional
        Closest roster individual within the distance threshold.
    match_distance : float
        Edit distance to ``match_candidate`` (``inf`` when there is none).
    match_score : float
        Similarity in [0, 1] derived from ``match_distance``.
    status : SubmissionStatus
        Reconciliation outcome.
    reason : str
        Why the submission was or was not applied.
    provenance : Provenance, optional
        Whether the roster change was automatic or an operator fix.
    unresolved_codes : list of str
        Item codes that matched no item when the submission was applied.
    """

    row_number: int
    raw_fields: List[str]
    timestamp: datetime
    claimed_name: str
    search_key: str
    claimed_year_level: int
    email: str = ""
    phone: str = ""
    claimed_level: Optional[Level] = None
    claimed_team_name: str = ""
    claimed_team: Optional[Team] = None
    solo_item_codes: List[str] = field(default_factory=list)
    group_item_codes: List[str] = field(default_factory=list)
    match_candidate: Optional[Individual] = None
    match_distance: float = DISTANCE_EXCEEDED
    match_score: float = 0.0
    status: SubmissionStatus = SubmissionStatus.PENDING
    reason: str = ""
    provenance: Optional[Provenance] = None
    unresolved_codes: List[str] = field(default_factory=list)
    details: List[str] = field(default_factory=list)

    @property
    def item_codes(self) -> List[str]:
        return self.solo_item_codes + self.group_item_codes

    @property
    def is_exact_match(self) -> bool:
        return self.match_candidate is not None and self.match_distance == 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the reconciliation result for reporting."""
        candidate = self.match_candidate
        return {
            "row_number": self.row_number,
            "timestamp": self.timestamp.isoformat(),
            "email": self.email,
            "claimed_name": self.claimed_name,
            "claimed_year_level": self.claimed_year_level,
            "claimed_level": self.claimed_level.code if self.claimed_level else None,
            "claimed_team": self.claimed_team_name,
            "items": self.item_codes,
            "details": self.details,
            "match_candidate": candidate.full_name if candidate else None,
            "match_chest_number": candidate.chest_number if candidate else None,
            "match_score": round(self.match_score, 4),
            "status": self.status.value,
            "reason": self.reason,
            "provenance": self.provenance.value if self.provenance else None,
            "unresolved_codes": self.unresolved_codes,
        }
