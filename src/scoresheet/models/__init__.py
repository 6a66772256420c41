"""Data model for Scoresheet."""

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

from scoresheet.models.competition_item import CompetitionItem
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.enums import (
    ColumnRole,
    FixAction,
    ItemKind,
    Provenance,
    SubmissionStatus,
)
from scoresheet.models.events import (
    ParticipantChanged,
    RosterNotifier,
    ScoreChanged,
    TeamTotalsChanged,
)
from scoresheet.models.level import Level
from scoresheet.models.participant import Competitor, Group, Individual, Participant
from scoresheet.models.score import Score
from scoresheet.models.standing import TeamStanding
from scoresheet.models.submission import Submission, SubmissionColumn
from scoresheet.models.team import Team

__all__ = [
    "CompetitionItem",
    "ColumnRole",
    "Competitor",
    "FixAction",
    "Group",
    "Individual",
    "ItemKind",
    "Level",
    "Participant",
    "ParticipantChanged",
    "Provenance",
    "RosterNotifier",
    "Score",
    "ScoreChanged",
    "ScoresheetConfig",
    "Submission",
    "SubmissionColumn",
    "SubmissionStatus",
    "Team",
    "TeamStanding",
    "TeamTotalsChanged",
]
