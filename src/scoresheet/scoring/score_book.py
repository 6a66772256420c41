"""Score recording, placements and points.

Scores are held by their competition item, keyed by chest number, so a
participant has at most one score per item. Every change re-ranks the
item and emits a :class:`~scoresheet.models.events.ScoreChanged` while the
roster lock is held, so team totals recomputed by subscribers are never
seen half done.
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

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from scoresheet.constants import NO_PLACE_POINTS
from scoresheet.exceptions import InvalidScoreException, ScoreNotFoundException
from scoresheet.models.competition_item import CompetitionItem
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.events import ScoreChanged
from scoresheet.models.participant import Group, Individual, Participant
from scoresheet.models.score import Score
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


class ScoreBook:
    """Records marks and keeps each item's places and points up to date."""

    def __init__(self, roster: RosterIndex, config: Optional[ScoresheetConfig] = None):
        self.roster = roster
        self.config = config or roster.config

    def add_score(
        self,
        item: CompetitionItem,
        participant: Participant,
        marks: Sequence[float],
        author: str = "",
        created_at: Optional[datetime] = None,
    ) -> Score:
        """Record a participant's marks in an item, replacing any earlier score.

        Args:
            item: Item the marks were awarded in
            participant: An individual who joined a solo item, or a group
                entered in a group item
            marks: One mark per judge
            author: Who entered the marks
            created_at: Defaults to now

        Returns:
            The new score, placed

        Raises:
            InvalidScoreException: If the marks are empty or not numbers, or
                the participant is not entered in the item
        """
        self._check_entry(item, participant)
        score = Score.from_marks(
            participant.chest_number,
            marks,
            author=author,
            created_at=created_at,
            precision=self.config.marks_precision,
        )

        with self.roster.lock:
            replaced = item.scores.pop(participant.chest_number, None) is not None
            item.scores[participant.chest_number] = score
            self.recalculate_winners(item)

            verb = "Replaced" if replaced else "Added"
            logger.info(
                f"{verb} score for #{participant.chest_number} in {item.code}: "
                f"{score.average_marks:g}"
            )
            self.roster.notifier.emit(
                ScoreChanged(item.code, participant.chest_number)
            )
        return score

    def clear_score(
        self, item: CompetitionItem, participant: Participant
    ) -> ScoreChanged:
        """Remove a participant's score from an item.

        Raises:
            ScoreNotFoundException: If the participant has no score there
        """
        with self.roster.lock:
            if participant.chest_number not in item.scores:
                raise ScoreNotFoundException(
                    f"No score for #{participant.chest_number} in {item.code}"
                )
            del item.scores[participant.chest_number]
            self.recalculate_winners(item)

            logger.info(f"Cleared score for #{participant.chest_number} in {item.code}")
            event = ScoreChanged(item.code, participant.chest_number, cleared=True)
            self.roster.notifier.emit(event)
            return event

    def get_score(
        self, item: CompetitionItem, participant: Participant
    ) -> Optional[Score]:
        return item.scores.get(participant.chest_number)

    def recalculate_winners(self, item: CompetitionItem) -> List[Score]:
        """Rank an item's scores and award points.

        Scores are ordered by average marks, highest first. Equal averages
        share a place and the next average takes its position in the list,
        so averages 9, 9, 7 are placed 1, 1, 3.

        Returns:
            The scores in ranked order
        """
        with self.roster.lock:
            ranked = sorted(
                item.scores.values(), key=lambda s: s.average_marks, reverse=True
            )

            place = 0
            previous = None
            for position, score in enumerate(ranked, start=1):
                if score.average_marks != previous:
                    place = position
                    previous = score.average_marks
                score.place = place
                score.points = self.points_for(item, score)

            return ranked

    def points_for(self, item: CompetitionItem, score: Score) -> float:
        """Team points a placed score earns."""
        if self.config.weighted_scoring:
            return round(
                score.average_marks * self.config.weight(item.kind),
                self.config.marks_precision,
            )

        schedule = self.config.place_points(item.kind)
        if score.place is None or score.place > len(schedule):
            return NO_PLACE_POINTS
        return float(schedule[score.place - 1])

    def item_team_points(self, item: CompetitionItem) -> Dict[str, float]:
        """Points the item contributes to each team, by team name.

        In a group item only the groups score; their members earn nothing
        for it individually.
        """
        totals: Dict[str, float] = {}
        for chest_number, score in item.scores.items():
            participant = self.roster.find_participant(chest_number)
            if participant is None or participant.team is None:
                logger.warning(
                    f"{item.code}: score for #{chest_number} has no team, not counted"
                )
                continue
            if item.is_solo != isinstance(participant, Individual):
                continue
            name = participant.team.name
            totals[name] = totals.get(name, 0.0) + score.points
        return totals

    def scores_for(self, participant: Participant) -> Dict[str, Score]:
        """A participant's scores, keyed by item code."""
        return participant.scores

    def _check_entry(self, item: CompetitionItem, participant: Participant) -> None:
        if not participant.chest_number:
            raise InvalidScoreException(
                f"{participant.display_name} has no chest number"
            )
        if item.is_solo:
            if not isinstance(participant, Individual):
                raise InvalidScoreException(
                    f"{item.code} is a solo item, groups cannot be scored in it"
                )
            if participant not in item.individuals:
                raise InvalidScoreException(
                    f"{participant.full_name} has not joined {item.code}"
                )
        else:
            if not isinstance(participant, Group):
                raise InvalidScoreException(
                    f"{item.code} is a group item, only groups can be scored in it"
                )
            if participant not in item.groups:
                raise InvalidScoreException(
                    f"Group #{participant.chest_number} is not entered in {item.code}"
                )
