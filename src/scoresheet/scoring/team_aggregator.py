"""Team totals.

Totals are always recomputed from every item's scores rather than
patched, and the recomputation runs whenever a score changes.
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

from typing import Callable, Dict, List, Optional

from scoresheet.models.events import ScoreChanged, TeamTotalsChanged
from scoresheet.models.standing import TeamStanding
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.scoring.score_book import ScoreBook
from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


def rank_teams(totals: Dict[str, float]) -> List[TeamStanding]:
    """Order teams by points, sharing places on equal points.

    Teams on equal points keep the order of ``totals``.
    """
    ordered = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)

    standings = []
    place = 0
    previous: Optional[float] = None
    for position, (name, points) in enumerate(ordered, start=1):
        if points != previous:
            place = position
            previous = points
        standings.append(TeamStanding(place=place, name=name, points=points))
    return standings


class TeamAggregator:
    """Keeps team totals in step with the score book."""

    def __init__(self, roster: RosterIndex, score_book: ScoreBook):
        self.roster = roster
        self.score_book = score_book
        self._standings: List[TeamStanding] = rank_teams(
            {team.name: team.points for team in roster.teams}
        )
        self._unsubscribe: Optional[Callable[[], None]] = roster.notifier.subscribe(
            self._on_score_changed, ScoreChanged
        )

    def update_team_totals(self) -> List[TeamStanding]:
        """Recompute every team's points from all item scores.

        Items are re-ranked first, so places stay right after a score is
        dropped outside the score book.

        Returns:
            The new standings
        """
        with self.roster.lock:
            totals = {team.name: 0.0 for team in self.roster.teams}
            for item in self.roster.items.values():
                self.score_book.recalculate_winners(item)
                for name, points in self.score_book.item_team_points(item).items():
                    if name in totals:
                        totals[name] += points

            precision = self.roster.config.marks_precision
            for team in self.roster.teams:
                team.points = round(totals[team.name], precision)
                totals[team.name] = team.points

            self._standings = rank_teams(totals)
            logger.debug(
                "Team totals: "
                + ", ".join(f"{name} {points:g}" for name, points in totals.items())
            )
            self.roster.notifier.emit(TeamTotalsChanged(tuple(totals.items())))
            return list(self._standings)

    def standings(self) -> List[TeamStanding]:
        """Latest standings, best first."""
        with self.roster.lock:
            return list(self._standings)

    def close(self) -> None:
        """Stop following score changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_score_changed(self, event: ScoreChanged) -> None:
        self.update_team_totals()
