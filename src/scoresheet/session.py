"""A competition session.

The session owns the roster and everything that works on it: the
submission pipeline (parse, match, commit), the score book and the team
aggregator, all sharing one notifier and one lock.
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

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from scoresheet.exceptions import LinkageException, ParticipantNotFoundException
from scoresheet.formatter.matcher import Matcher
from scoresheet.formatter.normalizer import SubmissionNormalizer
from scoresheet.formatter.reconciler import FixSuggestion, Reconciler
from scoresheet.models.competition_item import CompetitionItem
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.enums import FixAction, SubmissionStatus
from scoresheet.models.events import RosterNotifier, ScoreChanged
from scoresheet.models.participant import Individual
from scoresheet.models.score import Score
from scoresheet.models.standing import TeamStanding
from scoresheet.models.submission import Submission
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.roster.teams_list import parse_teams_list
from scoresheet.scoring.score_book import ScoreBook
from scoresheet.scoring.team_aggregator import TeamAggregator
from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


class ScoresheetSession:
    """Everything for one competition, in memory."""

    def __init__(self, roster: RosterIndex):
        self.roster = roster
        self.config = roster.config
        self.config.validate()

        self.normalizer = SubmissionNormalizer(roster)
        self.matcher = Matcher(self.config.match_threshold)
        self.reconciler = Reconciler(roster, self.config)
        self.score_book = ScoreBook(roster, self.config)
        self.aggregator = TeamAggregator(roster, self.score_book)
        self._submissions: List[Submission] = []

    @classmethod
    def from_guideline(
        cls,
        guideline: Dict[str, Any],
        teams_list: Optional[Iterable[str]] = None,
        config: Optional[ScoresheetConfig] = None,
    ) -> "ScoresheetSession":
        """Create a session from a guideline and, optionally, a teams list.

        Args:
            guideline: Teams, levels and items (see ``RosterIndex.from_dict``),
                with an optional ``config`` section
            teams_list: Lines of a teams list, loaded in order
            config: Overrides the guideline's ``config`` section
        """
        if config is None:
            config = ScoresheetConfig.from_dict(guideline.get("config", {}))
        config.validate()

        roster = RosterIndex.from_dict(guideline, config=config)
        if teams_list is not None:
            roster.load_teams_list(parse_teams_list(teams_list))

        logger.info(
            f"Session '{config.name}': {len(roster.teams)} teams, "
            f"{len(roster.levels)} levels, {len(roster.items)} items, "
            f"{len(roster.individuals)} individuals"
        )
        return cls(roster)

    @property
    def notifier(self) -> RosterNotifier:
        return self.roster.notifier

    # ========== Submissions ==========

    @property
    def submissions(self) -> Tuple[Submission, ...]:
        """Every imported submission, in import order."""
        return tuple(self._submissions)

    def import_submissions(self, data: Union[str, Iterable[str]]) -> List[Submission]:
        """Parse, match and reconcile a submissions export.

        Parsing finishes before anything is applied, so a malformed row
        leaves the roster untouched. Matching runs on a worker pool;
        reconciliation then runs in file order.

        Returns:
            The classified submissions of this import

        Raises:
            ParseException: If any row is malformed
            LinkageException: Only with ``stop_on_linkage_error``
        """
        submissions = self.normalizer.parse(data)

        with self.roster.lock:
            self.matcher.match_all(
                submissions, self.roster.individuals, self.config.match_workers
            )
            self._submissions.extend(submissions)
            self.reconciler.commit(submissions)

        return submissions

    def pending_review(self) -> List[Submission]:
        """Submissions an operator still has to look at."""
        return [s for s in self._submissions if s.status.needs_review]

    def suggest_fix(self, submission: Submission, chest_number: int) -> FixSuggestion:
        return self.reconciler.suggest_fix(submission, self._individual(chest_number))

    def apply_fix(
        self,
        submission: Submission,
        chest_number: int,
        action: Optional[FixAction] = None,
        note: str = "",
    ) -> SubmissionStatus:
        """Resolve a submission by hand against the individual with ``chest_number``."""
        return self.reconciler.apply_fix(
            submission, self._individual(chest_number), action, note
        )

    # ========== Scores ==========

    def add_score(
        self,
        item_code: str,
        chest_number: int,
        marks: Union[str, Sequence[float]],
        author: str = "",
    ) -> Score:
        """Record marks, given as numbers or as typed text (``"4+3, 5, 6"``)."""
        if isinstance(marks, str):
            marks = Score.parse(marks)
        return self.score_book.add_score(
            self._item(item_code),
            self.roster.require_participant(chest_number),
            marks,
            author=author,
        )

    def clear_score(self, item_code: str, chest_number: int) -> ScoreChanged:
        return self.score_book.clear_score(
            self._item(item_code), self.roster.require_participant(chest_number)
        )

    def standings(self) -> List[TeamStanding]:
        return self.aggregator.standings()

    # ========== Reporting ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the session for export."""
        with self.roster.lock:
            return {
                "config": self.config.to_dict(),
                "roster": self.roster.to_dict(),
                "submissions": [s.to_dict() for s in self._submissions],
                "scores": {
                    code: [score.to_dict() for score in item.scores.values()]
                    for code, item in self.roster.items.items()
                    if item.scores
                },
                "standings": [standing.to_dict() for standing in self.standings()],
            }

    def _item(self, code: str) -> CompetitionItem:
        item = self.roster.find_item(code)
        if item is None:
            raise LinkageException("item", code, "not in the roster")
        return item

    def _individual(self, chest_number: int) -> Individual:
        participant = self.roster.require_participant(chest_number)
        if not isinstance(participant, Individual):
            raise ParticipantNotFoundException(
                f"Chest number {chest_number} is a group, not an individual"
            )
        return participant
