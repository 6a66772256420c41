"""Name matching of submissions against the roster.

A submission's candidate is the roster individual whose search key is
closest to the claimed name by bounded Damerau-Levenshtein distance. An
exact key match ends the scan; otherwise the first individual at the
smallest distance wins, so ties follow roster order.
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

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, NamedTuple, Optional, Sequence

from scoresheet.constants import (
    DISTANCE_EXCEEDED,
    MATCH_DISTANCE_THRESHOLD,
    MATCH_WORKERS,
)
from scoresheet.models.participant import Individual
from scoresheet.models.submission import Submission
from scoresheet.utils import setup_logger
from scoresheet.utils.edit_distance import Distance, damerau_levenshtein, similarity
from scoresheet.utils.text import normalize_name

logger = setup_logger(__name__)


class MatchResult(NamedTuple):
    candidate: Optional[Individual]
    distance: Distance
    score: float


NO_MATCH = MatchResult(None, DISTANCE_EXCEEDED, 0.0)


class Matcher:
    """Finds the closest roster individual for a claimed name."""

    def __init__(self, threshold: int = MATCH_DISTANCE_THRESHOLD):
        self.threshold = threshold

    def find_best_match(
        self, claimed_name: str, individuals: Sequence[Individual]
    ) -> MatchResult:
        """Find the closest individual within the threshold.

        Args:
            claimed_name: Name as submitted (normalized here)
            individuals: Roster individuals in roster order

        Returns:
            The candidate with its distance and similarity, or ``NO_MATCH``
        """
        key = normalize_name(claimed_name)
        best: Optional[Individual] = None
        best_distance: Distance = DISTANCE_EXCEEDED

        for individual in individuals:
            if individual.search_key == key:
                return MatchResult(individual, 0, 1.0)

            # Only a strictly smaller distance replaces the current best
            distance = damerau_levenshtein(
                individual.search_key, key, min(self.threshold, best_distance)
            )
            if distance < best_distance:
                best, best_distance = individual, distance

        if best is None:
            return NO_MATCH
        return MatchResult(
            best, best_distance, similarity(best.search_key, key, best_distance)
        )

    def match(
        self, submission: Submission, individuals: Sequence[Individual]
    ) -> Submission:
        """Record the best match on a submission and return it."""
        result = self.find_best_match(submission.claimed_name, individuals)
        submission.match_candidate = result.candidate
        submission.match_distance = result.distance
        submission.match_score = result.score
        return submission

    def match_all(
        self,
        submissions: List[Submission],
        individuals: Sequence[Individual],
        max_workers: int = MATCH_WORKERS,
    ) -> List[Submission]:
        """Match every submission, in parallel.

        Matching only reads the roster, so submissions are independent.
        ``individuals`` should be a snapshot that is not mutated meanwhile.

        Returns:
            The same submissions, in their original order
        """
        if max_workers <= 1 or len(submissions) <= 1:
            for submission in submissions:
                self.match(submission, individuals)
            return submissions

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_submission = {
                executor.submit(self.match, submission, individuals): submission
                for submission in submissions
            }

            for future in as_completed(future_to_submission):
                submission = future_to_submission[future]
                future.result()
                logger.debug(
                    f"Row {submission.row_number}: best match "
                    f"{submission.match_candidate!r} "
                    f"(distance {submission.match_distance})"
                )

        return submissions
