"""Reconciliation of matched submissions with the roster.

Each matched submission is classified exactly once:

- no candidate, or a candidate that is not an exact name match:
  ``MISMATCH`` (a fuzzy hit is never applied automatically)
- exact match but the claimed team or level differs from the roster:
  ``INVALID``
- exact, valid and newer than the candidate's recorded submission:
  ``ASSIGNED`` for a first submission, otherwise ``EDITED``; applied
- exact, valid but not newer: ``IGNORED``

Submissions must be committed in file order by a single writer, because
applying one changes the timestamp the next one for the same individual
is compared with. Operators resolve what is left with :meth:`Reconciler.apply_fix`.
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

from typing import List, NamedTuple, Optional, Tuple

from scoresheet.exceptions import LinkageException
from scoresheet.models.competition_item import CompetitionItem
from scoresheet.models.config import ScoresheetConfig
from scoresheet.models.enums import FixAction, ItemKind, Provenance, SubmissionStatus
from scoresheet.models.events import ParticipantChanged
from scoresheet.models.participant import Individual
from scoresheet.models.submission import Submission
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


class FixSuggestion(NamedTuple):
    """Operator action suggested for a submission and a chosen individual.

    ``requires_override`` is set when carrying out the action would bypass
    the team and level check.
    """

    action: FixAction
    requires_override: bool = False


class Reconciler:
    """Classifies submissions and applies accepted ones to the roster."""

    def __init__(self, roster: RosterIndex, config: Optional[ScoresheetConfig] = None):
        self.roster = roster
        self.config = config or roster.config

    # ========== Automatic Reconciliation ==========

    def commit(self, submissions: List[Submission]) -> List[Submission]:
        """Reconcile matched submissions one after another, in order.

        A linkage error marks its submission ``ERROR`` and the batch carries
        on, unless ``stop_on_linkage_error`` is set, in which case it is
        re-raised and the remaining submissions stay ``PENDING``. Already
        applied submissions are never rolled back.

        Returns:
            The submissions, classified
        """
        counts = {status: 0 for status in SubmissionStatus}

        for submission in submissions:
            with self.roster.lock:
                try:
                    self.reconcile(submission)
                except LinkageException as e:
                    submission.status = SubmissionStatus.ERROR
                    submission.reason = str(e)
                    logger.error(f"Row {submission.row_number}: {e}")
                    if self.config.stop_on_linkage_error:
                        raise
            counts[submission.status] += 1

        summary = ", ".join(
            f"{status.value}: {count}" for status, count in counts.items() if count
        )
        logger.info(f"Reconciled {len(submissions)} submissions ({summary})")
        return submissions

    def reconcile(self, submission: Submission) -> SubmissionStatus:
        """Classify one matched submission and apply it if accepted.

        Raises:
            LinkageException: If the claimed team does not exist, or the
                candidate cannot be linked to a roster team or level
        """
        candidate = submission.match_candidate

        if candidate is None:
            submission.status = SubmissionStatus.MISMATCH
            submission.reason = (
                f"No roster name within {self.config.match_threshold} edits of "
                f"'{submission.claimed_name}'"
            )
        elif not submission.is_exact_match:
            submission.status = SubmissionStatus.MISMATCH
            submission.reason = (
                f"Closest roster name is '{candidate.full_name}' "
                f"({submission.match_score:.0%} match)"
            )
        else:
            self._check_linkage(submission, candidate)

            if not self.is_valid_match(submission, candidate):
                submission.status = SubmissionStatus.INVALID
                submission.reason = self._describe_invalid(submission, candidate)
            elif self._is_newer(submission, candidate):
                first = not candidate.is_form_submitted
                self.apply_match(candidate, submission, Provenance.AUTOMATIC)
                submission.status = (
                    SubmissionStatus.ASSIGNED if first else SubmissionStatus.EDITED
                )
                submission.reason = (
                    "First submission" if first else "Replaces an earlier submission"
                )
            else:
                submission.status = SubmissionStatus.IGNORED
                submission.reason = (
                    "Roster already has a submission from "
                    f"{candidate.submission_timestamp:%Y-%m-%d %H:%M:%S}"
                )

        self._log_outcome(submission)
        return submission.status

    def is_valid_match(self, submission: Submission, candidate: Individual) -> bool:
        """Check the claimed team and level agree with the roster."""
        return (
            submission.claimed_team is not None
            and submission.claimed_team == candidate.team
            and submission.claimed_level is not None
            and submission.claimed_level == candidate.level
        )

    def apply_match(
        self,
        candidate: Individual,
        submission: Submission,
        provenance: Provenance = Provenance.AUTOMATIC,
    ) -> ParticipantChanged:
        """Apply a submission to an individual.

        Every item membership is replaced by the items the submission asks
        for (items left out lose their score there), and the submission's timestamp, email and name are recorded.
        Applying the same submission twice leaves the same state as once.
        Codes that resolve to no item are skipped and listed on
        ``submission.unresolved_codes``.

        Raises:
            LinkageException: If the individual's team or level is not in
                the roster; nothing is changed
        """
        with self.roster.lock:
            if candidate.team is None or candidate.team not in self.roster.teams:
                raise LinkageException(
                    "team",
                    candidate.team.name if candidate.team else "",
                    f"{candidate.full_name} has no roster team",
                )
            if candidate.level is None or candidate.level not in self.roster.levels:
                raise LinkageException(
                    "level",
                    str(candidate.year_level),
                    f"{candidate.full_name} has no roster level",
                )

            items, unresolved = self._resolve_items(submission, candidate)

            for item in list(candidate.joined_items):
                if item not in items:
                    self.roster.unjoin_item(candidate, item)
            for item in items:
                self.roster.join_item(candidate, item)

            candidate.submission_timestamp = submission.timestamp
            candidate.submission_email = submission.email
            candidate.submission_name = submission.claimed_name

            submission.unresolved_codes = unresolved
            submission.provenance = provenance

            if unresolved:
                logger.warning(
                    f"Row {submission.row_number}: skipped unknown items "
                    f"{', '.join(unresolved)} for {candidate.full_name}"
                )

            return self.roster.notify_changed(
                candidate, f"submission applied ({provenance.value})"
            )

    # ========== Manual Fixes ==========

    def suggest_fix(
        self, submission: Submission, participant: Individual
    ) -> FixSuggestion:
        """Suggest what an operator should do with a submission.

        Args:
            submission: A submission that was not applied automatically
            participant: The individual the operator believes it belongs to

        Returns:
            ``APPLIED`` if this submission is already recorded, ``IGNORE``
            if a newer one is, ``EDIT`` if the names match exactly and
            ``ASSIGN`` otherwise
        """
        recorded = participant.submission_timestamp

        if recorded is not None and recorded == submission.timestamp:
            return FixSuggestion(FixAction.APPLIED)
        if recorded is not None and recorded > submission.timestamp:
            return FixSuggestion(FixAction.IGNORE)

        override = not self.is_valid_match(submission, participant)
        if submission.search_key == participant.search_key:
            return FixSuggestion(FixAction.EDIT, override)
        return FixSuggestion(FixAction.ASSIGN, override)

    def apply_fix(
        self,
        submission: Submission,
        participant: Individual,
        action: Optional[FixAction] = None,
        note: str = "",
    ) -> SubmissionStatus:
        """Carry out an operator fix.

        ``EDIT`` and ``ASSIGN`` apply the submission to ``participant`` even
        when the team or level disagree; such overrides are logged as
        warnings. ``IGNORE`` discards the submission.

        Args:
            submission: Submission to resolve
            participant: Individual chosen by the operator
            action: Defaults to the suggested action
            note: Operator's note, added to the reason

        Returns:
            The submission's new status

        Raises:
            LinkageException: If the participant cannot be linked
        """
        suggestion = self.suggest_fix(submission, participant)
        action = action or suggestion.action

        if action in (FixAction.NONE, FixAction.APPLIED):
            logger.info(
                f"Row {submission.row_number}: no change ({action.value})"
            )
            return submission.status

        if action is FixAction.IGNORE:
            return self.ignore(submission, note)

        with self.roster.lock:
            override = not self.is_valid_match(submission, participant)
            first = not participant.is_form_submitted
            self.apply_match(participant, submission, Provenance.MANUAL)

            submission.match_candidate = participant
            submission.status = (
                SubmissionStatus.ASSIGNED if first else SubmissionStatus.EDITED
            )
            submission.reason = self._manual_reason(action, note)

        if override:
            logger.warning(
                f"Row {submission.row_number}: manual override, applied "
                f"'{submission.claimed_name}' to {participant.full_name} "
                f"(#{participant.chest_number}) without team/level match"
            )
        else:
            logger.info(
                f"Row {submission.row_number}: manual {action.value.lower()} "
                f"to {participant.full_name} (#{participant.chest_number})"
            )
        return submission.status

    def ignore(self, submission: Submission, note: str = "") -> SubmissionStatus:
        """Discard a submission on the operator's request."""
        submission.status = SubmissionStatus.IGNORED
        submission.provenance = Provenance.MANUAL
        submission.reason = self._manual_reason(FixAction.IGNORE, note)
        logger.info(f"Row {submission.row_number}: ignored by operator")
        return submission.status

    # ========== Helpers ==========

    def _check_linkage(self, submission: Submission, candidate: Individual) -> None:
        if submission.claimed_team_name.strip() and submission.claimed_team is None:
            raise LinkageException(
                "team", submission.claimed_team_name, "claimed team is not in the roster"
            )
        if candidate.team is None or candidate.team not in self.roster.teams:
            raise LinkageException(
                "team",
                candidate.team.name if candidate.team else "",
                f"{candidate.full_name} has no roster team",
            )

    def _resolve_items(
        self, submission: Submission, candidate: Individual
    ) -> Tuple[List[CompetitionItem], List[str]]:
        items: List[CompetitionItem] = []
        unresolved: List[str] = []

        for codes, kind in (
            (submission.solo_item_codes, ItemKind.SOLO),
            (submission.group_item_codes, ItemKind.GROUP),
        ):
            for code in codes:
                item = self.roster.resolve_item_code(code, candidate.level, kind)
                if item is None:
                    unresolved.append(code)
                elif item not in items:
                    items.append(item)

        return items, unresolved

    @staticmethod
    def _is_newer(submission: Submission, candidate: Individual) -> bool:
        recorded = candidate.submission_timestamp
        return recorded is None or recorded < submission.timestamp

    @staticmethod
    def _describe_invalid(submission: Submission, candidate: Individual) -> str:
        problems = []
        if submission.claimed_team is None or submission.claimed_team != candidate.team:
            roster_team = candidate.team.name if candidate.team else "none"
            problems.append(
                f"team '{submission.claimed_team_name}' (roster: {roster_team})"
            )
        if (
            submission.claimed_level is None
            or submission.claimed_level != candidate.level
        ):
            roster_level = candidate.level.code if candidate.level else "none"
            problems.append(
                f"year {submission.claimed_year_level} (roster level: {roster_level})"
            )
        return "Does not match roster " + " and ".join(problems)

    @staticmethod
    def _manual_reason(action: FixAction, note: str) -> str:
        reason = f"Manual {action.value.lower()}"
        return f"{reason}: {note}" if note else reason

    @staticmethod
    def _log_outcome(submission: Submission) -> None:
        message = (
            f"Row {submission.row_number} '{submission.claimed_name}': "
            f"{submission.status.value} - {submission.reason}"
        )
        if submission.status.needs_review:
            logger.warning(message)
        else:
            logger.info(message)
