"""Exceptions for use in Scoresheet"""

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

from typing import Optional


# ========== Base Application Exception ==========


class ScoresheetException(Exception):
    """Base exception for all Scoresheet errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Import Exceptions ==========


class ParseException(ScoresheetException):
    """Raised when an input row cannot be parsed.

    A parse failure is fatal to the whole import: nothing has been applied
    to the roster when it is raised.

    Attributes
    ----------
    row_number : int
        1-based line number in the input (the header is line 1).
    reason : str
        What was wrong with the row.
    """

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


class LinkageException(ScoresheetException):
    """Raised when a referenced team, level, item or participant cannot be resolved.

    During a batch commit this aborts only the current submission.

    Attributes
    ----------
    kind : str
        What could not be resolved ("team", "level", "item", "participant").
    reference : str
        The unresolved name, code or number.
    """

    def __init__(self, kind: str, reference: str, detail: Optional[str] = None):
        self.kind = kind
        self.reference = reference
        message = f"Cannot link {kind} '{reference}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# ========== Roster Exceptions ==========


class RosterException(ScoresheetException):
    """Base exception for roster-related errors."""

    pass


class DuplicateChestNumberException(RosterException):
    """Raised when a chest number is already held by another participant."""

    pass


class ChestNumberExhaustedException(RosterException):
    """Raised when a chest number bucket has no numbers left."""

    pass


class ParticipantNotFoundException(RosterException):
    """Raised when a requested participant cannot be found."""

    pass


class InvalidGroupException(RosterException):
    """Raised when a group is empty or mixes members from different teams."""

    pass


# ========== Score Exceptions ==========


class ScoreException(ScoresheetException):
    """Base exception for score recording errors."""

    pass


class InvalidScoreException(ScoreException):
    """Raised when marks are empty or malformed, or the participant cannot compete in the item."""

    pass


class ScoreNotFoundException(ScoreException):
    """Raised when a requested score cannot be found."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(ScoresheetException):
    """Base exception for validation errors."""

    pass


class YearLevelValidationException(ValidationException):
    """Raised when a year level value is invalid."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(ScoresheetException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
