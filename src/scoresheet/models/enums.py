"""Enumerations shared across the Scoresheet models."""

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

from enum import Enum
from typing import Optional


class ItemKind(Enum):
    """Whether a competition item is entered by individuals or by groups."""

    SOLO = "solo"
    GROUP = "group"


class SubmissionStatus(Enum):
    """Reconciliation outcome of a single submission."""

    PENDING = "Pending"
    MISMATCH = "Mismatch"
    INVALID = "Invalid"
    EDITED = "Edited"
    ASSIGNED = "Assigned"
    IGNORED = "Ignored"
    ERROR = "Error"

    @property
    def is_applied(self) -> bool:
        return self in (SubmissionStatus.ASSIGNED, SubmissionStatus.EDITED)

    @property
    def needs_review(self) -> bool:
        return self in (
            SubmissionStatus.MISMATCH,
            SubmissionStatus.INVALID,
            SubmissionStatus.ERROR,
        )


class ColumnRole(Enum):
    """Role of a column in a submissions export.

    Declaration order is the order header cells are checked in; the first
    role whose keyword occurs in the header wins.
    """

    TIMESTAMP = "Timestamp"
    EMAIL = "Email"
    PHONE_NUMBER = "Phone Number"
    TEAM = "Team"
    NAME = "Name"
    YEAR = "Year"
    SOLO_ITEMS = "Solo Items"
    GROUP_ITEMS = "Group Items"
    IGNORE = "Ignore"

    @property
    def keyword(self) -> str:
        return _squash(self.value)

    @classmethod
    def classify(cls, header: str) -> "ColumnRole":
        """Return the role for a header cell, ``IGNORE`` if nothing matches."""
        squashed = _squash(header)
        for role in cls:
            if role is cls.IGNORE:
                continue
            if role.keyword in squashed:
                return role
        return cls.IGNORE


def _squash(text: Optional[str]) -> str:
    return "".join((text or "").split()).upper()


class Provenance(Enum):
    """How a submission came to be applied to the roster."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


class FixAction(Enum):
    """Operator action suggested for a submission that did not auto-apply."""

    NONE = "None"
    APPLIED = "Applied"
    IGNORE = "Ignore"
    EDIT = "Edit"
    ASSIGN = "Assign"
