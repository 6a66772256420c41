"""Submissions export parsing.

Turns a tab separated registration export (one header row, then one row
per form submission) into :class:`~scoresheet.models.submission.Submission`
records. Each header cell is given a :class:`~scoresheet.models.enums.ColumnRole`
from its text; cells of ignored columns are kept in ``raw_fields`` only.

Any malformed row aborts the whole import with a
:class:`~scoresheet.exceptions.ParseException`, before anything is applied.
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

import re
from datetime import datetime, timezone
from typing import Iterable, List, Union

from scoresheet.constants import ITEM_SEPARATOR, TIMESTAMP_FORMATS
from scoresheet.exceptions import ParseException, YearLevelValidationException
from scoresheet.models.enums import ColumnRole, ItemKind
from scoresheet.models.submission import Submission, SubmissionColumn
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.utils import setup_logger
from scoresheet.utils.text import normalize_name
from scoresheet.utils.validation import (
    validate_email,
    validate_phone,
    validate_year_level_strict,
)

logger = setup_logger(__name__)

REQUIRED_ROLES = (ColumnRole.TIMESTAMP, ColumnRole.NAME, ColumnRole.YEAR)

# "GMT+10", "GMT-3:30", "UTC" at the end of Google Forms timestamps
_ZONE_SUFFIX = re.compile(r"\s*(?:GMT|UTC)(?:([+-])(\d{1,2})(?::?(\d{2}))?)?$")


def parse_timestamp(text: str) -> datetime:
    """Parse a submission timestamp.

    Zoned timestamps are converted to UTC and returned naive so that every
    parsed timestamp can be compared with every other.

    Raises:
        ValueError: If no known format matches
    """
    text = text.strip()
    zone = _ZONE_SUFFIX.search(text)
    if zone:
        sign, hours, minutes = zone.groups()
        offset = f"{sign}{int(hours):02d}{minutes or '00'}" if sign else "+0000"
        text = f"{text[:zone.start()]} {offset}"

    parsed = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        raise ValueError(f"Unrecognised timestamp '{text}'")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def split_item_codes(cell: str) -> List[str]:
    """Split an items cell into codes, dropping blanks."""
    return [code.strip() for code in cell.split(ITEM_SEPARATOR) if code.strip()]


class SubmissionNormalizer:
    """Parses a submissions export against a roster.

    The roster is only read: levels come from the claimed year, teams from
    the claimed team name, and item codes are resolved for display.
    """

    def __init__(self, roster: RosterIndex):
        self.roster = roster

    def read_header(self, header: str) -> List[SubmissionColumn]:
        """Classify the header cells.

        Raises:
            ParseException: If a required column is missing
        """
        columns = [
            SubmissionColumn.classify(index, cell)
            for index, cell in enumerate(header.rstrip("\r\n").split("\t"))
        ]

        roles = {column.role for column in columns}
        for role in REQUIRED_ROLES:
            if role not in roles:
                raise ParseException(1, f"Missing {role.value} column")

        logger.debug(
            "Columns: "
            + ", ".join(f"{column.header!r}={column.role.value}" for column in columns)
        )
        return columns

    def parse(self, data: Union[str, Iterable[str]]) -> List[Submission]:
        """Parse a whole export.

        Args:
            data: File contents, or its lines

        Returns:
            Submissions in file order

        Raises:
            ParseException: On the first malformed row
        """
        lines = data.splitlines() if isinstance(data, str) else list(data)
        if not lines or not lines[0].strip():
            raise ParseException(1, "Missing header row")

        columns = self.read_header(lines[0])
        submissions = []

        for row_number, line in enumerate(lines[1:], start=2):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            submissions.append(self.parse_row(row_number, line.split("\t"), columns))

        logger.info(f"Parsed {len(submissions)} submissions")
        return submissions

    def parse_row(
        self, row_number: int, cells: List[str], columns: List[SubmissionColumn]
    ) -> Submission:
        """Build a submission from one row's cells.

        Raises:
            ParseException: If the cell count, timestamp or year is wrong
        """
        if len(cells) != len(columns):
            raise ParseException(
                row_number, f"Expected {len(columns)} columns, found {len(cells)}"
            )

        names: List[str] = []
        solo_codes: List[str] = []
        group_codes: List[str] = []
        fields = {}

        for column, cell in zip(columns, cells):
            cell = cell.strip()
            if column.role is ColumnRole.NAME:
                if cell:
                    names.append(cell)
            elif column.role is ColumnRole.SOLO_ITEMS:
                solo_codes.extend(split_item_codes(cell))
            elif column.role is ColumnRole.GROUP_ITEMS:
                group_codes.extend(split_item_codes(cell))
            elif column.role is not ColumnRole.IGNORE:
                fields.setdefault(column.role, cell)

        try:
            timestamp = parse_timestamp(fields.get(ColumnRole.TIMESTAMP, ""))
        except ValueError as e:
            raise ParseException(row_number, str(e)) from e

        try:
            year_level = validate_year_level_strict(fields.get(ColumnRole.YEAR, ""))
        except YearLevelValidationException as e:
            raise ParseException(row_number, str(e)) from e

        email = fields.get(ColumnRole.EMAIL, "")
        email_result = validate_email(email)
        if not email_result:
            logger.warning(f"Row {row_number}: {email_result.error_message}")

        phone = fields.get(ColumnRole.PHONE_NUMBER, "")
        phone_result = validate_phone(phone)
        if not phone_result:
            logger.warning(f"Row {row_number}: {phone_result.error_message}")

        claimed_name = " ".join(" ".join(names).split())
        team_name = fields.get(ColumnRole.TEAM, "")
        level = self.roster.level_for_year(year_level)

        submission = Submission(
            row_number=row_number,
            raw_fields=list(cells),
            timestamp=timestamp,
            claimed_name=claimed_name,
            search_key=normalize_name(claimed_name),
            claimed_year_level=year_level,
            email=email.lower(),
            phone=phone,
            claimed_level=level,
            claimed_team_name=team_name,
            claimed_team=self.roster.find_team(team_name),
            solo_item_codes=solo_codes,
            group_item_codes=group_codes,
        )
        submission.details = self.describe_items(submission)
        return submission

    def describe_items(self, submission: Submission) -> List[str]:
        """Short codes of the requested items, for operator display."""
        details = []
        for codes, kind in (
            (submission.solo_item_codes, ItemKind.SOLO),
            (submission.group_item_codes, ItemKind.GROUP),
        ):
            for code in codes:
                item = self.roster.resolve_item_code(
                    code, submission.claimed_level, kind
                )
                details.append(item.short_code if item else f"{code}?")
        return details
