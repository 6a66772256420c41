"""Teams list parsing.

A teams list is tab separated ``name, team, year`` with no header. Cells
left blank take the value from the row above, so a list can be grouped by
team and year and only name the team and year once.
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

from dataclasses import dataclass
from typing import Iterable, List

from scoresheet.exceptions import ParseException, YearLevelValidationException
from scoresheet.utils import setup_logger
from scoresheet.utils.validation import validate_year_level_strict

logger = setup_logger(__name__)

TEAMS_LIST_COLUMNS = 3


@dataclass(frozen=True)
class TeamsListEntry:
    """One student from a teams list."""

    row_number: int
    full_name: str
    team_name: str
    year_level: int


def parse_teams_list(lines: Iterable[str]) -> List[TeamsListEntry]:
    """Parse teams list lines into entries, in input order.

    Blank lines are skipped, as are rows with a blank name cell (they may
    still set the team or year for the rows below).

    Args:
        lines: Lines of the file, with or without line endings

    Returns:
        One entry per named student

    Raises:
        ParseException: If a named student's year is missing or not a number
    """
    buffer = [""] * TEAMS_LIST_COLUMNS
    entries = []

    for row_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue

        cells = line.split("\t")
        for i, cell in enumerate(cells[:TEAMS_LIST_COLUMNS]):
            if cell.strip():
                buffer[i] = cell.strip()

        if not cells[0].strip():
            continue

        try:
            year_level = validate_year_level_strict(buffer[2])
        except YearLevelValidationException as e:
            raise ParseException(row_number, str(e)) from e

        entries.append(
            TeamsListEntry(
                row_number=row_number,
                full_name=buffer[0],
                team_name=buffer[1],
                year_level=year_level,
            )
        )

    logger.info(f"Read {len(entries)} students from teams list")
    return entries
