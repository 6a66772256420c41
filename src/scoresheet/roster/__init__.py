"""Roster: participants, teams, levels, items and chest numbers."""

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

from scoresheet.roster.chest_numbers import ChestNumberAllocator, chest_number_base
from scoresheet.roster.roster_index import RosterIndex
from scoresheet.roster.teams_list import TeamsListEntry, parse_teams_list

__all__ = [
    "ChestNumberAllocator",
    "RosterIndex",
    "TeamsListEntry",
    "chest_number_base",
    "parse_teams_list",
]
