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

import math

# --- Name matching ---
# Largest edit distance the matcher still considers a candidate
MATCH_DISTANCE_THRESHOLD = 5
# Returned by the edit distance when the threshold is exceeded
DISTANCE_EXCEEDED = math.inf
# Worker threads used for the independent matching phase
MATCH_WORKERS = 4

# --- Marks and placements ---
MARKS_PRECISION = 2

# Points per place (1st, 2nd, 3rd); later places earn NO_PLACE_POINTS
SOLO_PLACE_POINTS = (10.0, 8.0, 5.0)
GROUP_PLACE_POINTS = (20.0, 15.0, 10.0)
NO_PLACE_POINTS = 0.0

# Weight-based scoring: points = average marks * weight
INDIVIDUAL_WEIGHT = 1.0
GROUP_WEIGHT = 2.0

# --- Chest numbers ---
# base(level, team) = START + (level_index * team_count + team_index) * CAPACITY
CHEST_NUMBER_START = 100
CHEST_NUMBER_CAPACITY = 100
UNASSIGNED_CHEST_NUMBER = 0

# --- Submissions ---
ITEM_SEPARATOR = ";"
# Competition item codes look like "Poetry Recital/JR"
CODE_LEVEL_SEPARATOR = "/"

# Tried in order; "GMT+10" style offsets are rewritten to "+1000" first
TIMESTAMP_FORMATS = (
    "%Y/%m/%d %I:%M:%S %p %z",
    "%Y/%m/%d %I:%M:%S %p",
    "%Y/%m/%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
)

# --- Marks text format ---
JUDGE_SEPARATOR = ","
CRITERIA_SEPARATOR = "+"

DEFAULT_SESSION_NAME = "Untitled Competition"
