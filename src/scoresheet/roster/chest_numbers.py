"""Chest number allocation.

Chest numbers are handed out from buckets, one per (level, team) pair::

    base = start + (level_index * team_count + team_index) * capacity

The ``n``-th individual placed in a bucket gets ``base + n``. Groups of a
team share one extra bucket per team, on a virtual level indexed just past
the last real level.
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

from typing import Dict, Iterable, Tuple

from scoresheet.constants import CHEST_NUMBER_CAPACITY, CHEST_NUMBER_START
from scoresheet.exceptions import ChestNumberExhaustedException
from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


def chest_number_base(
    level_index: int,
    team_index: int,
    team_count: int,
    start: int = CHEST_NUMBER_START,
    capacity: int = CHEST_NUMBER_CAPACITY,
) -> int:
    """Return the base number of the (level, team) bucket."""
    return start + (level_index * team_count + team_index) * capacity


class ChestNumberAllocator:
    """Deterministic per-bucket chest number allocation.

    Individual buckets keep a counter, so numbers follow input order.
    Group numbers are not counted: every request rescans the group numbers
    already in use for the team, so groups added out of order still get a
    number above all existing ones.
    """

    def __init__(
        self,
        team_count: int,
        level_count: int,
        start: int = CHEST_NUMBER_START,
        capacity: int = CHEST_NUMBER_CAPACITY,
    ):
        self.team_count = team_count
        self.level_count = level_count
        self.start = start
        self.capacity = capacity
        self._offsets: Dict[Tuple[int, int], int] = {}

    def base(self, level_index: int, team_index: int) -> int:
        return chest_number_base(
            level_index, team_index, self.team_count, self.start, self.capacity
        )

    @property
    def group_level_index(self) -> int:
        return self.level_count

    def bucket_of(self, chest_number: int) -> Tuple[int, int]:
        """Return the (level index, team index) bucket holding a number."""
        slot = (chest_number - self.start) // self.capacity
        return divmod(slot, self.team_count)

    def next_individual(self, level_index: int, team_index: int) -> int:
        """Allocate the next individual number in a bucket.

        Raises:
            ChestNumberExhaustedException: If the bucket is full
        """
        key = (level_index, team_index)
        offset = self._offsets.get(key, 0) + 1
        self._check_offset(offset, level_index, team_index)
        self._offsets[key] = offset
        return self.base(level_index, team_index) + offset

    def observe(self, chest_number: int) -> None:
        """Record a number assigned elsewhere so it is never handed out again."""
        if chest_number < self.start:
            return
        level_index, team_index = self.bucket_of(chest_number)
        if level_index >= self.level_count:
            return
        offset = chest_number - self.base(level_index, team_index)
        key = (level_index, team_index)
        if offset > self._offsets.get(key, 0):
            self._offsets[key] = offset

    def next_group(self, team_index: int, existing: Iterable[int]) -> int:
        """Allocate a group number for a team.

        Args:
            team_index: Index of the group's team
            existing: Every group chest number currently in use

        Returns:
            One more than the highest number already in the team's group
            bucket, or the bucket's first number

        Raises:
            ChestNumberExhaustedException: If the bucket is full
        """
        base = self.base(self.group_level_index, team_index)
        in_bucket = [n for n in existing if base < n < base + self.capacity]
        number = max(in_bucket) + 1 if in_bucket else base + 1
        self._check_offset(number - base, self.group_level_index, team_index)
        return number

    def _check_offset(self, offset: int, level_index: int, team_index: int) -> None:
        if offset >= self.capacity:
            logger.error(
                f"Chest number bucket (level {level_index}, team {team_index}) is full"
            )
            raise ChestNumberExhaustedException(
                f"No chest numbers left for level {level_index}, team {team_index} "
                f"(capacity {self.capacity})"
            )
