"""Bounded Damerau-Levenshtein distance.

The distance counts insertions, deletions, substitutions and transpositions
of adjacent characters, each at unit cost (optimal string alignment).  Only
three rows of ``min(len(a), len(b)) + 1`` cells are kept, so memory grows
with the shorter string.

The result is exact only up to ``threshold``.  Anything further away is
reported as :data:`~scoresheet.constants.DISTANCE_EXCEEDED` without finishing
the computation.
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

from typing import Union

from scoresheet.constants import DISTANCE_EXCEEDED

Distance = Union[int, float]


def damerau_levenshtein(source: str, target: str, threshold: Distance) -> Distance:
    """Compute the edit distance between two strings, giving up past ``threshold``.

    Args:
        source: First string
        target: Second string
        threshold: Largest distance of interest (``math.inf`` for no bound)

    Returns:
        The exact distance if it is at most ``threshold``, otherwise
        ``DISTANCE_EXCEEDED``
    """
    if threshold < 0:
        return DISTANCE_EXCEEDED

    length1 = len(source)
    length2 = len(target)

    if abs(length1 - length2) > threshold:
        return DISTANCE_EXCEEDED

    # Rows are indexed by the shorter string
    if length1 > length2:
        source, target = target, source
        length1, length2 = length2, length1

    current = list(range(length1 + 1))
    previous = [0] * (length1 + 1)
    before_previous = [0] * (length1 + 1)

    for j in range(1, length2 + 1):
        before_previous, previous, current = previous, current, before_previous

        current[0] = j
        row_minimum = j
        target_char = target[j - 1]

        for i in range(1, length1 + 1):
            cost = 0 if source[i - 1] == target_char else 1

            value = min(
                current[i - 1] + 1,  # deletion
                previous[i] + 1,  # insertion
                previous[i - 1] + cost,  # substitution
            )

            if (
                i > 1
                and j > 1
                and source[i - 2] == target_char
                and source[i - 1] == target[j - 2]
            ):
                value = min(value, before_previous[i - 2] + 1)

            current[i] = value
            if value < row_minimum:
                row_minimum = value

        # No cell of a later row can drop below this row's minimum
        if row_minimum > threshold:
            return DISTANCE_EXCEEDED

    result = current[length1]
    return result if result <= threshold else DISTANCE_EXCEEDED


def similarity(source: str, target: str, distance: Distance) -> float:
    """Turn a distance into a similarity fraction in ``[0, 1]``.

    ``1 - distance / max(len(source), len(target))``; an exceeded distance
    gives ``0.0`` and two empty strings give ``1.0``.
    """
    if distance == DISTANCE_EXCEEDED:
        return 0.0

    longest = max(len(source), len(target))
    if longest == 0:
        return 1.0

    return max(0.0, min(1.0, 1.0 - distance / longest))
