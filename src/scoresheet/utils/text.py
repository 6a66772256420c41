"""Small text helpers shared by the roster, formatter and scoring code."""

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


def normalize_name(name: str) -> str:
    """Return the search key for a name: whitespace collapsed, case folded."""
    return " ".join(name.split()).casefold()


def abbreviate(name: str) -> str:
    """Abbreviate a name to the first two characters of every word.

    >>> abbreviate("Poetry Recital")
    'PoRe'
    """
    return "".join(word[:2] for word in name.split())


def ordinal(num: int) -> str:
    """Return ``num`` with its English ordinal suffix (1st, 2nd, 3rd, 11th...).

    Non-positive numbers are returned unchanged.
    """
    if num <= 0:
        return str(num)

    if num % 100 in (11, 12, 13):
        return f"{num}th"

    suffix = {1: "st", 2: "nd", 3: "rd"}.get(num % 10, "th")
    return f"{num}{suffix}"
