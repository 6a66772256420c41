"""ScoresheetConfig data class."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from scoresheet.constants import (
    CHEST_NUMBER_CAPACITY,
    CHEST_NUMBER_START,
    DEFAULT_SESSION_NAME,
    GROUP_PLACE_POINTS,
    GROUP_WEIGHT,
    INDIVIDUAL_WEIGHT,
    MARKS_PRECISION,
    MATCH_DISTANCE_THRESHOLD,
    MATCH_WORKERS,
    SOLO_PLACE_POINTS,
)
from scoresheet.exceptions import InvalidConfigurationException
from scoresheet.models.enums import ItemKind


@dataclass
class ScoresheetConfig:
    """Competition configuration settings.

    Attributes
    ----------
    name : str
        Competition name.
    match_threshold : int
        Largest edit distance at which a roster name is still a candidate.
    marks_precision : int
        Decimal places average marks are rounded to.
    chest_number_start : int
        Chest number base of the first (level, team) bucket.
    chest_number_capacity : int
        Numbers available in each bucket.
    solo_place_points, group_place_points : tuple of float
        Points for 1st, 2nd, 3rd... place; later places earn nothing.
    weighted_scoring : bool
        Award ``average marks * weight`` instead of place points.
    individual_weight, group_weight : float
        Weights for individual and group participants.
    match_workers : int
        Threads used to match submissions.
    stop_on_linkage_error : bool
        Abort the rest of an import on the first linkage error instead of
        recording it against the submission and carrying on.
    """

    name: str = DEFAULT_SESSION_NAME
    match_threshold: int = MATCH_DISTANCE_THRESHOLD
    marks_precision: int = MARKS_PRECISION
    chest_number_start: int = CHEST_NUMBER_START
    chest_number_capacity: int = CHEST_NUMBER_CAPACITY
    solo_place_points: Tuple[float, ...] = field(
        default_factory=lambda: tuple(SOLO_PLACE_POINTS)
    )
    group_place_points: Tuple[float, ...] = field(
        default_factory=lambda: tuple(GROUP_PLACE_POINTS)
    )
    weighted_scoring: bool = False
    individual_weight: float = INDIVIDUAL_WEIGHT
    group_weight: float = GROUP_WEIGHT
    match_workers: int = MATCH_WORKERS
    stop_on_linkage_error: bool = False

    def place_points(self, kind: ItemKind) -> Tuple[float, ...]:
        """Point schedule for an item kind."""
        if kind is ItemKind.SOLO:
            return self.solo_place_points
        return self.group_place_points

    def weight(self, kind: ItemKind) -> float:
        """Scoring weight for an item kind's participants."""
        if kind is ItemKind.SOLO:
            return self.individual_weight
        return self.group_weight

    def validate(self) -> None:
        """Check the settings are usable.

        Raises:
            InvalidConfigurationException: On the first invalid setting
        """
        if self.match_threshold < 0:
            raise InvalidConfigurationException(
                f"match_threshold must not be negative: {self.match_threshold}"
            )
        if self.marks_precision < 0:
            raise InvalidConfigurationException(
                f"marks_precision must not be negative: {self.marks_precision}"
            )
        if self.chest_number_start < 0:
            raise InvalidConfigurationException(
                f"chest_number_start must not be negative: {self.chest_number_start}"
            )
        if self.chest_number_capacity < 2:
            raise InvalidConfigurationException(
                "chest_number_capacity must be at least 2: "
                f"{self.chest_number_capacity}"
            )
        if self.individual_weight < 0 or self.group_weight < 0:
            raise InvalidConfigurationException("Scoring weights must not be negative")
        if any(p < 0 for p in self.solo_place_points + self.group_place_points):
            raise InvalidConfigurationException("Place points must not be negative")
        if self.match_workers < 1:
            raise InvalidConfigurationException(
                f"match_workers must be at least 1: {self.match_workers}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "match_threshold": self.match_threshold,
            "marks_precision": self.marks_precision,
            "chest_number_start": self.chest_number_start,
            "chest_number_capacity": self.chest_number_capacity,
            "solo_place_points": list(self.solo_place_points),
            "group_place_points": list(self.group_place_points),
            "weighted_scoring": self.weighted_scoring,
            "individual_weight": self.individual_weight,
            "group_weight": self.group_weight,
            "match_workers": self.match_workers,
            "stop_on_linkage_error": self.stop_on_linkage_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoresheetConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            name=data.get("name", DEFAULT_SESSION_NAME),
            match_threshold=data.get("match_threshold", MATCH_DISTANCE_THRESHOLD),
            marks_precision=data.get("marks_precision", MARKS_PRECISION),
            chest_number_start=data.get("chest_number_start", CHEST_NUMBER_START),
            chest_number_capacity=data.get(
                "chest_number_capacity", CHEST_NUMBER_CAPACITY
            ),
            solo_place_points=tuple(
                data.get("solo_place_points", SOLO_PLACE_POINTS)
            ),
            group_place_points=tuple(
                data.get("group_place_points", GROUP_PLACE_POINTS)
            ),
            weighted_scoring=data.get("weighted_scoring", False),
            individual_weight=data.get("individual_weight", INDIVIDUAL_WEIGHT),
            group_weight=data.get("group_weight", GROUP_WEIGHT),
            match_workers=data.get("match_workers", MATCH_WORKERS),
            stop_on_linkage_error=data.get("stop_on_linkage_error", False),
        )
