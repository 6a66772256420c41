"""CompetitionItem data class."""

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
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from scoresheet.constants import CODE_LEVEL_SEPARATOR
from scoresheet.models.enums import ItemKind
from scoresheet.models.level import Level
from scoresheet.models.score import Score
from scoresheet.utils.text import abbreviate

if TYPE_CHECKING:
    from scoresheet.models.participant import Group, Individual


@dataclass(eq=False)
class CompetitionItem:
    """An event that participants enter and are scored in.

    Items are identified by ``code``, written ``{name}/{level code}``
    (e.g. ``"Poetry Recital/JR"``). Items without a level suffix are open
    to every level.

    Attributes
    ----------
    code : str
        Unique item code.
    kind : ItemKind
        Solo items are entered by individuals, group items by groups.
    is_on_stage : bool
        Whether the item is performed on stage (solo items only).
    duration_minutes : int, optional
        Scheduled length of the item.
    level : Level, optional
        Level resolved from the code suffix.
    individuals : list of Individual
        Individuals who joined the item.
    groups : list of Group
        Groups entered in the item.
    scores : dict
        Scores keyed by chest number, in entry order.
    """

    code: str
    kind: ItemKind = ItemKind.SOLO
    is_on_stage: bool = False
    duration_minutes: Optional[int] = None
    level: Optional[Level] = None
    individuals: List["Individual"] = field(default_factory=list)
    groups: List["Group"] = field(default_factory=list)
    scores: Dict[int, Score] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.code.rpartition(CODE_LEVEL_SEPARATOR)[0] or self.code

    @property
    def level_code(self) -> str:
        head, sep, tail = self.code.rpartition(CODE_LEVEL_SEPARATOR)
        return tail if sep and head else ""

    @property
    def short_code(self) -> str:
        """Abbreviated code for compact display, e.g. ``"PoRe/JR"``."""
        short = abbreviate(self.name)
        if self.level_code:
            return f"{short}{CODE_LEVEL_SEPARATOR}{self.level_code}"
        return short

    @property
    def is_solo(self) -> bool:
        return self.kind is ItemKind.SOLO

    @property
    def participants(self) -> List[Union["Individual", "Group"]]:
        """The participants eligible to hold a score in this item."""
        if self.is_solo:
            return list(self.individuals)
        return list(self.groups)

    def __repr__(self) -> str:
        return f"CompetitionItem({self.code!r}, {self.kind.value})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize item definition to dictionary."""
        data: Dict[str, Any] = {"code": self.code, "kind": self.kind.value}
        if self.is_solo:
            data["is_on_stage"] = self.is_on_stage
        if self.duration_minutes is not None:
            data["duration_minutes"] = self.duration_minutes
        return data

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], level: Optional[Level] = None
    ) -> "CompetitionItem":
        """Deserialize an item definition from dictionary."""
        kind = ItemKind(data.get("kind", ItemKind.SOLO.value))
        duration = data.get("duration_minutes")
        return cls(
            code=data["code"],
            kind=kind,
            is_on_stage=bool(data.get("is_on_stage", False)) and kind is ItemKind.SOLO,
            duration_minutes=int(duration) if duration is not None else None,
            level=level,
        )
