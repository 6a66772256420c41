"""Roster change events and the notifier that delivers them.

Mutators in the roster, reconciler and score book emit a typed event
through the session's :class:`RosterNotifier`. Subscribers register a
callback, optionally for a single event type, or poll ``version``.
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

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from scoresheet.utils import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ParticipantChanged:
    """A participant's details or item memberships changed."""

    chest_number: int
    reason: str = ""


@dataclass(frozen=True)
class ScoreChanged:
    """A score was added, replaced or cleared."""

    item_code: str
    chest_number: int
    cleared: bool = False


@dataclass(frozen=True)
class TeamTotalsChanged:
    """Team totals were recomputed."""

    totals: Tuple[Tuple[str, float], ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, float]:
        return dict(self.totals)


RosterEvent = Union[ParticipantChanged, ScoreChanged, TeamTotalsChanged]
Callback = Callable[[Any], None]


class RosterNotifier:
    """Synchronous publish/subscribe for roster events."""

    def __init__(self):
        self._subscribers: List[Tuple[Optional[Type], Callback]] = []
        self._lock = threading.Lock()
        self.version = 0

    def subscribe(
        self, callback: Callback, event_type: Optional[Type] = None
    ) -> Callable[[], None]:
        """Register ``callback`` for every event, or only ``event_type`` events.

        Returns:
            A function that removes the subscription
        """
        entry = (event_type, callback)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    def emit(self, event: RosterEvent) -> RosterEvent:
        """Deliver ``event`` to matching subscribers and return it."""
        with self._lock:
            self.version += 1
            subscribers = list(self._subscribers)

        logger.debug(f"Event #{self.version}: {event}")
        for event_type, callback in subscribers:
            if event_type is None or isinstance(event, event_type):
                callback(event)
        return event
