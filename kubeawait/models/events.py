"""Watch event variants emitted by a resource subscription."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class WatchEventType(StrEnum):
    """Discriminator for WatchEvent variants."""

    APPLIED = "applied"
    DELETED = "deleted"
    RESTARTED = "restarted"


@dataclass(frozen=True)
class Applied:
    """The object was created or modified; carries the new state."""

    state: Any
    type: WatchEventType = field(default=WatchEventType.APPLIED, init=False)


@dataclass(frozen=True)
class Deleted:
    """The object was deleted; carries its last known state."""

    state: Any = None
    type: WatchEventType = field(default=WatchEventType.DELETED, init=False)


@dataclass(frozen=True)
class Restarted:
    """The subscription (re)listed the collection.

    ``states`` is the full snapshot set at the time of the list, in the order
    returned by the API server.
    """

    states: tuple[Any, ...] = ()
    type: WatchEventType = field(default=WatchEventType.RESTARTED, init=False)


WatchEvent = Applied | Deleted | Restarted
