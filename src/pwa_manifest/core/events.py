"""Synchronous publish/subscribe used for progress reporting and asset interception."""
from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, DefaultDict, List


class Event(str, Enum):
    """Every event a generation run can emit."""

    START = "start"
    END = "end"
    DEFAULT_ICONS_START = "defaultIconsStart"
    DEFAULT_ICONS_GEN = "defaultIconsGen"
    DEFAULT_ICONS_END = "defaultIconsEnd"
    FAVICON_START = "faviconStart"
    FAVICON_GEN = "faviconGen"
    FAVICON_END = "faviconEnd"
    APPLE_TOUCH_ICON_START = "appleTouchIconStart"
    APPLE_TOUCH_ICON_GEN = "appleTouchIconGen"
    APPLE_TOUCH_ICON_END = "appleTouchIconEnd"
    MS_TILE_START = "msTileStart"
    MS_TILE_GEN = "msTileGen"
    MS_TILE_END = "msTileEnd"
    ALL = "*"

    def __str__(self) -> str:
        return self.value


Listener = Callable[..., Any]


class EventBus:
    """Dispatch events to listeners registered for a tag or for ``*``.

    Listeners on ``*`` receive the event tag followed by the payload and are
    called before the listeners registered for the tag itself. Delivery is
    synchronous: ``emit`` returns once every listener has run.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[Event, List[Listener]] = defaultdict(list)

    def on(self, event: Event | str, listener: Listener) -> "EventBus":
        self._listeners[_coerce(event)].append(listener)
        return self

    def off(self, event: Event | str, listener: Listener) -> "EventBus":
        listeners = self._listeners.get(_coerce(event), [])
        if listener in listeners:
            listeners.remove(listener)
        return self

    def listener_count(self, event: Event | str) -> int:
        return len(self._listeners.get(_coerce(event), []))

    def emit(self, event: Event | str, *payload: Any) -> bool:
        tag = _coerce(event)
        delivered = False
        if tag is not Event.ALL:
            delivered = self._dispatch(Event.ALL, (tag, *payload))
        return self._dispatch(tag, payload) or delivered

    def _dispatch(self, tag: Event, args: tuple) -> bool:
        # Copy so listeners may unsubscribe while being called.
        listeners = list(self._listeners.get(tag, ()))
        for listener in listeners:
            listener(*args)
        return bool(listeners)


def _coerce(event: Event | str) -> Event:
    try:
        return Event(event)
    except ValueError as exc:
        raise ValueError(f"Unknown event: {event!r}") from exc
