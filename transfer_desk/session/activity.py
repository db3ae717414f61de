"""User activity events feeding the inactivity timer"""

from collections import defaultdict
from enum import Enum
from typing import Callable, DefaultDict, List

ActivityListener = Callable[[str], None]


class ActivityEvent(str, Enum):
    """Interactions that count as the user being present"""

    POINTER_DOWN = "mousedown"
    KEY_DOWN = "keydown"
    SCROLL = "scroll"
    TOUCH_START = "touchstart"
    POINTER_MOVE = "mousemove"


RECOGNIZED_EVENTS = tuple(event.value for event in ActivityEvent)


def _event_name(event: str) -> str:
    return event.value if isinstance(event, ActivityEvent) else event


class ActivitySource:
    """
    Dispatches named interaction events to listeners.

    The presentation layer calls `emit()` for every interaction it sees; the
    core subscribes to the names it cares about.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[ActivityListener]] = defaultdict(list)

    def add_listener(self, event: str, listener: ActivityListener) -> None:
        self._listeners[_event_name(event)].append(listener)

    def remove_listener(self, event: str, listener: ActivityListener) -> None:
        listeners = self._listeners.get(_event_name(event), [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str) -> None:
        name = _event_name(event)
        for listener in list(self._listeners.get(name, [])):
            listener(name)

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(_event_name(event), []))
        return sum(len(listeners) for listeners in self._listeners.values())
