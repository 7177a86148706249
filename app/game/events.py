from typing import Any, Protocol, runtime_checkable

from app.core.enums import EventType


@runtime_checkable
class EventSink(Protocol):
    """Fire-and-forget side effect dispatch (quest progress, audit trail).

    Callers never inspect the result of ``emit``.
    """

    def emit(self, event_type: EventType, payload: dict[str, Any]) -> None: ...
