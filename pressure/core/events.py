from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

LOGGER = logging.getLogger(__name__)

# Event names emitted by the core.
GAME_INITIALIZED = "game:initialized"
TURN_CHANGED = "turn:changed"
GAME_OVER = "game:over"
MOVE_EXECUTING = "move:executing"
MOVE_SIMPLE = "move:simple"
MOVE_PUSH = "move:push"
MOVE_EXECUTED = "move:executed"
TOKEN_CAPTURED = "token:captured"
TOKEN_CAPTURE_NOTIFIED = "token:captureNotified"
TOKEN_DEACTIVATED = "token:deactivated"
AI_THINKING = "ai:thinking"
AI_PROGRESS = "ai:progress"
AI_MOVE_SELECTED = "ai:moveSelected"
AI_MOVE_EXECUTED = "ai:moveExecuted"
UNDO_COMPLETED = "undo:completed"
REDO_COMPLETED = "redo:completed"


@dataclass(frozen=True)
class ExecutionContext:
    """Tag threaded through every mutating call.

    ``is_simulation`` marks search look-ahead; ``is_committed_ai_move`` marks
    the single real re-execution of the move the search selected.
    """

    is_simulation: bool = False
    is_committed_ai_move: bool = False

    def __post_init__(self) -> None:
        if self.is_simulation and self.is_committed_ai_move:
            raise ValueError("A committed AI move cannot be a simulation.")

    def tags(self) -> Dict[str, bool]:
        return {
            "forAISimulation": self.is_simulation,
            "isActualAIMove": self.is_committed_ai_move,
        }


REAL = ExecutionContext()
SIMULATION = ExecutionContext(is_simulation=True)
COMMITTED_AI = ExecutionContext(is_committed_ai_move=True)


@dataclass(frozen=True)
class Event:
    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    is_simulation: bool = False

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


Handler = Callable[[Event], None]
Unsubscribe = Callable[[], None]


class SubscriptionMode(Enum):
    ALL = "all"
    REAL = "real"
    SIMULATION = "simulation"


@dataclass(frozen=True, eq=False)
class _Subscription:
    handler: Handler
    mode: SubscriptionMode

    def accepts(self, event: Event) -> bool:
        if self.mode is SubscriptionMode.ALL:
            return True
        if self.mode is SubscriptionMode.REAL:
            return not event.is_simulation
        return event.is_simulation


class EventBus:
    """Publish/subscribe channel shared by the engine, history and search.

    ``on`` sees every emission, ``on_real`` only committed ones. Excluded
    collaborators (UI, sound, animation) should subscribe with ``on_real``.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[_Subscription]] = {}

    def on(self, event: str, handler: Handler) -> Unsubscribe:
        return self._subscribe(event, handler, SubscriptionMode.ALL)

    def on_real(self, event: str, handler: Handler) -> Unsubscribe:
        return self._subscribe(event, handler, SubscriptionMode.REAL)

    def on_simulation(self, event: str, handler: Handler) -> Unsubscribe:
        return self._subscribe(event, handler, SubscriptionMode.SIMULATION)

    def off(self, event: str, handler: Handler) -> None:
        subscriptions = self._listeners.get(event)
        if not subscriptions:
            return
        remaining = [sub for sub in subscriptions if sub.handler is not handler]
        if remaining:
            self._listeners[event] = remaining
        else:
            del self._listeners[event]

    def emit(
        self,
        event: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        context: Optional[ExecutionContext] = None,
    ) -> Event:
        data: Dict[str, Any] = dict(payload or {})
        if context is not None:
            data.update(context.tags())
            is_simulation = context.is_simulation
        else:
            is_simulation = bool(data.get("forAISimulation", False))
        emitted = Event(name=event, payload=data, is_simulation=is_simulation)

        subscriptions = self._listeners.get(event)
        if not subscriptions:
            return emitted
        # Copy so handlers may subscribe or unsubscribe while we iterate.
        for subscription in list(subscriptions):
            if not subscription.accepts(emitted):
                continue
            try:
                subscription.handler(emitted)
            except Exception:
                LOGGER.exception("event_handler_failed", extra={"event": event})
                raise
        return emitted

    def clear(self) -> None:
        self._listeners = {}

    def registered_events(self) -> List[str]:
        return list(self._listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    # ------------------------------------------------------------------
    def _subscribe(self, event: str, handler: Handler, mode: SubscriptionMode) -> Unsubscribe:
        subscription = _Subscription(handler=handler, mode=mode)
        self._listeners.setdefault(event, []).append(subscription)

        def unsubscribe() -> None:
            subscriptions = self._listeners.get(event)
            if not subscriptions or subscription not in subscriptions:
                return
            subscriptions.remove(subscription)
            if not subscriptions:
                del self._listeners[event]

        return unsubscribe
