"""
Observable state primitives shared by the view-models.

Presentation code reads `Observable.value` or subscribes to changes. Every
asynchronous action reports an `ActionResult` whose state is one of the two
terminal states, `SUCCESS` or `FAILURE`; `LOADING` is only ever transient.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")
V = TypeVar("V")


class Observable(Generic[T]):
    """A value holder that notifies subscribers when the value changes."""

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        for callback in list(self._subscribers):
            callback(new_value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def __repr__(self) -> str:
        return f"Observable({self._value!r})"


class ActionState(Enum):
    """Lifecycle of one asynchronous action."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class ActionResult(Generic[V]):
    """Terminal outcome of an action."""
    state: ActionState
    value: Optional[V] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is ActionState.SUCCESS

    @classmethod
    def success(cls, value: Optional[V] = None, message: Optional[str] = None) -> "ActionResult[V]":
        return cls(state=ActionState.SUCCESS, value=value, message=message)

    @classmethod
    def failure(cls, message: str) -> "ActionResult[V]":
        return cls(state=ActionState.FAILURE, message=message)
