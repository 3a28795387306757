"""
Discovery state machine for a single maze run.

Two events drive it: the exit being discovered and the key being collected.
From them it derives which target the path guide should point at, and the
state of the special ability, which has two one-way latches:

    unlocked             - exit found while the key is still missing
    permanently locked   - key found before the exit was ever seen

Target rule:
    key collected      -> EXIT
    exit discovered    -> KEY
    otherwise          -> EXIT

``transition`` is the pure core: it takes a state and an event and returns the
new state plus the notifications that fired. ``DiscoveryStateMachine`` wraps
it for callers that want to hold the state and subscribe to notifications.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from .maze_types import PathTarget

logger = logging.getLogger(__name__)


class DiscoveryEvent(Enum):
    """Gameplay discoveries reported by the caller."""
    EXIT_DISCOVERED = "exit_discovered"
    KEY_COLLECTED = "key_collected"


@dataclass(frozen=True)
class TargetChanged:
    """The guided target moved."""
    previous: PathTarget
    target: PathTarget

    def to_dict(self) -> dict:
        return {"type": "target_changed", "previous": self.previous.value, "target": self.target.value}


@dataclass(frozen=True)
class AbilityUnlocked:
    """The special ability became available."""

    def to_dict(self) -> dict:
        return {"type": "ability_unlocked"}


DiscoveryNotification = Union[TargetChanged, AbilityUnlocked]


@dataclass(frozen=True)
class DiscoveryState:
    """Stored flags of a run. Everything else is derived from them."""
    exit_discovered: bool = False
    key_collected: bool = False
    ability_unlocked: bool = False
    ability_permanently_locked: bool = False

    @property
    def current_target(self) -> PathTarget:
        if self.key_collected:
            return PathTarget.EXIT
        if self.exit_discovered:
            return PathTarget.KEY
        return PathTarget.EXIT

    @property
    def ability_available(self) -> bool:
        return self.ability_unlocked and not self.ability_permanently_locked

    @property
    def can_finish(self) -> bool:
        return self.exit_discovered and self.key_collected

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exit_discovered": self.exit_discovered,
            "key_collected": self.key_collected,
            "current_target": self.current_target.value,
            "ability_unlocked": self.ability_unlocked,
            "ability_permanently_locked": self.ability_permanently_locked,
            "ability_available": self.ability_available,
            "can_finish": self.can_finish,
        }


def _apply_ability_gate(
    state: DiscoveryState,
) -> tuple[DiscoveryState, list[DiscoveryNotification]]:
    # Permanent lock wins over everything, forever
    if state.ability_permanently_locked:
        return state, []

    if state.key_collected and not state.exit_discovered:
        return replace(state, ability_permanently_locked=True), []

    if state.exit_discovered and not state.key_collected and not state.ability_unlocked:
        return replace(state, ability_unlocked=True), [AbilityUnlocked()]

    return state, []


def transition(
    state: DiscoveryState,
    event: DiscoveryEvent,
) -> tuple[DiscoveryState, list[DiscoveryNotification]]:
    """
    Apply one discovery event.

    Args:
        state: Current run state (not modified).
        event: The discovery that happened.

    Returns:
        Tuple of (new_state, notifications). Repeating an event that already
        happened returns the same state and no notifications.
    """
    if event is DiscoveryEvent.EXIT_DISCOVERED:
        if state.exit_discovered:
            return state, []
        new_state = replace(state, exit_discovered=True)
    elif event is DiscoveryEvent.KEY_COLLECTED:
        if state.key_collected:
            return state, []
        new_state = replace(state, key_collected=True)
    else:
        raise ValueError(f"Unknown discovery event: {event!r}")

    new_state, notifications = _apply_ability_gate(new_state)

    if new_state.current_target != state.current_target:
        notifications.append(TargetChanged(state.current_target, new_state.current_target))

    return new_state, notifications


NotificationListener = Callable[[DiscoveryNotification], None]


class DiscoveryStateMachine:
    """
    Holds the discovery state of one run.

    Not safe for concurrent use; callers that receive events from several
    threads must serialize calls.

    Example usage:
        machine = DiscoveryStateMachine()
        machine.notify_exit_discovered()   # [AbilityUnlocked(), TargetChanged(EXIT, KEY)]
        machine.current_target             # PathTarget.KEY
    """

    def __init__(
        self,
        state: Optional[DiscoveryState] = None,
        listeners: Iterable[NotificationListener] = (),
    ):
        self._state = state or DiscoveryState()
        self._listeners: list[NotificationListener] = list(listeners)

    def subscribe(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    @property
    def state(self) -> DiscoveryState:
        return self._state

    @property
    def current_target(self) -> PathTarget:
        return self._state.current_target

    @property
    def exit_discovered(self) -> bool:
        return self._state.exit_discovered

    @property
    def key_collected(self) -> bool:
        return self._state.key_collected

    @property
    def ability_unlocked(self) -> bool:
        return self._state.ability_unlocked

    @property
    def ability_permanently_locked(self) -> bool:
        return self._state.ability_permanently_locked

    def ability_available(self) -> bool:
        return self._state.ability_available

    def can_finish(self) -> bool:
        return self._state.can_finish

    def apply(self, event: DiscoveryEvent) -> list[DiscoveryNotification]:
        """Apply an event, commit the new state, then notify listeners."""
        new_state, notifications = transition(self._state, event)
        if new_state == self._state:
            return notifications

        self._state = new_state
        logger.info(
            f"Discovery: {event.value} (exit={new_state.exit_discovered}, "
            f"key={new_state.key_collected}, target={new_state.current_target.value}, "
            f"ability_unlocked={new_state.ability_unlocked}, "
            f"ability_locked={new_state.ability_permanently_locked})"
        )

        for notification in notifications:
            for listener in self._listeners:
                listener(notification)

        return notifications

    def notify_exit_discovered(self) -> list[DiscoveryNotification]:
        return self.apply(DiscoveryEvent.EXIT_DISCOVERED)

    def notify_key_collected(self) -> list[DiscoveryNotification]:
        return self.apply(DiscoveryEvent.KEY_COLLECTED)
