"""Explicit transition tables for status-driven entities.

A table maps ``(current_state, action)`` to the next state. Anything not in
the table is illegal and rejected with the action's reason.

Usage:
    REVIEW_TRANSITIONS = TransitionTable(
        {(Status.OPEN, Action.ACCEPT): Status.ACCEPTED},
        reject_reasons={Action.ACCEPT: "Request is no longer available"},
    )
    REVIEW_TRANSITIONS.next_state(request.status, Action.ACCEPT)
"""

from typing import Generic, Mapping, TypeVar

from libs.common.errors import IllegalStateError

S = TypeVar("S")
A = TypeVar("A")


class TransitionTable(Generic[S, A]):
    def __init__(
        self,
        transitions: Mapping[tuple[S, A], S],
        *,
        reject_reasons: Mapping[A, str],
    ):
        self._transitions = dict(transitions)
        self._reject_reasons = dict(reject_reasons)
        missing = {action for _, action in self._transitions} - set(self._reject_reasons)
        if missing:
            raise ValueError(f"No reject reason for actions: {sorted(map(str, missing))}")

    def allows(self, current: S, action: A) -> bool:
        return (current, action) in self._transitions

    def next_state(self, current: S, action: A) -> S:
        """Return the target state or raise ``IllegalStateError``."""
        try:
            return self._transitions[(current, action)]
        except KeyError:
            raise IllegalStateError(self.reject_reason(action)) from None

    def sources(self, action: A) -> list[S]:
        """States from which ``action`` is legal, for conditional updates."""
        return [state for state, act in self._transitions if act == action]

    def target(self, action: A) -> S:
        """The single state ``action`` leads to."""
        targets = {nxt for (_, act), nxt in self._transitions.items() if act == action}
        if len(targets) != 1:
            raise ValueError(f"Action {action} does not lead to a single state")
        return targets.pop()

    def reject_reason(self, action: A) -> str:
        return self._reject_reasons.get(action, "Transition not allowed")
