"""Suggestion state machine.

    pending -> viewed -> applied | discarded
    pending -> applied | discarded

``applied`` and ``discarded`` are terminal. Nothing moves back to ``pending``.
"""

from typing import Dict, FrozenSet

from talentbank.domain.exceptions import InvalidTransitionError
from talentbank.domain.models import SuggestionState

ALLOWED_TRANSITIONS: Dict[SuggestionState, FrozenSet[SuggestionState]] = {
    SuggestionState.PENDING: frozenset(
        {SuggestionState.VIEWED, SuggestionState.APPLIED, SuggestionState.DISCARDED}
    ),
    SuggestionState.VIEWED: frozenset({SuggestionState.APPLIED, SuggestionState.DISCARDED}),
    SuggestionState.APPLIED: frozenset(),
    SuggestionState.DISCARDED: frozenset(),
}


def resolve_transition(current: SuggestionState, target: SuggestionState) -> SuggestionState:
    """State a suggestion ends up in when ``target`` is requested.

    - Same state: no-op, returns ``current``
    - Allowed move: returns ``target``
    - ``viewed`` after a terminal state: stale event, returns ``current``

    Raises:
        InvalidTransitionError: For any other move (back to pending, or
            between the two terminal states)
    """
    current = SuggestionState(current)
    target = SuggestionState(target)

    if current == target:
        return current

    if target in ALLOWED_TRANSITIONS[current]:
        return target

    if current.is_terminal and target == SuggestionState.VIEWED:
        return current

    raise InvalidTransitionError(current.value, target.value)


def is_stale_event(current: SuggestionState, target: SuggestionState) -> bool:
    """True when ``target`` arrives after the suggestion already moved past it."""
    return SuggestionState(current).is_terminal and SuggestionState(target) == SuggestionState.VIEWED
