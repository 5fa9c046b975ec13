"""Subscription status transitions."""
from datetime import datetime
from typing import Dict, FrozenSet

from quickfix.app.exceptions import IllegalTransitionError
from quickfix.models.enums import SubscriptionStatus as S

ALLOWED_TRANSITIONS: Dict[S, FrozenSet[S]] = {
    S.initiated: frozenset({S.pending_manual_verification, S.active, S.failed}),
    S.pending_manual_verification: frozenset({S.active, S.failed, S.cancelled}),
    S.active: frozenset({S.cancelled, S.expired}),
    S.failed: frozenset({S.pending_manual_verification, S.active}),
    S.cancelled: frozenset(),
    S.expired: frozenset(),
}

# Statuses an admin may set directly.
ADMIN_TARGET_STATUSES = frozenset({S.active, S.failed, S.cancelled})


def can_transition(from_status: S, to_status: S) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def validate_transition(from_status: S, to_status: S) -> None:
    """Raise IllegalTransitionError unless from_status -> to_status is an allowed edge."""
    if not can_transition(from_status, to_status):
        raise IllegalTransitionError(S(from_status).value, S(to_status).value)


def add_one_year(moment: datetime) -> datetime:
    """Same calendar date next year; Feb 29 rolls over to Mar 1."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, month=3, day=1)
