"""
Status transition tables for Fixing Maritime backend.
Every status-changing operation consults the table for its entity.
"""
from typing import Dict, FrozenSet, Type
from enum import Enum

from errors import ValidationError, ConflictError
from models.enums import (
    QuoteStatus, OrderStatus, InvoiceStatus, RegistrationStatus, TruckRequestStatus
)


class TransitionTable:
    def __init__(self, entity: str, statuses: Type[Enum], edges: Dict[str, FrozenSet[str]]):
        self.entity = entity
        self.statuses = [s.value for s in statuses]
        self.edges = {state: frozenset(edges.get(state, ())) for state in self.statuses}

    def is_terminal(self, state: str) -> bool:
        return not self.edges.get(state)

    def allowed_from(self, state: str) -> FrozenSet[str]:
        return self.edges.get(state, frozenset())

    def validate(self, status) -> str:
        value = status.value if isinstance(status, Enum) else status
        if value not in self.statuses:
            raise ValidationError(
                f"Invalid status. Must be one of: {', '.join(self.statuses)}"
            )
        return value

    def check(self, current: str, target) -> bool:
        """
        Validate moving from `current` to `target`.

        Returns:
            False when target equals current (a no-op), True for a real move.

        Raises:
            ValidationError: target is not a status of this entity
            ConflictError: target is not reachable from current
        """
        target = self.validate(target)
        if target == current:
            return False
        if target not in self.allowed_from(current):
            raise ConflictError(
                f"Cannot change {self.entity} status from {current} to {target}"
            )
        return True


def _forward_only(order, cancelled: str) -> Dict[str, FrozenSet[str]]:
    """Each state may move to any later state, or to cancelled, until terminal."""
    states = [s.value for s in order]
    terminal = states[-1]
    edges = {}
    for index, state in enumerate(states):
        if state == terminal:
            edges[state] = frozenset()
            continue
        edges[state] = frozenset(states[index + 1:]) | {cancelled}
    edges[cancelled] = frozenset()
    return edges


QUOTE_TRANSITIONS = TransitionTable("quote request", QuoteStatus, {
    "pending": {"quoted", "rejected"},
    "quoted": {"accepted", "rejected"},
    "accepted": {"completed"},
})

ORDER_TRANSITIONS = TransitionTable("order", OrderStatus, {
    "pending": {"processing", "cancelled"},
    "processing": {"in_transit", "cancelled"},
    "in_transit": {"delivered", "cancelled"},
})

INVOICE_TRANSITIONS = TransitionTable("invoice", InvoiceStatus, {
    "pending": {"paid", "overdue", "cancelled"},
    "overdue": {"cancelled"},
})

REGISTRATION_TRANSITIONS = TransitionTable("registration", RegistrationStatus, {
    "pending": {"approved", "rejected"},
    "approved": {"suspended"},
})

TRUCK_REQUEST_TRANSITIONS = TransitionTable(
    "truck request",
    TruckRequestStatus,
    _forward_only(
        [
            TruckRequestStatus.pending,
            TruckRequestStatus.quoted,
            TruckRequestStatus.confirmed,
            TruckRequestStatus.assigned,
            TruckRequestStatus.in_transit,
            TruckRequestStatus.delivered,
        ],
        TruckRequestStatus.cancelled.value,
    ),
)
