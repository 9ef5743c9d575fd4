"""Order status and payment status transition rules.

Sellers may currently move an order to any status; ``TransitionPolicy``
keeps the intended graph in one place and enforces it only when strict mode
is on (``STRICT_ORDER_TRANSITIONS=true``). Staying in the same state is
always allowed.
"""

import os
from enum import Enum

from protean.exceptions import ValidationError


class OrderStatus(Enum):
    ORDER_PLACED = "Order Placed"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURN_ASSIGNED = "return_assigned"
    RETURNED_COMPLETED = "returned_completed"
    REPLACE_ASSIGNED = "replace_assigned"
    REPLACE_COMPLETED = "replace_completed"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


STATUS_TRANSITIONS = {
    OrderStatus.ORDER_PLACED: {
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
        OrderStatus.RETURN_ASSIGNED,
        OrderStatus.REPLACE_ASSIGNED,
    },
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.RETURN_ASSIGNED, OrderStatus.REPLACE_ASSIGNED},
    OrderStatus.RETURN_ASSIGNED: {OrderStatus.RETURNED_COMPLETED},
    OrderStatus.REPLACE_ASSIGNED: {OrderStatus.REPLACE_COMPLETED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.RETURNED_COMPLETED: set(),
    OrderStatus.REPLACE_COMPLETED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


def _parse(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field: [f"Unknown {field} {value!r}; expected one of {allowed}"]}) from None


class TransitionPolicy:
    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    def check_status(self, current, target) -> OrderStatus:
        """Validate a status change and return the target as an ``OrderStatus``."""
        target = _parse(OrderStatus, target, "status")
        current = _parse(OrderStatus, current, "status")
        if self.strict and target != current and target not in STATUS_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move an order from {current.value} to {target.value}"]})
        return target

    def check_payment(self, current, target) -> PaymentStatus:
        target = _parse(PaymentStatus, target, "payment_status")
        current = _parse(PaymentStatus, current, "payment_status")
        if self.strict and target != current and target not in PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot move a payment from {current.value} to {target.value}"]}
            )
        return target


def policy_from_env() -> TransitionPolicy:
    flag = os.getenv("STRICT_ORDER_TRANSITIONS", "false").strip().lower()
    return TransitionPolicy(strict=flag in ("1", "true", "yes", "on"))


_current_policy: TransitionPolicy | None = None


def get_policy() -> TransitionPolicy:
    global _current_policy
    if _current_policy is None:
        _current_policy = policy_from_env()
    return _current_policy


def set_policy(policy: TransitionPolicy) -> None:
    global _current_policy
    _current_policy = policy


def reset_policy() -> None:
    global _current_policy
    _current_policy = None
