"""Caller identity as supplied by the upstream auth layer.

Session handling lives outside this service; requests arrive with the
authenticated user in ``X-User-Id`` and their role in ``X-User-Role``.
"""

from dataclasses import dataclass
from enum import Enum

from fastapi import Header

from storefront.shared.errors import Forbidden, Unauthorized


class Role(Enum):
    BUYER = "buyer"
    SELLER = "seller"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: Role

    @property
    def is_seller(self) -> bool:
        return self.role == Role.SELLER


def current_caller(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=""),
) -> Caller:
    user_id = x_user_id.strip()
    if not user_id:
        raise Unauthorized()

    try:
        role = Role(x_user_role.strip().lower() or Role.BUYER.value)
    except ValueError:
        raise Unauthorized(f"Unknown role {x_user_role!r}") from None

    return Caller(user_id=user_id, role=role)


def current_seller(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=""),
) -> Caller:
    caller = current_caller(x_user_id=x_user_id, x_user_role=x_user_role)
    if not caller.is_seller:
        raise Forbidden("Seller access required")
    return caller
