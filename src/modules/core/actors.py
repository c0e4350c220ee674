"""Request actor passed explicitly into every service call that needs it.

The authentication layer identifies the user; ``Actor.from_user`` turns that
identity into the role model used by the business rules:

- ``admin``: superusers and members of the ``admin`` group.
- ``editor``: members of the ``editor`` group (catalogue and order handling).
- ``customer``: everyone else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_CUSTOMER = "customer"


@dataclass(frozen=True)
class Actor:
    user_id: Optional[int]
    role: str = ROLE_CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_staff_member(self) -> bool:
        """Admins and editors may manage the catalogue and order fulfilment."""
        return self.role in (ROLE_ADMIN, ROLE_EDITOR)

    def owns(self, owner_id: Any) -> bool:
        return self.user_id is not None and owner_id == self.user_id

    @classmethod
    def from_user(cls, user: Any) -> Actor:
        if user is None or not getattr(user, "is_authenticated", False):
            return cls(user_id=None)
        if getattr(user, "is_superuser", False):
            return cls(user_id=user.pk, role=ROLE_ADMIN)
        groups = set(user.groups.values_list("name", flat=True))
        if ROLE_ADMIN in groups:
            role = ROLE_ADMIN
        elif ROLE_EDITOR in groups:
            role = ROLE_EDITOR
        else:
            role = ROLE_CUSTOMER
        return cls(user_id=user.pk, role=role)
