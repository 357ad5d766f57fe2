from __future__ import annotations

import enum
from dataclasses import dataclass

from accounts.models import Role

from .exceptions import AccessDenied


ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class Principal:
    """The acting identity: whatever the identity provider vouched for."""

    id: int
    role: str = Role.USER

    @classmethod
    def from_user(cls, user) -> "Principal | None":
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return cls(id=user.id, role=str(getattr(user, "role", "") or Role.USER))

    @property
    def is_privileged(self) -> bool:
        return self.role in (Role.ADMIN, Role.MODERATOR)


class Operation(str, enum.Enum):
    PUBLIC_SEARCH = "public_search"
    FETCH = "fetch"
    REPORT = "report"
    LIST_LOCATIONS = "list_locations"

    CREATE = "create"
    EDIT = "edit"
    TOGGLE_STATUS = "toggle_status"
    RENEW = "renew"
    SOFT_DELETE = "soft_delete"
    LIST_MINE = "list_mine"
    UPLOAD_PHOTOS = "upload_photos"

    APPROVE = "approve"

    UPDATE_STATUS = "update_status"
    ADMIN_SOFT_DELETE = "admin_soft_delete"
    ADMIN_SEARCH = "admin_search"
    STATS = "stats"


_EVERYONE = frozenset({ANONYMOUS, Role.GUEST, Role.USER, Role.MODERATOR, Role.ADMIN})
_MEMBERS = frozenset({Role.USER, Role.MODERATOR, Role.ADMIN})
_MODERATION = frozenset({Role.MODERATOR, Role.ADMIN})
_ADMINS = frozenset({Role.ADMIN})


DEFAULT_RULES: dict[Operation, frozenset] = {
    Operation.PUBLIC_SEARCH: _EVERYONE,
    Operation.FETCH: _EVERYONE,
    Operation.REPORT: _EVERYONE,
    Operation.LIST_LOCATIONS: _EVERYONE,
    Operation.CREATE: _MEMBERS,
    Operation.EDIT: _MEMBERS,
    Operation.TOGGLE_STATUS: _MEMBERS,
    Operation.RENEW: _MEMBERS,
    Operation.SOFT_DELETE: _MEMBERS,
    Operation.LIST_MINE: _MEMBERS,
    Operation.UPLOAD_PHOTOS: _MEMBERS,
    Operation.APPROVE: _MODERATION,
    Operation.UPDATE_STATUS: _ADMINS,
    Operation.ADMIN_SOFT_DELETE: _ADMINS,
    Operation.ADMIN_SEARCH: _ADMINS,
    Operation.STATS: _ADMINS,
}


class AccessPolicy:
    """Role gate keyed by operation.

    Ownership is not checked here: owner-only mutations filter on
    `(id, owner_id)` and surface a miss as ListingNotFound.
    """

    def __init__(self, rules: dict[Operation, frozenset] | None = None):
        self.rules = dict(DEFAULT_RULES if rules is None else rules)

    def allowed_roles(self, operation: Operation) -> frozenset:
        return self.rules.get(operation, frozenset())

    def allows(self, principal: Principal | None, operation: Operation) -> bool:
        role = ANONYMOUS if principal is None else principal.role
        return role in self.allowed_roles(operation)

    def authorize(self, principal: Principal | None, operation: Operation) -> None:
        if not self.allows(principal, operation):
            raise AccessDenied(authenticated=principal is not None)


policy = AccessPolicy()
