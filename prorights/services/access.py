"""
Actor identity and role-based permissions.

The authenticated identity travels as an explicit ``Actor`` value into every
service call. What a role may do is decided in one place, ``allowed_actions``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet
from uuid import UUID

from prorights.core.exceptions import PermissionDeniedError
from prorights.models.user import UserRole


class Action(str, Enum):
    """Operations guarded by role."""
    REGISTER_WORK = "register_work"
    MANAGE_CONTRIBUTORS = "manage_contributors"
    VIEW_WORKS = "view_works"
    REVIEW_WORK = "review_work"
    APPLY_LICENSE = "apply_license"
    VIEW_LICENSES = "view_licenses"
    REVIEW_LICENSE = "review_license"
    SUBMIT_USAGE = "submit_usage"
    VIEW_USAGE = "view_usage"
    COMPUTE_DISTRIBUTIONS = "compute_distributions"
    VIEW_ROYALTIES = "view_royalties"
    SETTLE_PAYMENT = "settle_payment"


_ARTIST_ACTIONS = frozenset({
    Action.REGISTER_WORK,
    Action.MANAGE_CONTRIBUTORS,
    Action.VIEW_WORKS,
    Action.VIEW_ROYALTIES,
})

_BUSINESS_ACTIONS = frozenset({
    Action.APPLY_LICENSE,
    Action.VIEW_LICENSES,
    Action.SUBMIT_USAGE,
    Action.VIEW_USAGE,
})

# Admins review and settle but do not register works or report usage.
_ADMIN_ACTIONS = frozenset({
    Action.MANAGE_CONTRIBUTORS,
    Action.VIEW_WORKS,
    Action.REVIEW_WORK,
    Action.VIEW_LICENSES,
    Action.REVIEW_LICENSE,
    Action.VIEW_USAGE,
    Action.COMPUTE_DISTRIBUTIONS,
    Action.VIEW_ROYALTIES,
    Action.SETTLE_PAYMENT,
})


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""
    id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def allowed_actions(role: UserRole) -> FrozenSet[Action]:
    match role:
        case UserRole.ARTIST:
            return _ARTIST_ACTIONS
        case UserRole.BUSINESS:
            return _BUSINESS_ACTIONS
        case UserRole.ADMIN:
            return _ADMIN_ACTIONS
    raise ValueError(f"Unknown role: {role!r}")


def require(actor: Actor, action: Action) -> None:
    """Raise PermissionDeniedError unless the actor's role allows the action."""
    if action not in allowed_actions(actor.role):
        raise PermissionDeniedError(
            f"Role '{actor.role.value}' is not allowed to {action.value.replace('_', ' ')}"
        )


def require_owner_or_admin(actor: Actor, owner_id: UUID, what: str) -> None:
    """Admins are exempt from ownership checks."""
    if actor.is_admin:
        return
    if actor.id != owner_id:
        raise PermissionDeniedError(f"Not the owner of this {what}")
