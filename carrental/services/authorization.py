"""
Role-based authorization.

Every role check in the API goes through ``authorize``; routes and services
never compare role strings themselves. The authenticated user is passed to
service operations explicitly as an ``Actor``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from carrental.models.user import User, UserRole
from carrental.utils.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


class Capability(enum.Enum):
    CREATE_BOOKING = "create_booking"
    MAKE_PAYMENT = "make_payment"
    WRITE_REVIEW = "write_review"
    FILE_COMPLAINT = "file_complaint"
    MANAGE_OWN_VEHICLES = "manage_own_vehicles"
    VIEW_VENDOR_BOOKINGS = "view_vendor_bookings"
    MANAGE_ALL_BOOKINGS = "manage_all_bookings"
    UPDATE_PAYMENT_STATUS = "update_payment_status"
    MODERATE_REVIEWS = "moderate_reviews"
    RESOLVE_COMPLAINTS = "resolve_complaints"
    VIEW_ALL_RECORDS = "view_all_records"
    MANAGE_USERS = "manage_users"
    HANDLE_CONTACT_MESSAGES = "handle_contact_messages"
    CLOSE_OWN_ACCOUNT = "close_own_account"


ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.CUSTOMER: frozenset({
        Capability.CREATE_BOOKING,
        Capability.MAKE_PAYMENT,
        Capability.WRITE_REVIEW,
        Capability.FILE_COMPLAINT,
        Capability.CLOSE_OWN_ACCOUNT,
    }),
    UserRole.VENDOR: frozenset({
        Capability.MANAGE_OWN_VEHICLES,
        Capability.VIEW_VENDOR_BOOKINGS,
        Capability.FILE_COMPLAINT,
        Capability.CLOSE_OWN_ACCOUNT,
    }),
    UserRole.ADMIN: frozenset({
        Capability.MANAGE_ALL_BOOKINGS,
        Capability.UPDATE_PAYMENT_STATUS,
        Capability.MODERATE_REVIEWS,
        Capability.RESOLVE_COMPLAINTS,
        Capability.VIEW_ALL_RECORDS,
        Capability.MANAGE_USERS,
        Capability.HANDLE_CONTACT_MESSAGES,
        Capability.FILE_COMPLAINT,
    }),
}


@dataclass(frozen=True)
class Actor:
    """The authenticated user performing an operation."""
    user_id: int
    email: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.id, email=user.email, role=UserRole(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def can(actor: Actor, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(actor.role, frozenset())


def authorize(actor: Actor, capability: Capability) -> None:
    """Raise ForbiddenError unless the actor's role grants the capability."""
    if not can(actor, capability):
        logger.warning(
            f"Denied {capability.value} for user {actor.user_id} with role {actor.role.value}"
        )
        raise ForbiddenError(
            f"Role {actor.role.value} cannot {capability.value.replace('_', ' ')}",
            details={"role": actor.role.value, "capability": capability.value},
        )


def authorize_owner_or(actor: Actor, owner_id: int, capability: Capability) -> None:
    """Allow the owner of a record, or anyone holding ``capability``."""
    if actor.user_id == owner_id:
        return
    authorize(actor, capability)
