"""
Role and center-ownership checks.

The predicates here are pure functions of the identity and the resource's
center, so every route reaches the same verdict for the same inputs.
``ROUTE_POLICIES`` is the single table of which roles may call which
operation; endpoints look their entry up through ``require_policy``.
"""

from __future__ import annotations

from collections.abc import Iterable

from app.core.exceptions import AuthorizationError
from app.models.user import Role, User

ADMIN_ROLES = frozenset({Role.SUPERADMIN, Role.ADMIN_CENTER})
STAFF_ROLES = ADMIN_ROLES | {Role.TRAINER}
SUPERADMIN_ONLY = frozenset({Role.SUPERADMIN})

ROUTE_POLICIES: dict[str, frozenset[Role]] = {
    # Access
    "access.scan": ADMIN_ROLES,
    # Users
    "users.list": ADMIN_ROLES,
    "users.read": ADMIN_ROLES,
    "users.create": ADMIN_ROLES,
    "users.update": ADMIN_ROLES,
    "users.delete": ADMIN_ROLES,
    # Centers
    "centers.create": SUPERADMIN_ONLY,
    "centers.update": ADMIN_ROLES,
    "centers.delete": SUPERADMIN_ONLY,
    "centers.users": ADMIN_ROLES,
    # Classes
    "classes.write": STAFF_ROLES,
    # Machines
    "machines.write": ADMIN_ROLES,
    # Tickets
    "tickets.manage": ADMIN_ROLES,
    # Memberships
    "memberships.write": ADMIN_ROLES,
    # Exercise and meal libraries
    "exercises.write": STAFF_ROLES,
    "exercises.import": ADMIN_ROLES,
    "meals.write": STAFF_ROLES,
    "meals.import": ADMIN_ROLES,
    # Personal plans: owners always; these roles for anyone's plan
    "workouts.manage_any": STAFF_ROLES,
    "diets.manage_any": STAFF_ROLES,
}


def has_role(user: User, allowed: Iterable[Role]) -> bool:
    return user.role in set(allowed)


def can_manage_center(user: User, center_id: str | None) -> bool:
    """Return True if *user* may administer resources of *center_id*.

    SUPERADMIN always may. ADMIN_CENTER may only for the center it
    administers. No other role administers centers.
    """
    if user.role == Role.SUPERADMIN:
        return True
    if user.role == Role.ADMIN_CENTER:
        managed = user.managed_center_id
        return managed is not None and center_id == managed
    return False


def ensure_role(user: User, allowed: Iterable[Role]) -> None:
    if not has_role(user, allowed):
        raise AuthorizationError()


def ensure_center_access(user: User, center_id: str | None) -> None:
    if not can_manage_center(user, center_id):
        if user.role == Role.ADMIN_CENTER:
            raise AuthorizationError("You do not have access to this center")
        raise AuthorizationError()


def policy_roles(key: str) -> frozenset[Role]:
    """Roles allowed for the operation *key*; unknown keys allow nobody."""
    return ROUTE_POLICIES.get(key, frozenset())


def ensure_owner_or_policy(user: User, owner_id: str, key: str) -> None:
    """Allow the owner of a personal resource, or any role granted *key*."""
    if user.id == owner_id:
        return
    if not has_role(user, policy_roles(key)):
        raise AuthorizationError("You do not have permission to modify this resource")
