"""Capability checks.

Every role or ownership decision made by a route goes through this module.
"""

from typing import Iterable

from fastapi import Depends

from app.constants import Role
from app.errors import AuthorizationError
from app.users.auth import get_current_user
from app.users import schemas as user_schemas


def authorize(role: Role, allowed_roles: Iterable[Role]) -> None:
    allowed = {Role(r) for r in allowed_roles}
    if Role(role) not in allowed:
        raise AuthorizationError(f"User role {Role(role).value} is not authorized to access this route")


def role_required(allowed_roles: Iterable[Role]):
    allowed_roles = list(allowed_roles)

    def wrapper(current_user: user_schemas.UserDisplaySchema = Depends(get_current_user)):
        authorize(current_user.role, allowed_roles)
        return current_user

    return wrapper


admin_required = role_required([Role.ADMIN])


def is_admin(user: user_schemas.UserDisplaySchema) -> bool:
    return user.role == Role.ADMIN


def ensure_owner(owner_id: int, user: user_schemas.UserDisplaySchema, action: str) -> None:
    """Only the employee who submitted a claim may change it, admins included."""
    if owner_id != user.id:
        raise AuthorizationError(f"Not authorized to {action} this expense")


def ensure_can_view(owner_id: int, user: user_schemas.UserDisplaySchema) -> None:
    if not is_admin(user) and owner_id != user.id:
        raise AuthorizationError("Not authorized to access this expense")
