"""
Access Policies

Every protected route declares a RoutePolicy: the roles allowed to call
it and, optionally, which path parameter names the owner of the target
resource. One decision procedure evaluates all policies.

Usage:
    @router.get("/{id}")
    async def get_user(id: int, account: User = Depends(require(USER_OWNER_OR_ADMIN))):
        ...
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from universe_api.core.exceptions import InsufficientRoleError, NotResourceOwnerError
from universe_api.modules.users.models import UserRole

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    USER = "user"
    PROFILE = "profile"


@dataclass(frozen=True)
class Ownership:
    """The route targets a resource owned by the account named in ``param_name``."""

    resource_type: ResourceType
    param_name: str


@dataclass(frozen=True)
class RoutePolicy:
    """
    Declarative access rule for a route.

    Attributes:
        roles: Allowed roles; empty means any authenticated account
        ownership: Ownership requirement, or None
    """

    roles: frozenset[UserRole] = field(default_factory=frozenset)
    ownership: Ownership | None = None


def resolve_owner_id(
    account: Any, ownership: Ownership, path_params: Mapping[str, Any]
) -> int | None:
    """
    Compute the owning account id of the targeted resource.

    Falls back to the caller's own id when the parameter is absent.
    A non-numeric parameter resolves to None (owned by nobody).
    """
    raw = path_params.get(ownership.param_name)
    if raw is None:
        return account.id
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def check_access(account: Any, policy: RoutePolicy, path_params: Mapping[str, Any]) -> None:
    """
    Decide whether ``account`` may call a route guarded by ``policy``.

    Role gate first, then ownership gate; admins bypass ownership.

    Raises:
        InsufficientRoleError: Caller's role is not in the allowed set
        NotResourceOwnerError: Caller does not own the targeted resource
    """
    if policy.roles and account.role not in policy.roles:
        logger.warning(
            f"Access denied: user {account.id} has role '{account.role.value}', "
            f"required one of {sorted(role.value for role in policy.roles)}"
        )
        raise InsufficientRoleError(sorted(role.value for role in policy.roles))

    if policy.ownership is None or account.role == UserRole.ADMIN:
        return

    owner_id = resolve_owner_id(account, policy.ownership, path_params)
    if owner_id != account.id:
        logger.warning(
            f"Access denied: user {account.id} is not the owner of "
            f"{policy.ownership.resource_type.value} {path_params.get(policy.ownership.param_name)}"
        )
        raise NotResourceOwnerError()


AUTHENTICATED = RoutePolicy()

ADMIN_ONLY = RoutePolicy(roles=frozenset({UserRole.ADMIN}))

ABITURIENT_ONLY = RoutePolicy(roles=frozenset({UserRole.ABITURIENT}))

USER_OWNER_OR_ADMIN = RoutePolicy(ownership=Ownership(ResourceType.USER, "id"))
