from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain.constants import Role
from ...domain.entities import ClaimSet
from ...domain.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthorizationGuard:
    """
    Ownership-based authorization.

    One rule governs update/delete of users and reservations: the caller
    must be an ADMIN or be the resource owner (token subject == owner email).
    No per-field ACLs, no delegation. A missing claim set always fails.
    """

    def authorize_owner_action(
            self,
            caller: Optional[ClaimSet],
            resource_owner_email: Optional[str],
    ) -> None:
        """
        Raises:
            ForbiddenError unless caller is ADMIN or owns the resource.
        """
        if caller is None:
            logger.info("Owner action denied: no caller")
            raise ForbiddenError()

        if caller.role is Role.ADMIN:
            return

        if resource_owner_email is not None and caller.subject == resource_owner_email:
            return

        logger.info(
            "Owner action denied",
            extra={"subject": caller.subject, "owner": resource_owner_email},
        )
        raise ForbiddenError()

    def require_roles(self, caller: Optional[ClaimSet], *roles: Role) -> ClaimSet:
        """
        Role gate for admin-only operations.

        Returns:
            The same ClaimSet if authorization succeeds (for chaining).
        """
        if caller is None or caller.role not in roles:
            logger.info(
                "Role requirement not met",
                extra={
                    "subject": caller.subject if caller else None,
                    "required": [r.value for r in roles],
                },
            )
            raise ForbiddenError(
                f"Missing at least one required role from: {[r.value for r in roles]}"
            )
        return caller
