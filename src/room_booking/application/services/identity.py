from __future__ import annotations

import logging
from dataclasses import dataclass

from ...domain.entities import User
from ...domain.exceptions import UnknownSubjectError
from ...domain.ports import UserStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IdentityResolver:
    """
    Maps a validated token subject to the durable user record.

    A subject that is valid per token but absent per store (e.g. the user
    was deleted after issuance) is an authentication failure, not a 500.
    """

    user_store: UserStore

    def resolve(self, subject: str) -> User:
        user = self.user_store.find_by_email(subject)
        if user is None:
            logger.warning("Token subject has no user record", extra={"subject": subject})
            raise UnknownSubjectError(subject)
        return user
