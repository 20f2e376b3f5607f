from __future__ import annotations

import hmac
import logging
from typing import Any

from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AdminGate:
    """Shared admin password check (attendance desk, coordinator creation).

    An empty configured password rejects every attempt.
    """

    def __init__(self, admin_password: str):
        self._admin_password = admin_password or ""

    def is_valid(self, password: Any) -> bool:
        if not self._admin_password or not isinstance(password, str) or not password:
            return False
        return hmac.compare_digest(password.encode("utf-8"), self._admin_password.encode("utf-8"))

    def verify(self, password: Any, *, message: str = "Invalid password") -> None:
        if not self.is_valid(password):
            logger.warning("Rejected admin password attempt")
            raise AuthenticationError(message)
