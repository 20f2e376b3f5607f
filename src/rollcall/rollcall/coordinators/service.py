from __future__ import annotations

import logging
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.admin_gate import AdminGate
from ..common.validators import optional_text
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Coordinator
from .repository import CoordinatorRepository

logger = logging.getLogger(__name__)


def coordinator_to_dict(coordinator: Coordinator) -> dict[str, Any]:
    return {
        "id": coordinator.id,
        "name": coordinator.name,
        "username": coordinator.username,
        "registrationNo": coordinator.registration_no,
    }


class CoordinatorService:
    """Use case: create coordinators (admin) and log them in."""

    def __init__(self, coordinators: CoordinatorRepository, admin_gate: AdminGate):
        self._coordinators = coordinators
        self._admin_gate = admin_gate

    def create_coordinator(
        self,
        *,
        admin_password: Any,
        name: Any,
        username: Any,
        password: Any,
        registration_no: Any,
    ) -> dict[str, Any]:
        self._admin_gate.verify(admin_password, message="Invalid admin password")

        name_s = optional_text(name)
        username_s = optional_text(username)
        registration_s = optional_text(registration_no)
        if not name_s or not username_s or not registration_s or not isinstance(password, str) or not password:
            raise ValidationError("All fields are required: name, username, password, registrationNo")

        if self._coordinators.get_by_username(username_s):
            raise ValidationError("Username already exists")
        if self._coordinators.get_by_registration(registration_s):
            raise ValidationError("Registration number already exists")

        coordinator = self._coordinators.create(
            username=username_s,
            password_hash=generate_password_hash(password),
            name=name_s,
            registration_no=registration_s,
        )
        logger.info("Created coordinator %s (id=%s)", coordinator.username, coordinator.id)
        return coordinator_to_dict(coordinator)

    def authenticate(self, *, username: Any, password: Any) -> dict[str, Any]:
        username_s = optional_text(username)
        if not username_s or not isinstance(password, str) or not password:
            raise ValidationError("Username and password are required")

        coordinator = self._coordinators.get_by_username(username_s)
        if not coordinator:
            logger.warning("Coordinator login failed: unknown username %r", username_s)
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(coordinator.password_hash, password)
        except ValueError:
            # e.g. a placeholder or corrupted hash
            ok = False

        if not ok:
            logger.warning("Coordinator login failed: wrong password for %r", username_s)
            raise AuthenticationError("Invalid username or password")

        return coordinator_to_dict(coordinator)

    def get(self, coordinator_id: int) -> Coordinator | None:
        return self._coordinators.get_by_id(coordinator_id)
