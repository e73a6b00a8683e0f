"""
Client service: registration, device management, lookups and moderation.
"""

import logging
import uuid
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from product_ethics.db import models, schemas
from product_ethics.db.repositories import clients as client_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.contribution_service import ContributionService
from product_ethics.services.security import assert_admin, client_valid
from product_ethics.utils import crypto
from product_ethics.utils.settings import get_trust_settings

logger = logging.getLogger(__name__)


class ClientService:
    """Service class for client accounts and devices."""

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    def get_by_id(self, client_id: uuid.UUID) -> Optional[models.Client]:
        return client_repo.get_client(self.db, client_id)

    def get_by_username_and_password(self, username: str, password: str) -> Optional[models.Client]:
        """Return the client if the username exists and the password matches."""
        if not username or not password:
            return None
        client = client_repo.get_client_by_username(self.db, username)
        if client is None or not crypto.verify_password(password, client.password_hashed):
            return None
        return client

    def get_by_device_id(self, device_id: str) -> Optional[models.Client]:
        if not device_id:
            return None
        device = client_repo.get_client_device_by_id_hashed(self.db, crypto.sha256_hex(device_id))
        return device.client if device else None

    @transactional
    def create_client(
        self,
        device_type: str = "unknown",
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Tuple[models.Client, str]:
        """Create an unverified client with a fresh device.

        Returns the client and the plain device id; only its hash is stored.

        Raises:
            ValueError: If only one of username/password is given, or the
                username is taken.
        """
        registration = schemas.ClientCreate(device_type=device_type, username=username, password=password)

        if registration.username and client_repo.get_client_by_username(self.db, registration.username):
            raise ValueError(f"Username '{registration.username}' is already taken")

        client = client_repo.create_client(
            self.db,
            username=registration.username,
            password_hashed=crypto.hash_password(registration.password) if registration.password else None,
            trust_level=get_trust_settings().initial_client_trust_level,
        )
        device_id = self._create_device(client, registration.device_type)
        client = self.contribution_service.recalculate_client_trust_level(client)

        logger.info("Created client %s", client.id)
        return client, device_id

    @client_valid
    @transactional
    def create_device(self, client: models.Client, device_type: str = "unknown") -> str:
        """Attach a new device to ``client`` and return its plain id."""
        return self._create_device(client, device_type)

    def _create_device(self, client: models.Client, device_type: str) -> str:
        device_id = crypto.generate_uuid()
        client_repo.create_client_device(self.db, client.id, crypto.sha256_hex(device_id), device_type)
        return device_id

    @transactional
    def set_banned(self, admin: models.Client, client: models.Client, banned: bool) -> models.Client:
        assert_admin(admin)
        logger.info("Admin %s set banned=%s on client %s", admin.id, banned, client.id)
        return client_repo.update_client(self.db, client, banned=banned)

    @transactional
    def set_enabled(self, admin: models.Client, client: models.Client, enabled: bool) -> models.Client:
        assert_admin(admin)
        logger.info("Admin %s set enabled=%s on client %s", admin.id, enabled, client.id)
        return client_repo.update_client(self.db, client, enabled=enabled)
