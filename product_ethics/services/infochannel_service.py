"""
Info channel service: channel creation, membership roles and followers.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import infochannels as channel_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.security import assert_client_verified, client_valid, client_verified
from product_ethics.utils.role_permissions import (
    ROLE_OWNER,
    roles_allow_contribute,
    roles_allow_manage,
    validate_role,
)

logger = logging.getLogger(__name__)


class InfoChannelService:
    """Service class for info channels."""

    def __init__(self, db: Session):
        self.db = db

    def get_info_channel(self, info_channel_id: uuid.UUID) -> Optional[models.InfoChannel]:
        return channel_repo.get_info_channel(self.db, info_channel_id)

    @client_verified
    @transactional
    def create_info_channel(self, client: models.Client, name: str) -> models.InfoChannel:
        """Create a channel owned and followed by ``client``."""
        if not name or not name.strip():
            raise ValueError("Info channel name must be provided")

        info_channel = channel_repo.create_info_channel(self.db, name.strip())
        channel_repo.create_membership(self.db, info_channel.id, client.id, [ROLE_OWNER])
        channel_repo.create_follower(self.db, info_channel.id, client.id)

        audit.log_info_channel(self.db, client=client, info_channel_id=info_channel.id,
                               change_type=ChangeType.CREATED, text=info_channel.name)
        logger.info("Client %s created info channel %s", client.id, info_channel.id)
        self.db.refresh(info_channel)
        return info_channel

    @client_valid
    @transactional
    def follow_info_channel(self, client: models.Client, info_channel: models.InfoChannel) -> models.InfoChannelFollower:
        if channel_repo.get_follower(self.db, info_channel.id, client.id) is not None:
            raise ValueError(f"Client with id {client.id} already follows info channel {info_channel.id}")
        return channel_repo.create_follower(self.db, info_channel.id, client.id)

    @client_valid
    @transactional
    def unfollow_info_channel(self, client: models.Client, info_channel: models.InfoChannel) -> None:
        follower = channel_repo.get_follower(self.db, info_channel.id, client.id)
        if follower is None:
            raise ValueError(f"Client with id {client.id} does not follow info channel {info_channel.id}")
        channel_repo.delete_follower(self.db, follower)

    def is_client_following_info_channel(self, client: models.Client, info_channel: models.InfoChannel) -> bool:
        return channel_repo.get_follower(self.db, info_channel.id, client.id) is not None

    def followed_info_channels(self, client: models.Client) -> List[models.InfoChannel]:
        return channel_repo.get_followed_info_channels(self.db, client.id)

    def is_client_member_of_info_channel(self, client: models.Client, info_channel: models.InfoChannel) -> bool:
        return channel_repo.get_membership(self.db, info_channel.id, client.id) is not None

    def client_roles(self, client: models.Client, info_channel: models.InfoChannel) -> List[str]:
        return channel_repo.get_membership_roles(self.db, info_channel.id, client.id)

    def can_contribute(self, client: models.Client, info_channel: models.InfoChannel) -> bool:
        return roles_allow_contribute(self.client_roles(client, info_channel))

    def assert_can_contribute(self, client: models.Client, info_channel: models.InfoChannel) -> None:
        if not self.is_client_member_of_info_channel(client, info_channel):
            raise PermissionError(f"Client with id {client.id} is not member of info channel {info_channel.id}")
        if not self.can_contribute(client, info_channel):
            raise PermissionError(f"Client with id {client.id} may not contribute to info channel {info_channel.id}")

    def can_manage(self, client: models.Client, info_channel: models.InfoChannel) -> bool:
        return roles_allow_manage(self.client_roles(client, info_channel))

    @client_valid
    @transactional
    def add_client_to_info_channel(
        self,
        actor: models.Client,
        client: models.Client,
        info_channel: models.InfoChannel,
        role: str,
    ) -> models.InfoChannelClient:
        """Add ``client`` to the channel with ``role``, or grant the role to an existing member."""
        assert_client_verified(actor)
        validate_role(role)
        if not self.can_manage(actor, info_channel):
            raise PermissionError(f"Client with id {actor.id} may not manage info channel {info_channel.id}")

        membership = channel_repo.get_membership(self.db, info_channel.id, client.id)
        if membership is None:
            membership = channel_repo.create_membership(self.db, info_channel.id, client.id, [role])
        elif role in [r.role for r in membership.roles]:
            raise ValueError(f"Client with id {client.id} already has role '{role}' in info channel {info_channel.id}")
        else:
            membership = channel_repo.add_membership_role(self.db, membership, role)

        audit.log_info_channel(self.db, client=actor, info_channel_id=info_channel.id,
                               change_type=ChangeType.EDITED, text=f"{client.id}:{role}")
        return membership
