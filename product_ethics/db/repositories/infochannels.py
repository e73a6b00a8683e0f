"""
Info channel repository functions.

Implements CRUD for info channels, memberships with roles, and followers.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_info_channel(db: Session, name: str):
    db_channel = models.InfoChannel(name=name)
    db.add(db_channel)
    db.flush()
    db.refresh(db_channel)
    return db_channel


def get_info_channel(db: Session, info_channel_id: uuid.UUID):
    return db.query(models.InfoChannel).filter(models.InfoChannel.id == info_channel_id).first()


def create_membership(db: Session, info_channel_id: uuid.UUID, client_id: uuid.UUID, roles: Iterable[str]):
    db_member = models.InfoChannelClient(info_channel_id=info_channel_id, client_id=client_id)
    db_member.roles = [models.InfoChannelRole(role=role) for role in roles]
    db.add(db_member)
    db.flush()
    db.refresh(db_member)
    return db_member


def get_membership(db: Session, info_channel_id: uuid.UUID, client_id: uuid.UUID):
    return (
        db.query(models.InfoChannelClient)
        .filter(
            models.InfoChannelClient.info_channel_id == info_channel_id,
            models.InfoChannelClient.client_id == client_id,
        )
        .first()
    )


def get_membership_roles(db: Session, info_channel_id: uuid.UUID, client_id: uuid.UUID) -> List[str]:
    rows = (
        db.query(models.InfoChannelRole.role)
        .join(models.InfoChannelClient)
        .filter(
            models.InfoChannelClient.info_channel_id == info_channel_id,
            models.InfoChannelClient.client_id == client_id,
        )
        .all()
    )
    return [row[0] for row in rows]


def add_membership_role(db: Session, membership: models.InfoChannelClient, role: str):
    db_role = models.InfoChannelRole(info_channel_client_id=membership.id, role=role)
    db.add(db_role)
    db.flush()
    db.refresh(membership)
    return membership


def get_follower(db: Session, info_channel_id: uuid.UUID, client_id: uuid.UUID):
    return (
        db.query(models.InfoChannelFollower)
        .filter(
            models.InfoChannelFollower.info_channel_id == info_channel_id,
            models.InfoChannelFollower.client_id == client_id,
        )
        .first()
    )


def create_follower(db: Session, info_channel_id: uuid.UUID, client_id: uuid.UUID):
    db_follower = models.InfoChannelFollower(info_channel_id=info_channel_id, client_id=client_id)
    db.add(db_follower)
    db.flush()
    db.refresh(db_follower)
    return db_follower


def delete_follower(db: Session, follower: models.InfoChannelFollower):
    db.delete(follower)
    db.flush()


def get_followed_info_channels(db: Session, client_id: uuid.UUID):
    return (
        db.query(models.InfoChannel)
        .join(models.InfoChannelFollower)
        .filter(models.InfoChannelFollower.client_id == client_id)
        .order_by(models.InfoChannelFollower.created_at)
        .all()
    )
