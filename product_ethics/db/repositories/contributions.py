"""
Contribution and trust vote repository functions.
"""
from __future__ import annotations

import uuid
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_contribution(
    db: Session,
    *,
    type: str,
    client_id: uuid.UUID,
    subject_id: uuid.UUID,
    trust_score: float,
    text: Optional[str] = None,
    reference_id: Optional[uuid.UUID] = None,
):
    db_contribution = models.Contribution(
        type=type,
        client_id=client_id,
        subject_id=subject_id,
        text=text,
        reference_id=reference_id,
        trust_score=trust_score,
        enabled=True,
    )
    db.add(db_contribution)
    db.flush()
    db.refresh(db_contribution)
    return db_contribution


def get_contribution(db: Session, contribution_id: uuid.UUID):
    return db.query(models.Contribution).filter(models.Contribution.id == contribution_id).first()


def get_enabled_contributions(
    db: Session,
    type: str,
    subject_id: uuid.UUID,
    reference_id: Optional[uuid.UUID] = None,
) -> List[models.Contribution]:
    query = db.query(models.Contribution).filter(
        models.Contribution.type == type,
        models.Contribution.subject_id == subject_id,
        models.Contribution.enabled.is_(True),
    )
    if reference_id is not None:
        query = query.filter(models.Contribution.reference_id == reference_id)
    return query.order_by(models.Contribution.created_at).all()


def get_enabled_reference_ids(db: Session, type: str, subject_id: uuid.UUID) -> List[uuid.UUID]:
    return [c.reference_id for c in get_enabled_contributions(db, type, subject_id) if c.reference_id is not None]


def get_contributions_by_client(db: Session, client_id: uuid.UUID) -> List[models.Contribution]:
    return db.query(models.Contribution).filter(models.Contribution.client_id == client_id).all()


def set_contribution_enabled(db: Session, contribution: models.Contribution, enabled: bool):
    contribution.enabled = enabled
    db.flush()
    db.refresh(contribution)
    return contribution


def update_contribution_trust_score(db: Session, contribution: models.Contribution, trust_score: float):
    contribution.trust_score = trust_score
    db.flush()
    db.refresh(contribution)
    return contribution


def create_trust_vote(db: Session, client_id: uuid.UUID, contribution_id: uuid.UUID, vote: str):
    db_vote = models.TrustVote(client_id=client_id, contribution_id=contribution_id, vote=vote)
    db.add(db_vote)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(f"Client {client_id} already trust voted contribution {contribution_id}") from e
    db.refresh(db_vote)
    return db_vote


def get_trust_vote(db: Session, client_id: uuid.UUID, contribution_id: uuid.UUID):
    return (
        db.query(models.TrustVote)
        .filter(models.TrustVote.client_id == client_id, models.TrustVote.contribution_id == contribution_id)
        .first()
    )


def get_trust_votes_by_client(db: Session, client_id: uuid.UUID) -> List[models.TrustVote]:
    return db.query(models.TrustVote).filter(models.TrustVote.client_id == client_id).all()


def get_trust_votes_for_contribution(db: Session, contribution_id: uuid.UUID) -> List[models.TrustVote]:
    return db.query(models.TrustVote).filter(models.TrustVote.contribution_id == contribution_id).all()


def count_trust_votes(db: Session, contribution_id: uuid.UUID) -> Tuple[int, int]:
    """Return (trusted, not_trusted) vote counts for a contribution."""
    rows = (
        db.query(models.TrustVote.vote, func.count(models.TrustVote.id))
        .filter(models.TrustVote.contribution_id == contribution_id)
        .group_by(models.TrustVote.vote)
        .all()
    )
    counts = dict(rows)
    return counts.get('trusted', 0), counts.get('not_trusted', 0)
