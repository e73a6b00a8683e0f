"""
Recommendation repository functions.
"""
from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_recommendation(
    db: Session,
    *,
    creator_id: uuid.UUID,
    info_channel_id: uuid.UUID,
    subject_type: str,
    subject_id: uuid.UUID,
    score: str,
    summary: Optional[str] = None,
):
    db_recommendation = models.Recommendation(
        creator_id=creator_id,
        info_channel_id=info_channel_id,
        subject_type=subject_type,
        subject_id=subject_id,
        score=score,
        summary=summary,
    )
    db.add(db_recommendation)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(
            f"Info channel {info_channel_id} already has a recommendation for {subject_type} {subject_id}"
        ) from e
    db.refresh(db_recommendation)
    return db_recommendation


def get_recommendation(db: Session, recommendation_id: uuid.UUID):
    return db.query(models.Recommendation).filter(models.Recommendation.id == recommendation_id).first()


def get_recommendation_by_subject(db: Session, info_channel_id: uuid.UUID, subject_type: str, subject_id: uuid.UUID):
    return (
        db.query(models.Recommendation)
        .filter(
            models.Recommendation.info_channel_id == info_channel_id,
            models.Recommendation.subject_type == subject_type,
            models.Recommendation.subject_id == subject_id,
        )
        .first()
    )


def get_recommendations_for_subjects(
    db: Session,
    info_channel_ids: Iterable[uuid.UUID],
    subjects: Dict[str, List[uuid.UUID]],
) -> List[models.Recommendation]:
    """Return recommendations in the given channels on any of the given subjects.

    ``subjects`` maps a subject type to the subject ids of that type.
    """
    channel_ids = list(info_channel_ids)
    clauses = [
        and_(models.Recommendation.subject_type == subject_type, models.Recommendation.subject_id.in_(ids))
        for subject_type, ids in subjects.items()
        if ids
    ]
    if not channel_ids or not clauses:
        return []
    return (
        db.query(models.Recommendation)
        .filter(models.Recommendation.info_channel_id.in_(channel_ids), or_(*clauses))
        .order_by(models.Recommendation.created_at)
        .all()
    )
