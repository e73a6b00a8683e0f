"""
Recommendation service: an info channel's verdict on a product, product
category, label, tag or company, backed by info source references.
"""

import logging
import uuid
from typing import List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import recommendations as recommendation_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.infochannel_service import InfoChannelService
from product_ethics.services.infosource_reference_service import InfoSourceReferenceService
from product_ethics.services.security import client_verified
from product_ethics.utils import urls

logger = logging.getLogger(__name__)

SCORE_THUMBS_UP = "thumbs_up"
SCORE_NEUTRAL = "neutral"
SCORE_THUMBS_DOWN = "thumbs_down"
SCORES = frozenset({SCORE_THUMBS_UP, SCORE_NEUTRAL, SCORE_THUMBS_DOWN})

SUBJECT_PRODUCT = "product"
SUBJECT_PRODUCT_CATEGORY = "product_category"
SUBJECT_PRODUCT_LABEL = "product_label"
SUBJECT_PRODUCT_TAG = "product_tag"
SUBJECT_COMPANY = "company"

_SUBJECT_TYPES = (
    (models.Product, SUBJECT_PRODUCT),
    (models.ProductCategory, SUBJECT_PRODUCT_CATEGORY),
    (models.ProductLabel, SUBJECT_PRODUCT_LABEL),
    (models.ProductTag, SUBJECT_PRODUCT_TAG),
    (models.Company, SUBJECT_COMPANY),
)

RecommendationSubject = Union[
    models.Product, models.ProductCategory, models.ProductLabel, models.ProductTag, models.Company
]


def subject_type_of(subject) -> str:
    for model, subject_type in _SUBJECT_TYPES:
        if isinstance(subject, model):
            return subject_type
    raise ValueError(f"Unsupported recommendation subject: {type(subject).__name__}")


class RecommendationService:
    """Service class for recommendations."""

    def __init__(
        self,
        db: Session,
        info_channel_service: Optional[InfoChannelService] = None,
        info_source_reference_service: Optional[InfoSourceReferenceService] = None,
        product_service=None,
    ):
        self.db = db
        self.info_channel_service = info_channel_service or InfoChannelService(db)
        self.info_source_reference_service = info_source_reference_service or InfoSourceReferenceService(
            db, info_channel_service=self.info_channel_service
        )
        if product_service is None:
            from product_ethics.services.product_service import ProductService
            product_service = ProductService(db, recommendation_service=self)
        self.product_service = product_service

    def get_recommendation(self, recommendation_id: uuid.UUID) -> Optional[models.Recommendation]:
        return recommendation_repo.get_recommendation(self.db, recommendation_id)

    def get_recommendation_for_subject(self, info_channel: models.InfoChannel,
                                       subject: RecommendationSubject) -> Optional[models.Recommendation]:
        return recommendation_repo.get_recommendation_by_subject(
            self.db, info_channel.id, subject_type_of(subject), subject.id
        )

    @client_verified
    @transactional
    def create_recommendation(
        self,
        client: models.Client,
        info_channel: models.InfoChannel,
        summary: str,
        score: str,
        subject: RecommendationSubject,
        info_source_reference_urls: Sequence[str],
    ) -> models.Recommendation:
        """Create the channel's recommendation on ``subject``.

        Each url becomes an info source reference attached to the
        recommendation. A channel holds one recommendation per subject.
        """
        if score not in SCORES:
            raise ValueError(f"Invalid recommendation score '{score}'. Allowed: {sorted(SCORES)}")
        subject_type = subject_type_of(subject)
        self.info_channel_service.assert_can_contribute(client, info_channel)

        if not info_source_reference_urls:
            raise ValueError("At least one info source reference url must be provided")
        for url in info_source_reference_urls:
            urls.validate_domain(urls.domain_from_url(url))

        if recommendation_repo.get_recommendation_by_subject(self.db, info_channel.id, subject_type, subject.id):
            raise ValueError(f"Info channel {info_channel.id} already has a recommendation for {subject_type} {subject.id}")

        recommendation = recommendation_repo.create_recommendation(
            self.db,
            creator_id=client.id,
            info_channel_id=info_channel.id,
            subject_type=subject_type,
            subject_id=subject.id,
            score=score,
            summary=summary,
        )
        for url in info_source_reference_urls:
            self.info_source_reference_service.create_info_source_reference(
                client, info_channel, url, recommendation=recommendation
            )

        audit.log_recommendation(self.db, client=client, recommendation_id=recommendation.id,
                                 change_type=ChangeType.CREATED, text=f"{subject_type}:{subject.id}:{score}")
        logger.info("Client %s created recommendation %s in info channel %s", client.id, recommendation.id, info_channel.id)
        self.db.refresh(recommendation)
        return recommendation

    def get_recommendations(self, client: models.Client, product: models.Product) -> List[models.Recommendation]:
        """Return recommendations touching ``product`` from the channels ``client`` follows."""
        info_channels = self.info_channel_service.followed_info_channels(client)
        return self.get_recommendations_for_info_channels(info_channels, product)

    def get_recommendations_for_info_channels(self, info_channels: Sequence[models.InfoChannel],
                                              product: models.Product) -> List[models.Recommendation]:
        company = self.product_service.product_company(product)
        subjects = {
            SUBJECT_PRODUCT: [product.id],
            SUBJECT_PRODUCT_CATEGORY: [c.id for c in self.product_service.product_categories(product)],
            SUBJECT_PRODUCT_LABEL: [label.id for label in self.product_service.product_labels(product)],
            SUBJECT_PRODUCT_TAG: [t.id for t in self.product_service.product_tags(product)],
            SUBJECT_COMPANY: [company.id] if company is not None else [],
        }
        return recommendation_repo.get_recommendations_for_subjects(
            self.db, [channel.id for channel in info_channels], subjects
        )
