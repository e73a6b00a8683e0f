"""
Info source reference service: links to articles backing a recommendation,
and the products, categories, labels and companies they concern.
"""

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import infosources as infosource_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.infochannel_service import InfoChannelService
from product_ethics.services.infosource_service import InfoSourceService
from product_ethics.services.security import client_verified
from product_ethics.utils import urls

logger = logging.getLogger(__name__)


class InfoSourceReferenceService:
    """Service class for info source references."""

    def __init__(
        self,
        db: Session,
        info_channel_service: Optional[InfoChannelService] = None,
        info_source_service: Optional[InfoSourceService] = None,
    ):
        self.db = db
        self.info_channel_service = info_channel_service or InfoChannelService(db)
        self.info_source_service = info_source_service or InfoSourceService(db)

    def get_info_source_reference(self, info_source_reference_id: uuid.UUID) -> Optional[models.InfoSourceReference]:
        return infosource_repo.get_info_source_reference(self.db, info_source_reference_id)

    @staticmethod
    def validate_url_reference(url: str, info_source: models.InfoSource) -> None:
        """Raise ValueError unless ``url`` is published under one of the info source's domains."""
        if not urls.url_matches_domains(url, info_source.domain_names):
            raise ValueError(f"URL {url} does not belong to info source {info_source.id} ({info_source.domain_names})")

    @client_verified
    @transactional
    def create_info_source_reference(
        self,
        client: models.Client,
        info_channel: models.InfoChannel,
        url: str,
        title: Optional[str] = None,
        summary: Optional[str] = None,
        recommendation: Optional[models.Recommendation] = None,
    ) -> models.InfoSourceReference:
        """Create a reference in ``info_channel``, registering the url's info source if it is new."""
        self.info_channel_service.assert_can_contribute(client, info_channel)
        if not url or not url.strip():
            raise ValueError("Info source reference url must be provided")
        url = url.strip()
        if recommendation is not None and recommendation.info_channel_id != info_channel.id:
            raise ValueError(f"Recommendation {recommendation.id} does not belong to info channel {info_channel.id}")

        info_source = self.info_source_service.get_info_source_by_url(url)
        if info_source is None:
            info_source = self.info_source_service.create_info_source_from_url(client, url)
        self.validate_url_reference(url, info_source)

        reference = infosource_repo.create_info_source_reference(
            self.db,
            url=url,
            creator_id=client.id,
            info_channel_id=info_channel.id,
            info_source_id=info_source.id,
            recommendation_id=recommendation.id if recommendation is not None else None,
            title=title,
            summary=summary,
        )
        audit.log_info_source_reference(self.db, client=client, info_source_reference_id=reference.id,
                                        change_type=ChangeType.CREATED, text=url)
        return reference

    def _extend(self, client: models.Client, reference: models.InfoSourceReference, attribute: str, items: Sequence) -> models.InfoSourceReference:
        if not self.info_channel_service.is_client_member_of_info_channel(client, reference.info_channel):
            raise PermissionError(
                f"Client with id {client.id} is not member of info channel {reference.info_channel_id}"
            )
        if not items:
            raise ValueError(f"At least one item must be given for {attribute}")
        reference = infosource_repo.extend_info_source_reference(self.db, reference, attribute, items)
        audit.log_info_source_reference(self.db, client=client, info_source_reference_id=reference.id,
                                        change_type=ChangeType.EDITED,
                                        text=f"{attribute}:{','.join(str(item.id) for item in items)}")
        return reference

    @client_verified
    @transactional
    def assign_products_to_info_source_reference(self, client: models.Client, reference: models.InfoSourceReference,
                                                 products: Sequence[models.Product]) -> models.InfoSourceReference:
        return self._extend(client, reference, "products", products)

    @client_verified
    @transactional
    def assign_product_categories_to_info_source_reference(self, client: models.Client, reference: models.InfoSourceReference,
                                                           categories: Sequence[models.ProductCategory]) -> models.InfoSourceReference:
        return self._extend(client, reference, "product_categories", categories)

    @client_verified
    @transactional
    def assign_product_labels_to_info_source_reference(self, client: models.Client, reference: models.InfoSourceReference,
                                                       labels: Sequence[models.ProductLabel]) -> models.InfoSourceReference:
        return self._extend(client, reference, "product_labels", labels)

    @client_verified
    @transactional
    def assign_companies_to_info_source_reference(self, client: models.Client, reference: models.InfoSourceReference,
                                                  companies: Sequence[models.Company]) -> models.InfoSourceReference:
        return self._extend(client, reference, "companies", companies)
