"""
Product label service.

Labels are certifications or markings found on products (e.g. organic or fair
trade seals).
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import products as product_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.contribution_service import ContributionService, ContributionType, TrustVoteType
from product_ethics.services.security import client_verified

logger = logging.getLogger(__name__)


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise ValueError("Product label name must be provided")


class ProductLabelService:

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    def get_product_label(self, product_label_id: uuid.UUID) -> Optional[models.ProductLabel]:
        return product_repo.get_product_label(self.db, product_label_id)

    @client_verified
    @transactional
    def create_product_label(self, client: models.Client, name: str) -> models.ProductLabel:
        _require_name(name)
        label = product_repo.create_product_label(self.db, creator_id=client.id)
        self._edit_name(client, label, name)
        audit.log_product_label(self.db, client=client, product_label_id=label.id,
                                change_type=ChangeType.CREATED, text=name)
        return label

    @client_verified
    @transactional
    def edit_product_label_name(self, client: models.Client, label: models.ProductLabel, name: str) -> models.Contribution:
        contribution = self._edit_name(client, label, name)
        audit.log_product_label(self.db, client=client, product_label_id=label.id,
                                change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, label: models.ProductLabel, name: str) -> models.Contribution:
        _require_name(name)
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_PRODUCT_LABEL_NAME, client, label.id, name
        )
        product_repo.set_product_label_name(self.db, label, name)
        return contribution

    def product_label_name_contribution(self, label: models.ProductLabel) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_PRODUCT_LABEL_NAME, label.id)

    def can_edit_product_label_name(self, client: models.Client, label: models.ProductLabel) -> bool:
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.product_label_name_contribution(label)
        )

    @client_verified
    @transactional
    def trust_vote_product_label_name(self, client: models.Client, label: models.ProductLabel, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.product_label_name_contribution(label)
        if contribution is None:
            raise ValueError(f"Product label {label.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)
