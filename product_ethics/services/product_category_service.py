"""
Product category service.
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
        raise ValueError("Product category name must be provided")


class ProductCategoryService:

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    def get_product_category(self, product_category_id: uuid.UUID) -> Optional[models.ProductCategory]:
        return product_repo.get_product_category(self.db, product_category_id)

    @client_verified
    @transactional
    def create_product_category(self, client: models.Client, name: str) -> models.ProductCategory:
        _require_name(name)
        category = product_repo.create_product_category(self.db, creator_id=client.id)
        self._edit_name(client, category, name)
        audit.log_product_category(self.db, client=client, product_category_id=category.id,
                                   change_type=ChangeType.CREATED, text=name)
        return category

    @client_verified
    @transactional
    def edit_product_category_name(self, client: models.Client, category: models.ProductCategory, name: str) -> models.Contribution:
        contribution = self._edit_name(client, category, name)
        audit.log_product_category(self.db, client=client, product_category_id=category.id,
                                   change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, category: models.ProductCategory, name: str) -> models.Contribution:
        _require_name(name)
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_PRODUCT_CATEGORY_NAME, client, category.id, name
        )
        product_repo.set_product_category_name(self.db, category, name)
        return contribution

    def product_category_name_contribution(self, category: models.ProductCategory) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_PRODUCT_CATEGORY_NAME, category.id)

    def can_edit_product_category_name(self, client: models.Client, category: models.ProductCategory) -> bool:
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.product_category_name_contribution(category)
        )

    @client_verified
    @transactional
    def trust_vote_product_category_name(self, client: models.Client, category: models.ProductCategory, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.product_category_name_contribution(category)
        if contribution is None:
            raise ValueError(f"Product category {category.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)
