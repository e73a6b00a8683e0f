"""
Store service: stores, their names and the company operating them.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import companies as company_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.contribution_service import ContributionService, ContributionType, TrustVoteType
from product_ethics.services.security import client_verified, is_client_valid

logger = logging.getLogger(__name__)


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise ValueError("Store name must be provided")


class StoreService:
    """Service class for stores."""

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    def get_store(self, store_id: uuid.UUID) -> Optional[models.Store]:
        return company_repo.get_store(self.db, store_id)

    @client_verified
    @transactional
    def create_store(self, client: models.Client, name: str) -> models.Store:
        _require_name(name)
        store = company_repo.create_store(self.db, creator_id=client.id)
        self._edit_name(client, store, name)
        audit.log_store(self.db, client=client, store_id=store.id, change_type=ChangeType.CREATED, text=name)
        logger.info("Client %s created store %s", client.id, store.id)
        return store

    @client_verified
    @transactional
    def edit_store_name(self, client: models.Client, store: models.Store, name: str) -> models.Contribution:
        contribution = self._edit_name(client, store, name)
        audit.log_store(self.db, client=client, store_id=store.id, change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, store: models.Store, name: str) -> models.Contribution:
        _require_name(name)
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_STORE_NAME, client, store.id, name
        )
        company_repo.set_store_name(self.db, store, name)
        return contribution

    def store_name_contribution(self, store: models.Store) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_STORE_NAME, store.id)

    def store_name(self, store: models.Store) -> Optional[str]:
        contribution = self.store_name_contribution(store)
        return contribution.text if contribution else None

    def can_edit_store_name(self, client: models.Client, store: models.Store) -> bool:
        """Store names can only be edited by verified clients with sufficient trust."""
        if not is_client_valid(client) or not client.verified:
            return False
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.store_name_contribution(store)
        )

    @client_verified
    @transactional
    def trust_vote_store_name(self, client: models.Client, store: models.Store, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.store_name_contribution(store)
        if contribution is None:
            raise ValueError(f"Store {store.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)

    @client_verified
    @transactional
    def assign_company_to_store(self, client: models.Client, store: models.Store, company: models.Company) -> models.Contribution:
        """Set the company operating ``store``, replacing any previous assignment."""
        contribution = self.contribution_service.create_reference_contribution(
            ContributionType.ASSIGN_COMPANY_TO_STORE, client, store.id, company.id, exclusive=True
        )
        audit.log_store(self.db, client=client, store_id=store.id, change_type=ChangeType.EDITED,
                        text=f"company:{company.id}")
        return contribution

    def store_company_contribution(self, store: models.Store) -> Optional[models.Contribution]:
        return self.contribution_service.current_reference_contribution(ContributionType.ASSIGN_COMPANY_TO_STORE, store.id)

    def store_company(self, store: models.Store) -> Optional[models.Company]:
        contribution = self.store_company_contribution(store)
        return company_repo.get_company(self.db, contribution.reference_id) if contribution else None
