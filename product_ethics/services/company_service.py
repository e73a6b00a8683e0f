"""
Company service: companies and their crowdsourced names.
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
from product_ethics.services.security import client_verified

logger = logging.getLogger(__name__)


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise ValueError("Company name must be provided")


class CompanyService:
    """Service class for companies."""

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    def get_company(self, company_id: uuid.UUID) -> Optional[models.Company]:
        return company_repo.get_company(self.db, company_id)

    @client_verified
    @transactional
    def create_company(self, client: models.Client, name: str) -> models.Company:
        _require_name(name)
        company = company_repo.create_company(self.db, creator_id=client.id)
        self._edit_name(client, company, name)
        audit.log_company(self.db, client=client, company_id=company.id, change_type=ChangeType.CREATED, text=name)
        logger.info("Client %s created company %s", client.id, company.id)
        return company

    @client_verified
    @transactional
    def edit_company_name(self, client: models.Client, company: models.Company, name: str) -> models.Contribution:
        contribution = self._edit_name(client, company, name)
        audit.log_company(self.db, client=client, company_id=company.id, change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, company: models.Company, name: str) -> models.Contribution:
        _require_name(name)
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_COMPANY_NAME, client, company.id, name
        )
        company_repo.set_company_name(self.db, company, name)
        return contribution

    def company_name_contribution(self, company: models.Company) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_COMPANY_NAME, company.id)

    def company_name(self, company: models.Company) -> Optional[str]:
        contribution = self.company_name_contribution(company)
        return contribution.text if contribution else None

    def can_edit_company_name(self, client: models.Client, company: models.Company) -> bool:
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.company_name_contribution(company)
        )

    @client_verified
    @transactional
    def trust_vote_company_name(self, client: models.Client, company: models.Company, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.company_name_contribution(company)
        if contribution is None:
            raise ValueError(f"Company {company.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)
