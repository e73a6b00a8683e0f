"""
Info source service: publishers identified by their domains.
"""

import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models, schemas
from product_ethics.db.repositories import infosources as infosource_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.contribution_service import ContributionService, ContributionType, TrustVoteType
from product_ethics.services.security import client_verified
from product_ethics.utils import urls

logger = logging.getLogger(__name__)


class InfoSourceService:
    """Service class for info sources."""

    def __init__(self, db: Session, contribution_service: Optional[ContributionService] = None):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)

    @staticmethod
    def domain_from_url(url: str) -> str:
        return urls.domain_from_url(url)

    def get_info_source(self, info_source_id: uuid.UUID) -> Optional[models.InfoSource]:
        return infosource_repo.get_info_source(self.db, info_source_id)

    def get_info_source_by_url(self, url: str) -> Optional[models.InfoSource]:
        """Find the info source whose domain is the url host or one of its parent domains."""
        labels = urls.domain_from_url(url).split(".")
        for i in range(len(labels) - 1):
            info_source = infosource_repo.get_info_source_by_domain(self.db, ".".join(labels[i:]))
            if info_source is not None:
                return info_source
        return None

    @client_verified
    @transactional
    def create_info_source(self, client: models.Client, domains: Iterable[str], name: Optional[str] = None) -> models.InfoSource:
        payload = schemas.InfoSourceCreate(name=name, domains=list(domains))
        if payload.name is not None and not payload.name.strip():
            raise ValueError("Info source name must not be blank")
        info_source = infosource_repo.create_info_source(self.db, payload.domains, creator_id=client.id)
        if payload.name:
            self._edit_name(client, info_source, payload.name)
        audit.log_info_source(self.db, client=client, info_source_id=info_source.id,
                              change_type=ChangeType.CREATED, text=", ".join(payload.domains))
        logger.info("Client %s created info source %s for %s", client.id, info_source.id, payload.domains)
        return info_source

    @client_verified
    @transactional
    def create_info_source_from_url(self, client: models.Client, url: str, name: Optional[str] = None) -> models.InfoSource:
        return self.create_info_source(client, [urls.domain_from_url(url)], name)

    @client_verified
    @transactional
    def edit_info_source_name(self, client: models.Client, info_source: models.InfoSource, name: str) -> models.Contribution:
        contribution = self._edit_name(client, info_source, name)
        audit.log_info_source(self.db, client=client, info_source_id=info_source.id,
                              change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, info_source: models.InfoSource, name: str) -> models.Contribution:
        if not name or not name.strip():
            raise ValueError("Info source name must be provided")
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_INFO_SOURCE_NAME, client, info_source.id, name
        )
        infosource_repo.set_info_source_name(self.db, info_source, name)
        return contribution

    def info_source_name_contribution(self, info_source: models.InfoSource) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_INFO_SOURCE_NAME, info_source.id)

    def can_edit_info_source_name(self, client: models.Client, info_source: models.InfoSource) -> bool:
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.info_source_name_contribution(info_source)
        )

    @client_verified
    @transactional
    def trust_vote_info_source_name(self, client: models.Client, info_source: models.InfoSource, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.info_source_name_contribution(info_source)
        if contribution is None:
            raise ValueError(f"Info source {info_source.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)
