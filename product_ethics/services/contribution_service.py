"""
Contribution service: creates contributions, records trust votes and keeps
contribution trust scores and client trust levels up to date.

Trust model:
- A new contribution starts with the creator's trust level.
- Once voted on, its score blends the share of "trusted" votes with the
  creator's trust level. The weight given to votes grows linearly with the
  number of votes and is capped (0.95 after 20 votes by default).
- A client's trust level is the weighted mean of the initial trust level, the
  scores of their own contributions, and how often their votes agree with the
  majority on contributions with a clear majority.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from product_ethics.db import models
from product_ethics.db.repositories import contributions as contribution_repo
from product_ethics.db.repositories import clients as client_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.security import client_verified
from product_ethics.utils.settings import TrustSettings, get_trust_settings

logger = logging.getLogger(__name__)


class ContributionType(str, Enum):
    EDIT_PRODUCT_NAME = "edit_product_name"
    EDIT_PRODUCT_CATEGORY_NAME = "edit_product_category_name"
    EDIT_PRODUCT_LABEL_NAME = "edit_product_label_name"
    ASSIGN_CATEGORY_TO_PRODUCT = "assign_category_to_product"
    ASSIGN_LABEL_TO_PRODUCT = "assign_label_to_product"
    ASSIGN_TAG_TO_PRODUCT = "assign_tag_to_product"
    ASSIGN_COMPANY_TO_PRODUCT = "assign_company_to_product"
    EDIT_COMPANY_NAME = "edit_company_name"
    EDIT_STORE_NAME = "edit_store_name"
    ASSIGN_COMPANY_TO_STORE = "assign_company_to_store"
    EDIT_INFO_SOURCE_NAME = "edit_info_source_name"


class TrustVoteType(str, Enum):
    TRUSTED = "trusted"
    NOT_TRUSTED = "not_trusted"


def _value(member) -> str:
    return member.value if isinstance(member, Enum) else str(member)


class ContributionService:
    """Service class for contributions and trust."""

    def __init__(self, db: Session, settings: Optional[TrustSettings] = None):
        self.db = db
        self.settings = settings or get_trust_settings()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_contribution(self, contribution_id: uuid.UUID) -> Optional[models.Contribution]:
        return contribution_repo.get_contribution(self.db, contribution_id)

    @staticmethod
    def unique_contribution(contributions: Sequence[models.Contribution]) -> Optional[models.Contribution]:
        """Return the single contribution in ``contributions``, or None when empty.

        More than one enabled contribution where at most one is allowed means the
        data is inconsistent, so a RuntimeError is raised.
        """
        if len(contributions) > 1:
            raise RuntimeError(
                f"Expected at most one enabled contribution, found {len(contributions)}: "
                f"{[str(c.id) for c in contributions]}"
            )
        return contributions[0] if contributions else None

    def current_text_contribution(self, type: ContributionType | str, subject_id: uuid.UUID) -> Optional[models.Contribution]:
        return self.unique_contribution(contribution_repo.get_enabled_contributions(self.db, _value(type), subject_id))

    def current_reference_contribution(self, type: ContributionType | str, subject_id: uuid.UUID) -> Optional[models.Contribution]:
        """Return the enabled contribution of an exclusive reference type (e.g. a store's company)."""
        return self.unique_contribution(contribution_repo.get_enabled_contributions(self.db, _value(type), subject_id))

    def current_reference_ids(self, type: ContributionType | str, subject_id: uuid.UUID) -> List[uuid.UUID]:
        return contribution_repo.get_enabled_reference_ids(self.db, _value(type), subject_id)

    def find_reference_contribution(self, type: ContributionType | str, subject_id: uuid.UUID, reference_id: uuid.UUID) -> Optional[models.Contribution]:
        return self.unique_contribution(
            contribution_repo.get_enabled_contributions(self.db, _value(type), subject_id, reference_id=reference_id)
        )

    # ------------------------------------------------------------------
    # Trust checks
    # ------------------------------------------------------------------
    def has_sufficient_trust_to_edit_contribution(self, client: models.Client, contribution: Optional[models.Contribution]) -> bool:
        if contribution is None:
            return True
        return client.trust_level >= contribution.trust_score - self.settings.trust_score_contribution_delta

    def assert_sufficient_trust_to_edit_contribution(self, client: models.Client, contribution: Optional[models.Contribution]) -> None:
        if not self.has_sufficient_trust_to_edit_contribution(client, contribution):
            raise PermissionError(
                f"Client with id {client.id} does not have sufficient trust level to edit contribution "
                f"with id {contribution.id}. Client trust: {client.trust_level:.4f}. "
                f"Contribution trust score: {contribution.trust_score:.4f}"
            )

    # ------------------------------------------------------------------
    # Contributions
    # ------------------------------------------------------------------
    @client_verified
    @transactional
    def create_text_contribution(self, type: ContributionType | str, client: models.Client, subject_id: uuid.UUID, text: str) -> models.Contribution:
        """Replace the current text contribution of ``type`` on ``subject_id``."""
        current = self.current_text_contribution(type, subject_id)
        return self._replace_contribution(current, type, client, subject_id, text=text)

    @client_verified
    @transactional
    def create_reference_contribution(
        self,
        type: ContributionType | str,
        client: models.Client,
        subject_id: uuid.UUID,
        reference_id: uuid.UUID,
        exclusive: bool = False,
    ) -> models.Contribution:
        """Assign ``reference_id`` to ``subject_id``.

        Exclusive types hold a single reference per subject which is replaced
        (subject to trust); otherwise the same reference may not be assigned twice.
        """
        if exclusive:
            current = self.current_reference_contribution(type, subject_id)
            return self._replace_contribution(current, type, client, subject_id, reference_id=reference_id)

        if self.find_reference_contribution(type, subject_id, reference_id) is not None:
            raise ValueError(f"{_value(type)}: {reference_id} is already assigned to {subject_id}")
        return self._replace_contribution(None, type, client, subject_id, reference_id=reference_id)

    @client_verified
    @transactional
    def disable_reference_contribution(
        self,
        type: ContributionType | str,
        client: models.Client,
        subject_id: uuid.UUID,
        reference_id: uuid.UUID,
    ) -> models.Contribution:
        current = self.find_reference_contribution(type, subject_id, reference_id)
        if current is None:
            raise ValueError(f"{_value(type)}: {reference_id} is not assigned to {subject_id}")
        self.assert_sufficient_trust_to_edit_contribution(client, current)
        return contribution_repo.set_contribution_enabled(self.db, current, False)

    def _replace_contribution(
        self,
        current: Optional[models.Contribution],
        type: ContributionType | str,
        client: models.Client,
        subject_id: uuid.UUID,
        *,
        text: Optional[str] = None,
        reference_id: Optional[uuid.UUID] = None,
    ) -> models.Contribution:
        if current is not None:
            self.assert_sufficient_trust_to_edit_contribution(client, current)
            contribution_repo.set_contribution_enabled(self.db, current, False)

        contribution = contribution_repo.create_contribution(
            self.db,
            type=_value(type),
            client_id=client.id,
            subject_id=subject_id,
            text=text,
            reference_id=reference_id,
            trust_score=client.trust_level,
        )
        self.update_trust(contribution)
        logger.info("Client %s contributed %s on %s", client.id, contribution.type, subject_id)
        return contribution

    # ------------------------------------------------------------------
    # Trust votes
    # ------------------------------------------------------------------
    @client_verified
    @transactional
    def trust_vote_item(self, client: models.Client, contribution: models.Contribution, vote: TrustVoteType | str) -> models.TrustVote:
        vote_value = _value(vote)
        if vote_value not in {v.value for v in TrustVoteType}:
            raise ValueError(f"Invalid trust vote: {vote_value}")
        if contribution.client_id == client.id:
            raise ValueError(f"Client with id {client.id} cannot trust vote own contribution {contribution.id}")
        if contribution_repo.get_trust_vote(self.db, client.id, contribution.id) is not None:
            raise ValueError(f"Client with id {client.id} already trust voted contribution {contribution.id}")

        trust_vote = contribution_repo.create_trust_vote(self.db, client.id, contribution.id, vote_value)
        self.update_trust(contribution)
        return trust_vote

    def vote_counts(self, contribution: models.Contribution) -> Tuple[int, int]:
        return contribution_repo.count_trust_votes(self.db, contribution.id)

    @transactional
    def update_trust(self, contribution: models.Contribution) -> models.Contribution:
        """Recompute the trust score of ``contribution`` and the trust levels it affects."""
        trusted, not_trusted = self.vote_counts(contribution)
        total = trusted + not_trusted
        creator = contribution.client

        if total > 0:
            weight = self.linear_growth_trust_weight(total)
            score = (trusted / total) * weight + creator.trust_level * (1.0 - weight)
        else:
            score = creator.trust_level
        contribution = contribution_repo.update_contribution_trust_score(self.db, contribution, score)

        self.recalculate_client_trust_level(creator)
        for trust_vote in contribution_repo.get_trust_votes_for_contribution(self.db, contribution.id):
            self.recalculate_client_trust_level(trust_vote.client)
        return contribution

    @transactional
    def recalculate_client_trust_level(self, client: models.Client) -> models.Client:
        total_score = self.settings.initial_client_trust_level
        total_weight = 1.0

        for contribution in contribution_repo.get_contributions_by_client(self.db, client.id):
            total_score += contribution.trust_score
            total_weight += 1.0

        for trust_vote in contribution_repo.get_trust_votes_by_client(self.db, client.id):
            trusted, not_trusted = contribution_repo.count_trust_votes(self.db, trust_vote.contribution_id)
            total = trusted + not_trusted
            if total == 0:
                continue
            ratio = min(trusted, not_trusted) / max(trusted, not_trusted)
            weight = (1.0 - ratio) ** 3 * self.linear_growth_trust_weight(total)
            majority = TrustVoteType.TRUSTED.value if trusted > not_trusted else TrustVoteType.NOT_TRUSTED.value
            score = 1.0 if trust_vote.vote == majority else 0.0
            total_score += score * weight
            total_weight += weight

        return client_repo.update_client(self.db, client, trust_level=total_score / total_weight)

    def linear_growth_trust_weight(self, vote_count: int) -> float:
        max_weight = self.settings.voted_trust_weight_max
        return min(vote_count * max_weight / self.settings.voted_trust_weight_full_votes, max_weight)
