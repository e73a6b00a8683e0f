"""
Product service: products, their crowdsourced names and assignments, and
product scans.

Category, label, tag and company assignments are stored as reference
contributions on the product, so every assignment carries a creator and a
trust score and can be voted on like a name edit. A product has at most one
company; categories, labels and tags are sets.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import companies as company_repo
from product_ethics.db.repositories import products as product_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.contribution_service import ContributionService, ContributionType, TrustVoteType
from product_ethics.services.security import assert_creator_or_admin, client_valid, client_verified

logger = logging.getLogger(__name__)

BARCODE_TYPE_EAN13 = "ean13"
BARCODE_TYPE_UPC = "upc"
BARCODE_TYPE_UNKNOWN = "unknown"
BARCODE_TYPES = frozenset({BARCODE_TYPE_EAN13, BARCODE_TYPE_UPC, BARCODE_TYPE_UNKNOWN})


def _validate_barcode_type(barcode_type: Optional[str]) -> str:
    value = barcode_type or BARCODE_TYPE_UNKNOWN
    if value not in BARCODE_TYPES:
        raise ValueError(f"Invalid barcode type '{value}'. Allowed: {sorted(BARCODE_TYPES)}")
    return value


def _distinct(items: Iterable, what: str) -> list:
    """Return ``items`` as a list, raising ValueError if the same one is listed twice."""
    items = list(items)
    if len({item.id for item in items}) != len(items):
        raise ValueError(f"The same {what} is listed more than once")
    return items


@dataclass
class ProductScanResult:
    product_scan: models.ProductScan
    product: models.Product
    recommendations: List[models.Recommendation] = field(default_factory=list)


class ProductService:
    """Service class for products and product scans."""

    def __init__(
        self,
        db: Session,
        contribution_service: Optional[ContributionService] = None,
        recommendation_service=None,
    ):
        self.db = db
        self.contribution_service = contribution_service or ContributionService(db)
        self._recommendation_service = recommendation_service

    @property
    def recommendation_service(self):
        if self._recommendation_service is None:
            # local import: RecommendationService depends on this module
            from product_ethics.services.recommendation_service import RecommendationService
            self._recommendation_service = RecommendationService(self.db, product_service=self)
        return self._recommendation_service

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_product(self, product_id: uuid.UUID) -> Optional[models.Product]:
        return product_repo.get_product(self.db, product_id)

    def get_product_by_barcode(self, barcode: str) -> Optional[models.Product]:
        if not barcode:
            return None
        return product_repo.get_product_by_barcode(self.db, barcode)

    def get_product_scan(self, product_scan_id: uuid.UUID) -> Optional[models.ProductScan]:
        return product_repo.get_product_scan(self.db, product_scan_id)

    # ------------------------------------------------------------------
    # Creation and names
    # ------------------------------------------------------------------
    @client_verified
    @transactional
    def create_product(
        self,
        client: models.Client,
        barcode: Optional[str] = None,
        barcode_type: Optional[str] = None,
        name: Optional[str] = None,
        categories: Iterable[models.ProductCategory] = (),
        labels: Iterable[models.ProductLabel] = (),
        tags: Iterable[models.ProductTag] = (),
        company: Optional[models.Company] = None,
    ) -> models.Product:
        """Create a product and record the initial name and assignments as contributions of ``client``."""
        if name and not name.strip():
            raise ValueError("Product name must not be blank")
        categories = _distinct(categories, "category")
        labels = _distinct(labels, "label")
        tags = _distinct(tags, "tag")

        product = self._create(client, barcode, barcode_type)
        if name:
            self._edit_name(client, product, name)
        for category in categories:
            self._assign(ContributionType.ASSIGN_CATEGORY_TO_PRODUCT, client, product, category.id)
        for label in labels:
            self._assign(ContributionType.ASSIGN_LABEL_TO_PRODUCT, client, product, label.id)
        for tag in tags:
            self._assign(ContributionType.ASSIGN_TAG_TO_PRODUCT, client, product, tag.id)
        if company is not None:
            self._assign(ContributionType.ASSIGN_COMPANY_TO_PRODUCT, client, product, company.id, exclusive=True)

        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.CREATED, text=name)
        logger.info("Client %s created product %s", client.id, product.id)
        return product

    @client_valid
    @transactional
    def create_empty_product(self, client: models.Client, barcode: Optional[str] = None,
                             barcode_type: Optional[str] = None) -> models.Product:
        """Create a product with no name or assignments, e.g. for an unknown scanned barcode."""
        product = self._create(client, barcode, barcode_type)
        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.CREATED)
        return product

    def _create(self, client: models.Client, barcode: Optional[str], barcode_type: Optional[str]) -> models.Product:
        barcode_type = _validate_barcode_type(barcode_type)
        if barcode and product_repo.get_product_by_barcode(self.db, barcode) is not None:
            raise ValueError(f"Product with barcode {barcode} already exists")
        return product_repo.create_product(self.db, creator_id=client.id, barcode=barcode or None,
                                           barcode_type=barcode_type)

    @client_verified
    @transactional
    def edit_product_name(self, client: models.Client, product: models.Product, name: str) -> models.Contribution:
        contribution = self._edit_name(client, product, name)
        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.EDITED, text=name)
        return contribution

    def _edit_name(self, client: models.Client, product: models.Product, name: str) -> models.Contribution:
        if not name or not name.strip():
            raise ValueError("Product name must be provided")
        contribution = self.contribution_service.create_text_contribution(
            ContributionType.EDIT_PRODUCT_NAME, client, product.id, name
        )
        product_repo.update_product(self.db, product, name=name)
        return contribution

    def product_name_contribution(self, product: models.Product) -> Optional[models.Contribution]:
        return self.contribution_service.current_text_contribution(ContributionType.EDIT_PRODUCT_NAME, product.id)

    def product_name(self, product: models.Product) -> Optional[str]:
        contribution = self.product_name_contribution(product)
        return contribution.text if contribution else None

    def can_edit_product_name(self, client: models.Client, product: models.Product) -> bool:
        return self.contribution_service.has_sufficient_trust_to_edit_contribution(
            client, self.product_name_contribution(product)
        )

    @client_verified
    @transactional
    def trust_vote_product_name(self, client: models.Client, product: models.Product, vote: TrustVoteType) -> models.TrustVote:
        contribution = self.product_name_contribution(product)
        if contribution is None:
            raise ValueError(f"Product {product.id} has no name contribution")
        return self.contribution_service.trust_vote_item(client, contribution, vote)

    @client_valid
    @transactional
    def assign_barcode_to_product(self, client: models.Client, product: models.Product, barcode: str,
                                  barcode_type: Optional[str] = None) -> models.Product:
        assert_creator_or_admin(client, product.creator_id)
        if not barcode:
            raise ValueError("Barcode must be provided")
        barcode_type = _validate_barcode_type(barcode_type)
        existing = product_repo.get_product_by_barcode(self.db, barcode)
        if existing is not None and existing.id != product.id:
            raise ValueError(f"Barcode {barcode} already assigned to product {existing.id}")
        product = product_repo.update_product(self.db, product, barcode=barcode, barcode_type=barcode_type)
        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.EDITED,
                          text=f"barcode:{barcode}")
        return product

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------
    def _assign(self, type: ContributionType, client: models.Client, product: models.Product,
                reference_id: uuid.UUID, exclusive: bool = False) -> models.Contribution:
        return self.contribution_service.create_reference_contribution(
            type, client, product.id, reference_id, exclusive=exclusive
        )

    def _assign_and_log(self, type: ContributionType, client: models.Client, product: models.Product,
                        reference_id: uuid.UUID, label: str, exclusive: bool = False) -> models.Contribution:
        contribution = self._assign(type, client, product, reference_id, exclusive=exclusive)
        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.EDITED,
                          text=f"{label}:{reference_id}")
        return contribution

    def _remove_and_log(self, type: ContributionType, client: models.Client, product: models.Product,
                        reference_id: uuid.UUID, label: str) -> models.Contribution:
        contribution = self.contribution_service.disable_reference_contribution(type, client, product.id, reference_id)
        audit.log_product(self.db, client=client, product_id=product.id, change_type=ChangeType.EDITED,
                          text=f"-{label}:{reference_id}")
        return contribution

    @client_verified
    @transactional
    def assign_category_to_product(self, client: models.Client, product: models.Product,
                                   category: models.ProductCategory) -> models.Contribution:
        return self._assign_and_log(ContributionType.ASSIGN_CATEGORY_TO_PRODUCT, client, product, category.id, "category")

    @client_verified
    @transactional
    def remove_category_from_product(self, client: models.Client, product: models.Product,
                                     category: models.ProductCategory) -> models.Contribution:
        return self._remove_and_log(ContributionType.ASSIGN_CATEGORY_TO_PRODUCT, client, product, category.id, "category")

    @client_verified
    @transactional
    def assign_label_to_product(self, client: models.Client, product: models.Product,
                                label: models.ProductLabel) -> models.Contribution:
        return self._assign_and_log(ContributionType.ASSIGN_LABEL_TO_PRODUCT, client, product, label.id, "label")

    @client_verified
    @transactional
    def remove_label_from_product(self, client: models.Client, product: models.Product,
                                  label: models.ProductLabel) -> models.Contribution:
        return self._remove_and_log(ContributionType.ASSIGN_LABEL_TO_PRODUCT, client, product, label.id, "label")

    @client_verified
    @transactional
    def assign_tag_to_product(self, client: models.Client, product: models.Product,
                              tag: models.ProductTag) -> models.Contribution:
        return self._assign_and_log(ContributionType.ASSIGN_TAG_TO_PRODUCT, client, product, tag.id, "tag")

    @client_verified
    @transactional
    def remove_tag_from_product(self, client: models.Client, product: models.Product,
                                tag: models.ProductTag) -> models.Contribution:
        return self._remove_and_log(ContributionType.ASSIGN_TAG_TO_PRODUCT, client, product, tag.id, "tag")

    @client_verified
    @transactional
    def assign_company_to_product(self, client: models.Client, product: models.Product,
                                  company: models.Company) -> models.Contribution:
        """Set the producing company, replacing the current one if the client has sufficient trust."""
        return self._assign_and_log(ContributionType.ASSIGN_COMPANY_TO_PRODUCT, client, product, company.id,
                                    "company", exclusive=True)

    def product_categories(self, product: models.Product) -> List[models.ProductCategory]:
        ids = self.contribution_service.current_reference_ids(ContributionType.ASSIGN_CATEGORY_TO_PRODUCT, product.id)
        return product_repo.get_product_categories(self.db, ids)

    def product_labels(self, product: models.Product) -> List[models.ProductLabel]:
        ids = self.contribution_service.current_reference_ids(ContributionType.ASSIGN_LABEL_TO_PRODUCT, product.id)
        return product_repo.get_product_labels(self.db, ids)

    def product_tags(self, product: models.Product) -> List[models.ProductTag]:
        ids = self.contribution_service.current_reference_ids(ContributionType.ASSIGN_TAG_TO_PRODUCT, product.id)
        return product_repo.get_product_tags(self.db, ids)

    def product_company(self, product: models.Product) -> Optional[models.Company]:
        contribution = self.contribution_service.current_reference_contribution(
            ContributionType.ASSIGN_COMPANY_TO_PRODUCT, product.id
        )
        return company_repo.get_company(self.db, contribution.reference_id) if contribution else None

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------
    @client_valid
    @transactional
    def scan_product(self, client: models.Client, barcode: str, latitude: Optional[float] = None,
                     longitude: Optional[float] = None) -> ProductScanResult:
        """Record a scan of ``barcode``, creating an empty product for unknown barcodes."""
        if not barcode:
            raise ValueError("Barcode must be provided")
        product = self.get_product_by_barcode(barcode)
        if product is None:
            product = self.create_empty_product(client, barcode, BARCODE_TYPE_UNKNOWN)

        location_id = None
        if latitude is not None and longitude is not None:
            location_id = product_repo.create_location(self.db, latitude, longitude).id
        scan = product_repo.create_product_scan(self.db, client.id, product.id, location_id)

        recommendations = self.recommendation_service.get_recommendations(client, product)
        return ProductScanResult(product_scan=scan, product=product, recommendations=recommendations)

    @client_valid
    @transactional
    def assign_location_to_product_scan(self, client: models.Client, product_scan: models.ProductScan,
                                        latitude: float, longitude: float) -> models.ProductScan:
        assert_creator_or_admin(client, product_scan.client_id)
        if product_scan.location_id is not None:
            raise ValueError(f"Location already set on product scan {product_scan.id}")
        location = product_repo.create_location(self.db, latitude, longitude)
        return product_repo.set_product_scan_location(self.db, product_scan, location.id)
