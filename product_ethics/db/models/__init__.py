"""
Domain-split SQLAlchemy models with a single import surface.

`from product_ethics.db import models` exposes `Base`, `now_utc`, and all ORM
classes.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .clients import Client, ClientDevice, MobileNumber, SmsVerification
from .infochannels import InfoChannel, InfoChannelClient, InfoChannelRole, InfoChannelFollower
from .companies import Company, Store
from .products import Product, ProductCategory, ProductLabel, ProductTag, Location, ProductScan
from .contributions import Contribution, TrustVote
from .recommendations import Recommendation
from .infosources import (
    InfoSource,
    InfoSourceDomain,
    InfoSourceReference,
    info_source_reference_products,
    info_source_reference_product_categories,
    info_source_reference_product_labels,
    info_source_reference_companies,
)
from .changelog import ChangeLog

__all__ = [
    # base
    "Base",
    "now_utc",
    # clients
    "Client",
    "ClientDevice",
    "MobileNumber",
    "SmsVerification",
    # info channels
    "InfoChannel",
    "InfoChannelClient",
    "InfoChannelRole",
    "InfoChannelFollower",
    # companies/products
    "Company",
    "Store",
    "Product",
    "ProductCategory",
    "ProductLabel",
    "ProductTag",
    "Location",
    "ProductScan",
    # trust
    "Contribution",
    "TrustVote",
    # recommendations/info sources
    "Recommendation",
    "InfoSource",
    "InfoSourceDomain",
    "InfoSourceReference",
    "info_source_reference_products",
    "info_source_reference_product_categories",
    "info_source_reference_product_labels",
    "info_source_reference_companies",
    # audit
    "ChangeLog",
]
