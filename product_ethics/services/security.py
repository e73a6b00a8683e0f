"""
Client security checks.

Assertions raise ``PermissionError``. The ``client_valid`` and
``client_verified`` decorators apply the matching assertion to every
``Client`` argument of the wrapped callable, so service methods can declare
their requirement next to their signature.
"""
from __future__ import annotations

import functools
import itertools
import logging
from typing import Callable, Optional

from product_ethics.db import models
from product_ethics.utils.role_permissions import CLIENT_ROLE_ADMIN

logger = logging.getLogger(__name__)


def is_client_valid(client: Optional[models.Client]) -> bool:
    return client is not None and bool(client.enabled) and not client.banned


def assert_client_valid(client: Optional[models.Client]) -> None:
    """Raise PermissionError unless the client is enabled and not banned."""
    if client is None:
        raise PermissionError("Client required")
    if not client.enabled:
        logger.warning("Rejected disabled client %s", client.id)
        raise PermissionError(f"Client with id {client.id} is disabled")
    if client.banned:
        logger.warning("Rejected banned client %s", client.id)
        raise PermissionError(f"Client with id {client.id} is banned")


def assert_client_verified(client: Optional[models.Client]) -> None:
    """Raise PermissionError unless the client is valid and verified."""
    assert_client_valid(client)
    if not client.verified:
        raise PermissionError(f"Client with id {client.id} is not verified")


def is_admin(client: models.Client) -> bool:
    return client.role == CLIENT_ROLE_ADMIN


def assert_admin(client: models.Client) -> None:
    assert_client_valid(client)
    if not is_admin(client):
        raise PermissionError(f"Client with id {client.id} is not an admin")


def assert_creator_or_admin(client: models.Client, creator_id) -> None:
    """Raise PermissionError unless ``client`` created the item or is an admin."""
    assert_client_valid(client)
    if client.id != creator_id and not is_admin(client):
        raise PermissionError(f"Client with id {client.id} is neither creator nor admin")


def _client_arguments(args, kwargs):
    return (value for value in itertools.chain(args, kwargs.values()) if isinstance(value, models.Client))


def client_valid(func: Callable) -> Callable:
    """Require every Client argument to be valid."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        for client in _client_arguments(args, kwargs):
            assert_client_valid(client)
        return func(*args, **kwargs)
    return wrapper


def client_verified(func: Callable) -> Callable:
    """Require every Client argument to be verified."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        for client in _client_arguments(args, kwargs):
            assert_client_verified(client)
        return func(*args, **kwargs)
    return wrapper
