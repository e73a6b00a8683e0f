"""Trust and verification settings sourced from the environment."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, Optional, Union

logger = logging.getLogger(__name__)

SettingKey = Literal[
    "initial_client_trust_level",
    "trust_score_contribution_delta",
    "voted_trust_weight_max",
    "voted_trust_weight_full_votes",
    "sms_challenge_digits",
]


@dataclass(frozen=True)
class SettingDefinition:
    env_var: str
    default: Union[float, int]
    maximum: Optional[float] = None


@dataclass(frozen=True)
class TrustSettings:
    initial_client_trust_level: float
    trust_score_contribution_delta: float
    voted_trust_weight_max: float
    voted_trust_weight_full_votes: int
    sms_challenge_digits: int


_SETTING_DEFINITIONS: Dict[SettingKey, SettingDefinition] = {
    "initial_client_trust_level": SettingDefinition("INITIAL_CLIENT_TRUST_LEVEL", 0.5, maximum=1.0),
    "trust_score_contribution_delta": SettingDefinition("TRUST_SCORE_CONTRIBUTION_DELTA", 0.05, maximum=1.0),
    "voted_trust_weight_max": SettingDefinition("VOTED_TRUST_WEIGHT_MAX", 0.95, maximum=1.0),
    "voted_trust_weight_full_votes": SettingDefinition("VOTED_TRUST_WEIGHT_FULL_VOTES", 20),
    "sms_challenge_digits": SettingDefinition("SMS_CHALLENGE_DIGITS", 5),
}


def _normalize_number(
    value: str | None, default: Union[float, int], maximum: Optional[float] = None
) -> Union[float, int]:
    """Parse an environment value into the default's numeric type.

    Blank, unparsable, non-finite or non-positive values fall back to
    ``default``, as do values above ``maximum`` when one is given.
    """
    if value is None or not value.strip():
        return default
    try:
        parsed = type(default)(value.strip())
    except ValueError:
        logger.warning("Ignoring invalid numeric setting value %r", value)
        return default
    if not math.isfinite(parsed):
        logger.warning("Ignoring non-finite setting value %r", value)
        return default
    if parsed <= 0:
        logger.warning("Ignoring non-positive setting value %r", value)
        return default
    if maximum is not None and parsed > maximum:
        logger.warning("Ignoring setting value %r above maximum %s", value, maximum)
        return default
    return parsed


@lru_cache(maxsize=None)
def get_trust_settings() -> TrustSettings:
    """Return the cached settings sourced from the environment."""
    values = {
        key: _normalize_number(os.getenv(definition.env_var), definition.default, definition.maximum)
        for key, definition in _SETTING_DEFINITIONS.items()
    }
    return TrustSettings(**values)


def refresh_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""
    get_trust_settings.cache_clear()
