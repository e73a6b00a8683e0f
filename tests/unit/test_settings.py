import pytest

from product_ethics.utils.settings import get_trust_settings, refresh_settings_cache

_ENV_VARS = [
    "INITIAL_CLIENT_TRUST_LEVEL",
    "TRUST_SCORE_CONTRIBUTION_DELTA",
    "VOTED_TRUST_WEIGHT_MAX",
    "VOTED_TRUST_WEIGHT_FULL_VOTES",
    "SMS_CHALLENGE_DIGITS",
]


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Clear env + cached values for each test."""
    for env_name in _ENV_VARS:
        monkeypatch.delenv(env_name, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


def test_defaults():
    settings = get_trust_settings()
    assert settings.initial_client_trust_level == 0.5
    assert settings.trust_score_contribution_delta == 0.05
    assert settings.voted_trust_weight_max == 0.95
    assert settings.voted_trust_weight_full_votes == 20
    assert settings.sms_challenge_digits == 5


def test_env_override_and_cache(monkeypatch):
    monkeypatch.setenv("INITIAL_CLIENT_TRUST_LEVEL", "0.3")
    monkeypatch.setenv("VOTED_TRUST_WEIGHT_FULL_VOTES", "10")
    settings = get_trust_settings()
    assert settings.initial_client_trust_level == 0.3
    assert settings.voted_trust_weight_full_votes == 10

    # Cached until refreshed
    monkeypatch.setenv("INITIAL_CLIENT_TRUST_LEVEL", "0.9")
    assert get_trust_settings().initial_client_trust_level == 0.3
    refresh_settings_cache()
    assert get_trust_settings().initial_client_trust_level == 0.9


@pytest.mark.parametrize("raw", ["", "  ", "abc", "-1", "0"])
def test_invalid_values_fall_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("TRUST_SCORE_CONTRIBUTION_DELTA", raw)
    assert get_trust_settings().trust_score_contribution_delta == 0.05


def test_integer_setting_rejects_float(monkeypatch):
    monkeypatch.setenv("SMS_CHALLENGE_DIGITS", "4.5")
    assert get_trust_settings().sms_challenge_digits == 5


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "1e999"])
def test_non_finite_values_fall_back_to_default(monkeypatch, raw):
    monkeypatch.setenv("VOTED_TRUST_WEIGHT_MAX", raw)
    monkeypatch.setenv("INITIAL_CLIENT_TRUST_LEVEL", raw)
    settings = get_trust_settings()
    assert settings.voted_trust_weight_max == 0.95
    assert settings.initial_client_trust_level == 0.5


@pytest.mark.parametrize("env_name, attribute, default", [
    ("INITIAL_CLIENT_TRUST_LEVEL", "initial_client_trust_level", 0.5),
    ("TRUST_SCORE_CONTRIBUTION_DELTA", "trust_score_contribution_delta", 0.05),
    ("VOTED_TRUST_WEIGHT_MAX", "voted_trust_weight_max", 0.95),
])
def test_fractions_above_one_fall_back_to_default(monkeypatch, env_name, attribute, default):
    monkeypatch.setenv(env_name, "1.5")
    assert getattr(get_trust_settings(), attribute) == default


def test_fraction_of_exactly_one_is_accepted(monkeypatch):
    monkeypatch.setenv("VOTED_TRUST_WEIGHT_MAX", "1")
    assert get_trust_settings().voted_trust_weight_max == 1.0


def test_integer_settings_have_no_upper_bound(monkeypatch):
    monkeypatch.setenv("VOTED_TRUST_WEIGHT_FULL_VOTES", "500")
    assert get_trust_settings().voted_trust_weight_full_votes == 500
