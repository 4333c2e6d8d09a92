"""
Tests for Authentication Token Model
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from token_repository.domain.token import AuthenticationToken, EntityType, TokenType

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


def _token(expiry: datetime, **overrides) -> AuthenticationToken:
    values = dict(
        entity_type=EntityType.APPLICATION,
        token_type=TokenType.SIMPLE,
        expiry=expiry,
        id="foo",
        secret="bar",
        refresh=expiry - timedelta(minutes=30),
    )
    values.update(overrides)
    return AuthenticationToken(**values)


def test_enum_tags_are_stored_as_strings():
    token = _token(NOW)

    assert token.entity_type == "APP"
    assert token.token_type == "simple"
    assert token.entity_type == EntityType.APPLICATION


def test_custom_tags_are_accepted():
    token = _token(NOW, entity_type="SERVICE", token_type="jwt")

    assert token.entity_type == "SERVICE"
    assert token.token_type == "jwt"


def test_empty_tags_are_rejected():
    with pytest.raises(ValidationError):
        _token(NOW, entity_type="")


def test_naive_instants_are_utc():
    token = _token(datetime(2026, 10, 18, 12, 0, 0))

    assert token.expiry == NOW
    assert token.expiry.tzinfo is not None


def test_has_expired():
    token = _token(NOW)

    assert token.has_expired(NOW - timedelta(seconds=1)) is False
    assert token.has_expired(NOW) is True
    assert token.has_expired(NOW + timedelta(seconds=1)) is True


def test_has_expired_defaults_to_current_time():
    assert _token(datetime.now(timezone.utc) + timedelta(hours=1)).has_expired() is False
    assert _token(datetime(2009, 2, 13, 23, 31, 30, tzinfo=timezone.utc)).has_expired() is True


def test_token_is_immutable():
    token = _token(NOW)

    with pytest.raises(ValidationError):
        token.secret = "other"


def test_secret_not_in_repr():
    assert "bar" not in repr(_token(NOW, secret="bar"))


def test_aware_instants_are_converted_to_utc():
    plus_two = timezone(timedelta(hours=2))

    token = _token(datetime(2026, 10, 18, 14, 0, 0, tzinfo=plus_two))

    assert token.expiry == NOW
    assert token.expiry.tzinfo is timezone.utc
