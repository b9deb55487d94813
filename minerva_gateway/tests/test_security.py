from datetime import datetime, timedelta, timezone

import pytest

from minerva_gateway.core.errors import AuthInvalid, AuthRequired
from minerva_gateway.core.security import SessionClaims, issue_token, verify_token


def test_round_trip(settings):
    token = issue_token("260000001", "p@ss word", False, settings=settings)
    assert verify_token(token, settings=settings) == SessionClaims("260000001", "p@ss word", False)


def test_demo_flag_round_trip(settings):
    token = issue_token("demo", "demo", True, settings=settings)
    assert verify_token(token, settings=settings).is_demo is True


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_token(settings, token):
    with pytest.raises(AuthRequired):
        verify_token(token, settings=settings)


def test_expired_token_is_invalid_not_missing(settings):
    issued = datetime.now(timezone.utc) - timedelta(days=settings.token_ttl_days, minutes=1)
    token = issue_token("u", "p", False, settings=settings, now=issued)
    with pytest.raises(AuthInvalid):
        verify_token(token, settings=settings)


def test_token_still_valid_before_expiry(settings):
    issued = datetime.now(timezone.utc) - timedelta(days=settings.token_ttl_days - 1)
    token = issue_token("u", "p", False, settings=settings, now=issued)
    assert verify_token(token, settings=settings).identity == "u"


def test_wrong_secret_and_garbage(settings):
    other = settings.model_copy(update={"jwt_secret": "rotated"})
    token = issue_token("u", "p", False, settings=other)
    with pytest.raises(AuthInvalid):
        verify_token(token, settings=settings)
    with pytest.raises(AuthInvalid):
        verify_token("not.a.jwt", settings=settings)
