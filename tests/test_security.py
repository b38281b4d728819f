from datetime import datetime, timedelta, timezone

from jose import jwt
from starlette.requests import Request

from shared.security.jwt_handler import ALGORITHM, SECRET_KEY, token_subject
from shared.security.rate_limiter import user_id_or_ip


def sign(claims, key=SECRET_KEY):
    return jwt.encode(claims, key, algorithm=ALGORITHM)


def request_with(headers):
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/tracking/TRK00000000ZZZZ",
        "headers": [(name.lower().encode(), value.encode()) for name, value in headers.items()],
        "client": ("203.0.113.9", 4711),
    })


class TestTokenSubject:

    def test_valid_token(self):
        assert token_subject(sign({"sub": "u-42"})) == "u-42"

    def test_expired_token(self):
        expired = datetime.now(timezone.utc) - timedelta(minutes=5)
        assert token_subject(sign({"sub": "u-42", "exp": expired})) is None

    def test_foreign_key(self):
        assert token_subject(sign({"sub": "u-42"}, key="someone-elses-secret")) is None

    def test_missing_subject(self):
        assert token_subject(sign({"role": "customer"})) is None

    def test_nothing_sent(self):
        assert token_subject(None) is None
        assert token_subject("") is None
        assert token_subject("not-a-jwt") is None


class TestRateLimitKey:

    def test_signed_in_customer(self):
        request = request_with({"Authorization": f"Bearer {sign({'sub': 'u-42'})}"})
        assert user_id_or_ip(request) == "user:u-42"

    def test_guest_and_bad_token_fall_back_to_ip(self):
        assert user_id_or_ip(request_with({})) == "ip:203.0.113.9"
        assert user_id_or_ip(request_with({"Authorization": "Bearer nope"})) == "ip:203.0.113.9"
