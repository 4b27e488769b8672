"""Unit tests for cinereserva.core.security: bcrypt hashing and JWT issue/verify."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import jwt
from pydantic import SecretStr

from cinereserva.core.config import settings
from cinereserva.core.security import (
    DEV_JWT_SECRET,
    ExpiredTokenError,
    InvalidTokenSignatureError,
    MalformedTokenError,
    TokenError,
    create_access_token,
    decode_access_token,
    get_jwt_secret,
    hash_password,
    verify_password,
)

NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)
OTHER_SECRET = "another-secret-that-is-long-enough-for-hmac-sha-256"


def _payload(**overrides: object) -> dict:
    issued_at = int(NOW.timestamp())
    payload = {
        "user_id": 7,
        "username": "ana",
        "roles": ["ROLE_USER"],
        "iat": issued_at,
        "exp": issued_at + 3600,
        "iss": settings.JWT_ISSUER,
    }
    payload.update(overrides)
    return payload


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces a salted digest that only the right password verifies."""

    def test_digest_differs_from_plaintext_and_verifies(self) -> None:
        digest = hash_password("secreto123", rounds=4)
        self.assertNotEqual(digest, "secreto123")
        self.assertTrue(verify_password("secreto123", digest))
        self.assertFalse(verify_password("secreto124", digest))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("secreto123", rounds=4), hash_password("secreto123", rounds=4))

    def test_default_cost_comes_from_settings(self) -> None:
        digest = hash_password("secreto123")
        self.assertTrue(digest.startswith(f"$2b${settings.BCRYPT_ROUNDS:02d}$"))

    def test_malformed_digest_is_false_not_error(self) -> None:
        self.assertFalse(verify_password("secreto123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("secreto123", ""))

    def test_only_first_72_bytes_matter(self) -> None:
        base = "a" * 72
        digest = hash_password(base + "tail-one", rounds=4)
        self.assertTrue(verify_password(base + "tail-two", digest))


class TestTokenRoundTrip(unittest.TestCase):
    """Issued tokens carry identity, roles, issuer and a 24h lifetime."""

    def test_claims_round_trip(self) -> None:
        token = create_access_token(7, "ana", ["ROLE_USER", "ROLE_ADMIN"], now=NOW)
        claims = decode_access_token(token, now=NOW)
        self.assertEqual(claims.user_id, 7)
        self.assertEqual(claims.username, "ana")
        self.assertEqual(claims.roles, ["ROLE_USER", "ROLE_ADMIN"])
        self.assertEqual(claims.issuer, settings.JWT_ISSUER)
        self.assertEqual(claims.issued_at, NOW)
        self.assertEqual(claims.expires_at, NOW + timedelta(hours=24))

    def test_header_uses_configured_hmac_algorithm(self) -> None:
        token = create_access_token(7, "ana", [], now=NOW)
        self.assertEqual(jwt.get_unverified_header(token)["alg"], settings.JWT_ALGORITHM)

    def test_naive_now_is_treated_as_utc(self) -> None:
        naive = NOW.replace(tzinfo=None)
        token = create_access_token(7, "ana", [], now=naive)
        claims = decode_access_token(token, now=naive)
        self.assertEqual(claims.issued_at, NOW)
        with self.assertRaises(ExpiredTokenError):
            decode_access_token(token, now=naive + timedelta(hours=24, seconds=1))

    def test_valid_at_exact_expiry(self) -> None:
        token = create_access_token(7, "ana", [], now=NOW)
        claims = decode_access_token(token, now=NOW + timedelta(hours=24))
        self.assertEqual(claims.user_id, 7)


class TestTokenRejection(unittest.TestCase):
    """Each failure maps to its TokenError subclass."""

    def test_expired_one_second_after_24h(self) -> None:
        token = create_access_token(7, "ana", [], now=NOW)
        with self.assertRaises(ExpiredTokenError):
            decode_access_token(token, now=NOW + timedelta(hours=24, seconds=1))

    def test_foreign_secret_is_invalid_signature(self) -> None:
        token = jwt.encode(_payload(), OTHER_SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenSignatureError):
            decode_access_token(token, now=NOW)

    def test_unsigned_token_is_rejected(self) -> None:
        token = jwt.encode(_payload(), None, algorithm="none")
        with self.assertRaises(InvalidTokenSignatureError):
            decode_access_token(token, now=NOW)

    def test_other_hmac_algorithm_is_rejected(self) -> None:
        token = jwt.encode(_payload(), get_jwt_secret() * 2, algorithm="HS512")
        with self.assertRaises(InvalidTokenSignatureError):
            decode_access_token(token, now=NOW)

    def test_garbage_is_malformed(self) -> None:
        with self.assertRaises(MalformedTokenError):
            decode_access_token("not.a.token", now=NOW)

    def test_missing_user_id_is_malformed(self) -> None:
        payload = _payload()
        del payload["user_id"]
        token = jwt.encode(payload, get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(MalformedTokenError):
            decode_access_token(token, now=NOW)

    def test_wrong_issuer_is_malformed(self) -> None:
        token = jwt.encode(_payload(iss="someone-else"), get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(MalformedTokenError):
            decode_access_token(token, now=NOW)

    def test_all_failures_share_a_base_class(self) -> None:
        for cls in (ExpiredTokenError, InvalidTokenSignatureError, MalformedTokenError):
            self.assertTrue(issubclass(cls, TokenError))


class TestJwtSecret(unittest.TestCase):
    """Secret comes from settings; the dev fallback is refused outside dev."""

    def test_configured_secret_wins(self) -> None:
        cfg = MagicMock()
        cfg.JWT_SECRET = SecretStr("configured-secret")
        cfg.APP_ENV = "prod"
        self.assertEqual(get_jwt_secret(cfg), "configured-secret")

    def test_dev_falls_back_to_dev_secret(self) -> None:
        cfg = MagicMock()
        cfg.JWT_SECRET = None
        cfg.APP_ENV = "dev"
        self.assertEqual(get_jwt_secret(cfg), DEV_JWT_SECRET)

    def test_prod_without_secret_raises(self) -> None:
        cfg = MagicMock()
        cfg.JWT_SECRET = None
        cfg.APP_ENV = "prod"
        with self.assertRaises(RuntimeError):
            get_jwt_secret(cfg)
