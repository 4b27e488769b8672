"""Unit tests for cinereserva.core.config: Settings validation rules."""

import unittest

from pydantic import ValidationError

from cinereserva.core.config import Settings


def _settings(**overrides: object) -> Settings:
    """Build Settings from explicit values only (no .env file)."""
    return Settings(_env_file=None, **overrides)


class TestDefaults(unittest.TestCase):
    def test_defaults_are_valid_in_dev(self) -> None:
        s = _settings(JWT_SECRET=None)
        self.assertEqual(s.APP_ENV, "dev")
        self.assertIsNone(s.JWT_SECRET)
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertEqual(s.JWT_EXPIRE_HOURS, 24)
        self.assertEqual(s.BCRYPT_ROUNDS, 10)
        self.assertEqual(s.MOVIE_MAX_DURATION, 600)

    def test_blank_secret_counts_as_unset(self) -> None:
        self.assertIsNone(_settings(JWT_SECRET="   ").JWT_SECRET)


class TestProdSecret(unittest.TestCase):
    """Production refuses to start without an externally supplied secret."""

    def test_prod_without_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_ENV="prod", JWT_SECRET=None)

    def test_prod_with_secret_passes(self) -> None:
        s = _settings(APP_ENV="prod", JWT_SECRET="a-real-production-secret")
        self.assertEqual(s.JWT_SECRET.get_secret_value(), "a-real-production-secret")


class TestFieldRules(unittest.TestCase):
    def test_algorithm_is_normalized(self) -> None:
        self.assertEqual(_settings(JWT_ALGORITHM="hs512").JWT_ALGORITHM, "HS512")

    def test_non_hmac_algorithm_rejected(self) -> None:
        for alg in ("RS256", "none", ""):
            with self.subTest(alg=alg), self.assertRaises(ValidationError):
                _settings(JWT_ALGORITHM=alg)

    def test_database_url_scheme(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:// ").DATABASE_URL, "sqlite://")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://root@localhost/users")

    def test_mongo_url_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MONGO_URL="http://localhost:27017")

    def test_store_timeouts_bounded(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DB_TIMEOUT_SEC=0)
        with self.assertRaises(ValidationError):
            _settings(MONGO_LIST_TIMEOUT_SEC=31)

    def test_bcrypt_rounds_bounded(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(BCRYPT_ROUNDS=3)
        self.assertEqual(_settings(BCRYPT_ROUNDS=12).BCRYPT_ROUNDS, 12)
