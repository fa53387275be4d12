"""Tests for account registration, credentials and access rules."""

from dataclasses import replace
from datetime import timedelta
from uuid import uuid4

import pytest

from fitvision.domain.errors import AuthError, EmailInUseError, ValidationError
from fitvision.domain.profiles import MealType
from fitvision.services.users import (
    PasslibPasswordHasher,
    UserService,
    can_access_premium,
    trial_days_remaining,
)
from tests.conftest import (
    FIXED_NOW,
    InMemoryAccountRepository,
    PlainTextHasher,
    make_profile,
)


def _service(
    repository: InMemoryAccountRepository | None = None,
) -> UserService:
    return UserService(
        repository or InMemoryAccountRepository(),
        hasher=PlainTextHasher(),
        clock=lambda: FIXED_NOW,
    )


def test_register_starts_trial_and_hashes_password() -> None:
    service = _service()

    account = service.register(" Ada ", " Ada@Example.com ", "secret123")

    assert account.name == "Ada"
    assert account.email == "ada@example.com"
    assert account.password_hash == "plain:secret123"
    assert account.created_at == FIXED_NOW
    assert account.trial_ends_at == FIXED_NOW + timedelta(days=7)
    assert account.is_subscribed is False
    assert account.profile is None


def test_register_rejects_duplicate_email() -> None:
    service = _service()
    service.register("Ada", "ada@example.com", "secret123")

    with pytest.raises(EmailInUseError):
        service.register("Other", "ADA@example.com", "different")


def test_validate_credentials() -> None:
    service = _service()
    account = service.register("Ada", "ada@example.com", "secret123")

    assert service.validate_credentials("Ada@Example.com", "secret123") == account
    with pytest.raises(AuthError, match="Invalid email or password"):
        service.validate_credentials("ada@example.com", "wrong")
    with pytest.raises(AuthError, match="Invalid email or password"):
        service.validate_credentials("nobody@example.com", "secret123")


def test_complete_profile_attaches_meal_plan() -> None:
    service = _service()
    account = service.register("Ada", "ada@example.com", "secret123")

    updated = service.complete_profile(account.id, make_profile())

    assert updated is not None
    assert updated.profile is not None
    assert updated.profile.is_setup_complete
    assert updated.profile.daily_calories == 2756
    assert updated.profile.meals is not None
    assert updated.profile.meals[MealType.DINNER].calories == 827


def test_complete_profile_validates_input() -> None:
    repository = InMemoryAccountRepository()
    service = _service(repository)
    account = service.register("Ada", "ada@example.com", "secret123")

    with pytest.raises(ValidationError):
        service.complete_profile(account.id, make_profile(age=10))

    assert repository.accounts[account.id].profile is None


def test_complete_profile_unknown_account() -> None:
    assert _service().complete_profile(uuid4(), make_profile()) is None


def test_subscribe_grants_access_after_trial() -> None:
    repository = InMemoryAccountRepository()
    service = _service(repository)
    account = service.register("Ada", "ada@example.com", "secret123")
    expired = replace(account, trial_ends_at=FIXED_NOW - timedelta(days=1))
    repository.accounts[account.id] = expired

    assert service.can_access_premium(expired) is False

    subscribed = service.subscribe(account.id)

    assert subscribed is not None
    assert subscribed.is_subscribed is True
    assert service.can_access_premium(subscribed) is True
    assert _service().subscribe(uuid4()) is None


def test_trial_access_and_days_remaining() -> None:
    account = _service().register("Ada", "ada@example.com", "secret123")

    assert can_access_premium(account, FIXED_NOW)
    assert trial_days_remaining(account, FIXED_NOW) == 7
    assert trial_days_remaining(account, FIXED_NOW + timedelta(hours=1)) == 7
    assert trial_days_remaining(account, FIXED_NOW + timedelta(days=6, hours=1)) == 1
    assert trial_days_remaining(account, FIXED_NOW + timedelta(days=7)) == 0
    assert not can_access_premium(account, FIXED_NOW + timedelta(days=7))
    assert trial_days_remaining(account, FIXED_NOW + timedelta(days=30)) == 0


def test_passlib_hasher_roundtrip() -> None:
    hasher = PasslibPasswordHasher()

    password_hash = hasher.hash("secret123")

    assert password_hash != "secret123"
    assert hasher.verify("secret123", password_hash)
    assert not hasher.verify("wrong", password_hash)


def test_passlib_hasher_rejects_malformed_hash() -> None:
    assert PasslibPasswordHasher().verify("secret123", "not-a-hash") is False


class CountingHasher(PlainTextHasher):
    def __init__(self) -> None:
        self.verify_calls = 0

    def verify(self, password: str, password_hash: str) -> bool:
        self.verify_calls += 1
        return super().verify(password, password_hash)


def test_validate_credentials_checks_a_hash_for_unknown_email() -> None:
    hasher = CountingHasher()
    service = UserService(
        InMemoryAccountRepository(), hasher=hasher, clock=lambda: FIXED_NOW
    )

    with pytest.raises(AuthError):
        service.validate_credentials("nobody@example.com", "unknown-account")

    assert hasher.verify_calls == 1
