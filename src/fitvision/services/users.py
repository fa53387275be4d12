"""Account lifecycle: registration, credentials, profile setup, access."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from passlib.context import CryptContext

from fitvision.domain.errors import AuthError, EmailInUseError
from fitvision.domain.profiles import Account, Profile
from fitvision.services.meal_plans import generate_meal_plan, validate_profile

_logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
UNKNOWN_ACCOUNT_PASSWORD = "unknown-account"


class AccountRepository(Protocol):
    """Persistence interface for accounts and their profiles."""

    def create_account(
        self,
        name: str,
        email: str,
        password_hash: str,
        created_at: datetime,
        trial_ends_at: datetime,
    ) -> Account:
        """Create and return a new account."""

    def find_by_email(self, email: str) -> Account | None:
        """Return the account registered with an email, if present."""

    def get_account(self, account_id: UUID) -> Account | None:
        """Return an account by id, if present."""

    def update_profile(self, account_id: UUID, profile: Profile) -> None:
        """Replace the profile stored on an account."""

    def set_subscribed(self, account_id: UUID, subscribed: bool) -> None:
        """Update the subscription flag of an account."""


class PasswordHasher(Protocol):
    """Strategy for storing and checking passwords."""

    def hash(self, password: str) -> str:
        """Return a salted hash of the password."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when the password matches the hash."""


def _default_crypt_context() -> CryptContext:
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass
class PasslibPasswordHasher(PasswordHasher):
    """Password hasher backed by a passlib crypt context."""

    context: CryptContext = field(default_factory=_default_crypt_context)

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self.context.verify(password, password_hash)
        except ValueError:
            # Unrecognized or malformed stored hash.
            return False


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UserService:
    """Application service for account and profile actions."""

    repository: AccountRepository
    hasher: PasswordHasher = field(default_factory=PasslibPasswordHasher)
    trial_days: int = 7
    clock: Callable[[], datetime] = _utcnow
    _unknown_account_hash: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Stands in for the stored hash when no account matches the email.
        self._unknown_account_hash = self.hasher.hash(UNKNOWN_ACCOUNT_PASSWORD)

    def register(self, name: str, email: str, password: str) -> Account:
        """Create an account with a free trial starting now."""
        normalized = _normalize_email(email)
        if self.repository.find_by_email(normalized) is not None:
            raise EmailInUseError("Email already in use")
        now = self.clock()
        account = self.repository.create_account(
            name=name.strip(),
            email=normalized,
            password_hash=self.hasher.hash(password),
            created_at=now,
            trial_ends_at=now + timedelta(days=self.trial_days),
        )
        _logger.info("Registered account %s", account.id)
        return account

    def validate_credentials(self, email: str, password: str) -> Account:
        """Return the account for matching credentials or raise AuthError."""
        account = self.repository.find_by_email(_normalize_email(email))
        password_hash = (
            account.password_hash if account else self._unknown_account_hash
        )
        if not self.hasher.verify(password, password_hash) or account is None:
            _logger.warning("Rejected credentials for a login attempt")
            raise AuthError
        return account

    def get_account(self, account_id: UUID) -> Account | None:
        """Return an account by id."""
        return self.repository.get_account(account_id)

    def complete_profile(self, account_id: UUID, profile: Profile) -> Account | None:
        """Validate a profile, attach its meal plan and persist it."""
        account = self.repository.get_account(account_id)
        if account is None:
            return None
        validate_profile(profile)
        planned = profile.with_plan(generate_meal_plan(profile))
        self.repository.update_profile(account_id, planned)
        _logger.info(
            "Profile set up for account %s: daily_calories=%s",
            account_id,
            planned.daily_calories,
        )
        return self.repository.get_account(account_id)

    def subscribe(self, account_id: UUID) -> Account | None:
        """Activate the subscription for an account."""
        if self.repository.get_account(account_id) is None:
            return None
        self.repository.set_subscribed(account_id, subscribed=True)
        return self.repository.get_account(account_id)

    def can_access_premium(self, account: Account) -> bool:
        return can_access_premium(account, self.clock())

    def trial_days_remaining(self, account: Account) -> int:
        return trial_days_remaining(account, self.clock())


def can_access_premium(account: Account, now: datetime) -> bool:
    """Subscribers and accounts still in their trial get premium features."""
    return account.is_subscribed or now < account.trial_ends_at


def trial_days_remaining(account: Account, now: datetime) -> int:
    """Whole days left in the trial, rounded up, never negative."""
    seconds = (account.trial_ends_at - now).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def _normalize_email(email: str) -> str:
    return email.strip().lower()
