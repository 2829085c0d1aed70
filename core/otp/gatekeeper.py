import hashlib
import hmac
import logging
import secrets
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone

from core.common.errors import RateLimited
from core.otp.store import CacheRecordStore
from core.websites.domains import normalize_email

logger = logging.getLogger(__name__)

CODE_LENGTH = 6


def generate_code() -> str:
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


def hash_code(email: str, code: str) -> str:
    salt = getattr(settings, "SECRET_KEY", "dev")
    payload = f"{normalize_email(email)}|{code}|{salt}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class OtpRecord:
    email: str
    code_hash: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "OtpRecord":
        return cls(**data)


def _attempts_key(email: str) -> str:
    return f"attempts:{email}"


class OtpGatekeeper:
    """
    Issues and checks single-use, time-limited 6-digit codes; at most one live code per email.
    Only a salted hash of the code is stored. The record is written once at issue and only
    ever deleted afterwards; wrong guesses are counted under a separate key.
    """

    def __init__(self, store=None, clock=None, ttl_seconds=None, max_attempts=None):
        self.store = store or CacheRecordStore("otp")
        self.clock = clock or timezone.now
        self.ttl_seconds = ttl_seconds or settings.OTP_TTL_SECONDS
        self.max_attempts = max_attempts or settings.OTP_MAX_ATTEMPTS

    def _load(self, email: str):
        raw = self.store.get(email)
        return OtpRecord.from_dict(raw) if raw else None

    def _retry_after(self, record) -> int:
        if not record:
            return self.ttl_seconds
        return max(1, int((record.expires_at - self.clock()).total_seconds()))

    def _discard(self, email: str) -> bool:
        self.store.delete(_attempts_key(email))
        return self.store.delete(email)

    def has_active(self, email: str) -> bool:
        record = self._load(normalize_email(email))
        return bool(record) and not record.is_expired(self.clock())

    def issue(self, email: str) -> str:
        email = normalize_email(email)
        now = self.clock()
        code = generate_code()
        record = OtpRecord(
            email=email,
            code_hash=hash_code(email, code),
            issued_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )

        if self.store.add(email, record.to_dict(), self.ttl_seconds):
            self.store.delete(_attempts_key(email))
            return code

        existing = self._load(email)
        if existing and not existing.is_expired(now):
            raise RateLimited(retry_after_seconds=self._retry_after(existing))

        # logically expired but not yet evicted by the cache TTL
        self._discard(email)
        if not self.store.add(email, record.to_dict(), self.ttl_seconds):
            raise RateLimited(retry_after_seconds=self._retry_after(self._load(email)))
        return code

    def verify(self, email: str, code: str) -> bool:
        """Fail-closed: never raises for a bad email/code, just returns False."""
        email = normalize_email(email)
        record = self._load(email)
        if not record:
            return False

        if record.is_expired(self.clock()):
            self._discard(email)
            return False

        if not hmac.compare_digest(record.code_hash, hash_code(email, (code or "").strip())):
            attempts = self.store.incr(_attempts_key(email), self._retry_after(record))
            if attempts >= self.max_attempts:
                logger.warning("OTP attempt budget exhausted for %s; code revoked", email)
                self._discard(email)
            return False

        # the delete is the consume step: of two racing verifies only one removes the key
        consumed = self.store.delete(email)
        self.store.delete(_attempts_key(email))
        return consumed

    def revoke(self, email: str) -> None:
        self._discard(normalize_email(email))
