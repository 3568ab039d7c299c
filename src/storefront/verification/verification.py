"""PhoneVerification aggregate — one pending passcode per phone number.

The record lives in the domain's database rather than in process memory, so
a code issued by one instance can be verified by another, and expiry is
checked against the stored ``expires_at`` instead of a timer.
"""

import secrets
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.fields import DateTime, String

from storefront.customer.customer import validate_phone
from storefront.domain import storefront
from storefront.errors import AuthenticationError
from storefront.verification.events import OtpExpired, OtpIssued, PhoneVerified

CODE_LENGTH = 4


class VerificationStatus(Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    EXPIRED = "expired"


def generate_code():
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


@storefront.aggregate
class PhoneVerification:
    phone = String(required=True, max_length=16)
    code = String(max_length=CODE_LENGTH)
    status = String(choices=VerificationStatus, default=VerificationStatus.PENDING.value)
    expires_at = DateTime()
    issued_at = DateTime()
    verified_at = DateTime()

    @classmethod
    def start(cls, phone):
        validate_phone(phone)
        return cls(phone=phone, status=VerificationStatus.PENDING.value)

    def issue(self, ttl_seconds, code=None):
        """Store a fresh code, replacing any earlier one for this phone."""
        now = datetime.now(UTC)
        self.code = code or generate_code()
        self.status = VerificationStatus.PENDING.value
        self.issued_at = now
        self.expires_at = now + timedelta(seconds=ttl_seconds)
        self.verified_at = None

        self.raise_(
            OtpIssued(
                verification_id=str(self.id),
                phone=self.phone,
                expires_at=self.expires_at,
            )
        )
        return self.code

    def is_expired(self, now=None):
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return now > expires_at

    def verify(self, code, now=None):
        """Consume the pending code. Raises AuthenticationError on any mismatch."""
        if self.status != VerificationStatus.PENDING.value or not self.code or code != self.code:
            raise AuthenticationError({"otp": ["Invalid OTP"]})

        if self.is_expired(now):
            self.expire()
            return False

        self.code = None
        self.status = VerificationStatus.VERIFIED.value
        self.verified_at = now or datetime.now(UTC)

        self.raise_(
            PhoneVerified(
                verification_id=str(self.id),
                phone=self.phone,
                verified_at=self.verified_at,
            )
        )
        return True

    def expire(self):
        self.code = None
        self.status = VerificationStatus.EXPIRED.value
        self.raise_(OtpExpired(verification_id=str(self.id), phone=self.phone))


@storefront.repository(part_of=PhoneVerification)
class PhoneVerificationRepository:
    def find_by_phone(self, phone: str) -> PhoneVerification | None:
        results = self._dao.query.filter(phone=phone).all().items
        return results[0] if results else None
