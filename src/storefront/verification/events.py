"""Domain events for PhoneVerification."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="PhoneVerification")
class OtpIssued:
    __version__ = 1

    verification_id = Identifier(required=True)
    phone = String(required=True)
    expires_at = DateTime(required=True)


@storefront.event(part_of="PhoneVerification")
class PhoneVerified:
    __version__ = 1

    verification_id = Identifier(required=True)
    phone = String(required=True)
    verified_at = DateTime(required=True)


@storefront.event(part_of="PhoneVerification")
class OtpExpired:
    __version__ = 1

    verification_id = Identifier(required=True)
    phone = String(required=True)
