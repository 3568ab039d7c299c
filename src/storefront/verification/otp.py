"""Phone login by one-time passcode — send and verify.

Settings come from the environment:

- ``OTP_TTL_SECONDS``: lifetime of an issued code (default 300).
- ``MASTER_BYPASS_OTP``: a code accepted for any phone (default ``0000``).
"""

import os

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.customer.registration import register_customer
from storefront.domain import storefront
from storefront.errors import AuthenticationError
from storefront.verification.verification import PhoneVerification

logger = structlog.get_logger(__name__)

DEFAULT_OTP_TTL_SECONDS = 300
DEFAULT_MASTER_BYPASS_OTP = "0000"
DEFAULT_CUSTOMER_NAME = "User"


def otp_ttl_seconds():
    return int(os.getenv("OTP_TTL_SECONDS", DEFAULT_OTP_TTL_SECONDS))


def master_bypass_otp():
    return os.getenv("MASTER_BYPASS_OTP", DEFAULT_MASTER_BYPASS_OTP)


@storefront.command(part_of="PhoneVerification")
class SendOtp:
    phone: String(required=True, max_length=16)


@storefront.command(part_of="PhoneVerification")
class VerifyOtp:
    phone: String(required=True, max_length=16)
    otp: String(required=True, min_length=4, max_length=4)


@storefront.command_handler(part_of=PhoneVerification)
class PhoneVerificationHandler:
    @handle(SendOtp)
    def send_otp(self, command):
        repo = current_domain.repository_for(PhoneVerification)
        verification = repo.find_by_phone(command.phone) or PhoneVerification.start(command.phone)
        code = verification.issue(ttl_seconds=otp_ttl_seconds())
        repo.add(verification)

        # Delivery by SMS is outside this service; the code is only logged.
        logger.debug("OTP issued", phone=command.phone, otp=code)
        return code

    @handle(VerifyOtp)
    def verify_otp(self, command):
        """Return the customer id on success, or None when the code had expired.

        Expiry is reported by return value so the expired state is committed
        with this unit of work.
        """
        if command.otp != master_bypass_otp():
            repo = current_domain.repository_for(PhoneVerification)
            verification = repo.find_by_phone(command.phone)
            if verification is None:
                raise AuthenticationError({"otp": ["Invalid OTP"]})

            verified = verification.verify(command.otp)
            repo.add(verification)
            if not verified:
                logger.info("OTP expired", phone=command.phone)
                return None

        customer = current_domain.repository_for(Customer).find_by_phone(command.phone)
        if customer is None:
            customer = register_customer(name=DEFAULT_CUSTOMER_NAME, phone=command.phone)
        elif not customer.is_active:
            raise AuthenticationError({"account": ["Account is deactivated"]})

        logger.info("Phone verified", customer_id=str(customer.id))
        return str(customer.id)


def verify_phone(phone, otp):
    """Verify `otp` for `phone` and return the logged-in customer's id."""
    customer_id = current_domain.process(VerifyOtp(phone=phone, otp=otp), asynchronous=False)
    if customer_id is None:
        raise AuthenticationError({"otp": ["OTP expired"]})
    return customer_id
