"""Customer aggregate — a shopper identified by phone, holding a redeem point balance."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from storefront.customer.events import CustomerRegistered, RedeemPointsCredited, RedeemPointsSet
from storefront.domain import storefront

PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


class CustomerRole(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


def validate_phone(phone):
    if not phone or not PHONE_PATTERN.match(phone):
        raise ValidationError({"phone": ["Please provide a valid phone number with country code"]})


@storefront.aggregate
class Customer:
    name = String(required=True, max_length=50)
    phone = String(required=True, max_length=16)
    email = String(max_length=254)
    role = String(choices=CustomerRole, default=CustomerRole.CUSTOMER.value)
    is_active = Boolean(default=True)
    redeem_points = Integer(default=0)
    registered_at = DateTime()

    @invariant.post
    def redeem_points_cannot_be_negative(self):
        if self.redeem_points is not None and self.redeem_points < 0:
            raise ValidationError({"redeem_points": ["Redeem points cannot be negative"]})

    @classmethod
    def register(cls, name, phone, email=None):
        validate_phone(phone)
        now = datetime.now(UTC)
        customer = cls(
            name=name,
            phone=phone,
            email=email.lower() if email else None,
            role=CustomerRole.CUSTOMER.value,
            is_active=True,
            redeem_points=0,
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=name,
                phone=phone,
                registered_at=now,
            )
        )
        return customer

    def credit_redeem_points(self, points, order_id=None):
        if points < 1:
            raise ValidationError({"points": ["Points to credit must be positive"]})

        self.redeem_points = (self.redeem_points or 0) + points
        self.raise_(
            RedeemPointsCredited(
                customer_id=str(self.id),
                order_id=order_id,
                points=points,
                new_balance=self.redeem_points,
            )
        )

    def set_redeem_points(self, points):
        if points < 0:
            raise ValidationError({"points": ["Points must be a non-negative integer"]})

        previous = self.redeem_points or 0
        self.redeem_points = points
        self.raise_(
            RedeemPointsSet(
                customer_id=str(self.id),
                previous_balance=previous,
                new_balance=points,
            )
        )
