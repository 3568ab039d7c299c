"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A customer account was created, by signup or by first phone verification."""

    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    phone = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class RedeemPointsCredited:
    """Loyalty points were added to a customer's balance for an order."""

    __version__ = 1

    customer_id = Identifier(required=True)
    order_id = Identifier()
    points = Integer(required=True)
    new_balance = Integer(required=True)


@storefront.event(part_of="Customer")
class RedeemPointsSet:
    """An admin overwrote a customer's point balance."""

    __version__ = 1

    customer_id = Identifier(required=True)
    previous_balance = Integer(required=True)
    new_balance = Integer(required=True)
