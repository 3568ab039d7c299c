"""Domain events for the Order aggregate.

Line items and the shipping address travel as JSON strings so that the
events stay flat and serialize the same way on every broker.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; stock was committed and the cart emptied with it."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line snapshots
    shipping_address = Text(required=True)  # JSON
    payment_method = String(required=True)
    payment_status = String(required=True)
    items_price = Float(required=True)
    shipping_price = Float(required=True)
    tax_price = Float(required=True)
    total_price = Float(required=True)
    currency = String(required=True)
    is_reorder = Boolean(default=False)
    original_order_id = Identifier()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    carrier = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_reference = String()


@storefront.event(part_of="Order")
class PaymentRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    amount = Float(required=True)
    reason = String()
    refunded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class RedeemPointsAwarded:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    points = Integer(required=True)
    rule_id = Identifier()
