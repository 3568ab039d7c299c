"""Order aggregate — a placed order and its status and payment lifecycle.

An order is an immutable snapshot of what was bought: line names, prices and
images are copied from the catalogue at placement, and the shipping address
is copied as a value. After placement only status, shipping, payment and
redeem bookkeeping change.

Status workflow:
    pending → confirmed → processing → shipped → delivered
    any non-terminal state → cancelled (delivered orders can only be returned)
    shipped, delivered → returned
    cancelled and returned are terminal
"""

import json
import secrets
import time
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.errors import ConflictError, ForbiddenError, InvalidStatusTransition, NotCancellable
from storefront.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentRefunded,
    PaymentStatusUpdated,
    RedeemPointsAwarded,
)
from storefront.order.pricing import CURRENCY, compute_pricing


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    CASH = "cash"
    ONLINE = "online"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# States from which a customer may not cancel
_NON_CANCELLABLE_STATES = {
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.RETURNED,
}

# Payment states a customer may report
_CUSTOMER_PAYMENT_STATES = {PaymentStatus.PENDING, PaymentStatus.PAID, PaymentStatus.FAILED}


def generate_order_number():
    """``ORD`` + epoch milliseconds + three random digits."""
    return f"ORD{int(time.time() * 1000)}{secrets.randbelow(1000):03d}"


def parse_order_status(value):
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Invalid order status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, copied at placement.

    Later edits to the customer's saved addresses never reach a placed order.
    """

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=16)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    country = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)


@storefront.value_object(part_of="Order")
class OrderPricing:
    items_price = Float(default=0.0)
    shipping_price = Float(default=0.0)
    tax_price = Float(default=0.0)
    total_price = Float(default=0.0)
    currency = String(max_length=3, default=CURRENCY)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line, frozen at the moment the order was placed."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    selected_color = String(max_length=50, default="")
    selected_size = String(max_length=50, default="")
    image = String(max_length=500, default="")

    @property
    def subtotal(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=32)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    pricing = ValueObject(OrderPricing)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_reference = String(max_length=255)
    paid_at = DateTime()
    refunded_at = DateTime()
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    estimated_delivery = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    shipping_name = String(max_length=100)  # Copy of shipping_address.name for admin search
    notes = String(max_length=500)
    is_reorder = Boolean(default=False)
    original_order_id = Identifier()
    redeem_points_earned = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_components(self):
        if self.pricing is None:
            return
        p = self.pricing
        expected = round(p.items_price + p.shipping_price + p.tax_price, 2)
        if abs(p.total_price - expected) > 0.005:
            raise ValidationError({"pricing": ["Total price must equal items, shipping and tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        lines,
        shipping_address,
        payment_method,
        notes=None,
        payment_reference=None,
        is_reorder=False,
        original_order_id=None,
    ):
        """Create an order from line snapshots.

        Args:
            customer_id: The customer placing the order.
            lines: List of dicts with product_id, name, price, quantity,
                   selected_color, selected_size, image.
            shipping_address: Dict with name, phone, address, city, state,
                              country, postal_code.
            payment_method: ``cash`` or ``online``. Online orders are recorded
                            as paid on placement; reorders always start unpaid.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise ValidationError({"payment_method": ["Payment method must be cash or online"]}) from None
        now = datetime.now(UTC)
        pricing = compute_pricing(lines)
        paid = method == PaymentMethod.ONLINE and not is_reorder

        order = cls(
            order_number=generate_order_number(),
            customer_id=customer_id,
            shipping_address=ShippingAddress(**shipping_address),
            shipping_name=shipping_address.get("name"),
            pricing=OrderPricing(**pricing),
            status=OrderStatus.PENDING.value,
            payment_method=method.value,
            payment_status=(PaymentStatus.PAID if paid else PaymentStatus.PENDING).value,
            payment_reference=payment_reference,
            paid_at=now if paid else None,
            notes=notes,
            is_reorder=is_reorder,
            original_order_id=original_order_id,
            redeem_points_earned=0,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    name=line["name"],
                    price=line["price"],
                    quantity=line["quantity"],
                    selected_color=line.get("selected_color") or "",
                    selected_size=line.get("selected_size") or "",
                    image=line.get("image") or "",
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                items=json.dumps([{**line, "product_id": str(line["product_id"])} for line in lines]),
                shipping_address=json.dumps(shipping_address),
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                items_price=pricing["items_price"],
                shipping_price=pricing["shipping_price"],
                tax_price=pricing["tax_price"],
                total_price=pricing["total_price"],
                currency=pricing["currency"],
                is_reorder=is_reorder,
                original_order_id=original_order_id,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    def is_owned_by(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    def ensure_owned_by(self, customer_id):
        if not self.is_owned_by(customer_id):
            raise ForbiddenError({"order": ["Not authorized to access this order"]})

    # -------------------------------------------------------------------
    # Status workflow
    # -------------------------------------------------------------------
    def update_status(self, status, tracking_number=None, carrier=None, estimated_delivery=None):
        """Move the order to `status`. Returns True when the status changed.

        Re-applying the current status changes nothing, except that tracking
        details passed with ``shipped`` are still recorded.
        """
        target = parse_order_status(status)
        current = OrderStatus(self.status)
        now = datetime.now(UTC)

        if target == current:
            if target == OrderStatus.SHIPPED and self._apply_tracking(tracking_number, carrier, estimated_delivery):
                self.updated_at = now
            return False

        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidStatusTransition(current.value, target.value)

        if target == OrderStatus.SHIPPED:
            self.shipped_at = now
            self._apply_tracking(tracking_number, carrier, estimated_delivery)
        elif target == OrderStatus.DELIVERED:
            self.delivered_at = now
        elif target == OrderStatus.CANCELLED:
            self.cancelled_at = now

        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                tracking_number=self.tracking_number,
                carrier=self.carrier,
                changed_at=now,
            )
        )
        if target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    previous_status=current.value,
                    cancelled_by="admin",
                    cancelled_at=now,
                )
            )
        return True

    def _apply_tracking(self, tracking_number, carrier, estimated_delivery):
        applied = False
        if tracking_number:
            self.tracking_number = tracking_number
            applied = True
        if carrier:
            self.carrier = carrier
            applied = True
        if estimated_delivery:
            self.estimated_delivery = estimated_delivery
            applied = True
        return applied

    @property
    def is_cancellable(self):
        return OrderStatus(self.status) not in _NON_CANCELLABLE_STATES

    def cancel(self):
        """Customer cancellation. Stock restoration is the caller's job."""
        current = OrderStatus(self.status)
        if not self.is_cancellable:
            raise NotCancellable(current.value)

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                cancelled_by="customer",
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment(self, status, payment_reference=None):
        try:
            target = PaymentStatus(status)
        except ValueError:
            target = None
        if target not in _CUSTOMER_PAYMENT_STATES:
            raise ValidationError({"payment_status": ["Payment status must be pending, paid or failed"]})

        previous = self.payment_status
        now = datetime.now(UTC)
        self.payment_status = target.value
        if payment_reference:
            self.payment_reference = payment_reference
        if target == PaymentStatus.PAID:
            self.paid_at = now
        self.updated_at = now

        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                payment_reference=self.payment_reference,
            )
        )

    def refund(self, reason=None):
        if PaymentStatus(self.payment_status) != PaymentStatus.PAID:
            raise ConflictError({"payment_status": ["Order payment is not in paid status"]})

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.REFUNDED.value
        self.refunded_at = now
        self.updated_at = now

        self.raise_(
            PaymentRefunded(
                order_id=str(self.id),
                amount=self.pricing.total_price,
                reason=reason,
                refunded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Redeem points
    # -------------------------------------------------------------------
    def record_redeem_points(self, points, rule_id=None):
        """Note the points credited for this order. Only the first award counts."""
        if self.redeem_points_earned:
            return False

        self.redeem_points_earned = points
        self.updated_at = datetime.now(UTC)

        self.raise_(
            RedeemPointsAwarded(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                points=points,
                rule_id=rule_id,
            )
        )
        return True
