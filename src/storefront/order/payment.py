"""Payment status updates and refunds — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    """Customer-reported payment outcome for one of their orders."""

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)
    payment_reference = String(max_length=255)


@storefront.command(part_of="Order")
class RefundPayment:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


def get_customer_order(order_id, customer_id):
    """Load an order the customer owns.

    Someone else's order is reported as missing rather than forbidden.
    """
    order = current_domain.repository_for(Order).get(order_id)
    if not order.is_owned_by(customer_id):
        raise ObjectNotFoundError({"order": ["Order not found"]})
    return order


@storefront.command_handler(part_of=Order)
class PaymentHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        order = get_customer_order(command.order_id, command.customer_id)
        order.update_payment(command.payment_status, command.payment_reference)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Payment status updated",
            order_id=str(order.id),
            payment_status=order.payment_status,
        )

    @handle(RefundPayment)
    def refund_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.refund(reason=command.reason)
        repo.add(order)

        logger.info(
            "Payment refunded",
            order_id=str(order.id),
            amount=order.pricing.total_price,
        )
