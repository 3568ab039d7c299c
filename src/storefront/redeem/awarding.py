"""Redeem point awarding — reacts to OrderPlaced.

Points are credited on a best-effort basis. Any failure here is logged and
dropped, so an order is never undone because its points could not be
awarded. The order records the points it earned, which makes a replayed
OrderPlaced event harmless.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.order.events import OrderPlaced
from storefront.order.order import Order
from storefront.redeem.evaluation import select_rule
from storefront.redeem.rule import RedeemRule

logger = structlog.get_logger(__name__)


def award_redeem_points(order_id):
    """Credit the points an order qualifies for. Returns the points awarded (0 if none)."""
    order_repo = current_domain.repository_for(Order)
    order = order_repo.get(order_id)

    if order.is_reorder:
        logger.debug("Reorders earn no redeem points", order_id=str(order.id))
        return 0
    if order.redeem_points_earned:
        logger.debug("Redeem points already awarded", order_id=str(order.id))
        return 0

    rule = select_rule(order.pricing.total_price, current_domain.repository_for(RedeemRule).active_rules())
    if rule is None:
        logger.debug(
            "No redeem rule applies",
            order_id=str(order.id),
            total_price=order.pricing.total_price,
        )
        return 0

    customer_repo = current_domain.repository_for(Customer)
    customer = customer_repo.get(order.customer_id)
    customer.credit_redeem_points(rule.redeem_points, order_id=str(order.id))
    order.record_redeem_points(rule.redeem_points, rule_id=str(rule.id))

    customer_repo.add(customer)
    order_repo.add(order)

    logger.info(
        "Redeem points awarded",
        order_id=str(order.id),
        customer_id=str(customer.id),
        points=rule.redeem_points,
        rule=rule.name,
    )
    return rule.redeem_points


@storefront.event_handler(part_of=Order, stream_category="storefront::order")
class RedeemPointsEventHandler:
    """Awards redeem points once an order has been placed."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        try:
            award_redeem_points(event.order_id)
        except Exception:
            logger.exception("Failed to award redeem points", order_id=str(event.order_id))
