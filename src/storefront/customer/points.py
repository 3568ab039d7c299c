"""Admin control over a customer's redeem point balance."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Customer")
class SetRedeemPoints:
    """Overwrite a customer's redeem point balance."""

    customer_id: Identifier(required=True)
    points: Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Customer)
class RedeemPointsHandler:
    @handle(SetRedeemPoints)
    def set_redeem_points(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.set_redeem_points(command.points)
        repo.add(customer)

        logger.info(
            "Redeem points set",
            customer_id=str(customer.id),
            points=command.points,
        )
