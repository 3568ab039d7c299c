"""Storefront bounded context — catalogue stock, carts, orders and loyalty.

Placing an order touches the Cart, Product and Order aggregates together, so
they share one domain and commit in one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
