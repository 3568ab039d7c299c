"""Stock checks and movements for the lines of an order.

Every function here loads each product once, so two lines of the same
product (say, in different sizes) are checked against their combined
quantity.
"""

from collections import defaultdict

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.errors import ProductUnavailable

logger = structlog.get_logger(__name__)


def load_products(product_ids):
    """Return ``{product_id: Product}``; a missing product counts as unavailable."""
    repo = current_domain.repository_for(Product)
    products = {}
    for product_id in product_ids:
        key = str(product_id)
        if key in products:
            continue
        try:
            products[key] = repo.get(key)
        except ObjectNotFoundError:
            raise ProductUnavailable(None) from None
    return products


def check_availability(requested):
    """Validate `requested` (iterable of ``(product_id, quantity)``) without changing stock.

    Returns the loaded products keyed by id.
    """
    totals = defaultdict(int)
    for product_id, quantity in requested:
        totals[str(product_id)] += quantity

    products = load_products(totals)
    for product_id, quantity in totals.items():
        products[product_id].ensure_available(quantity)
    return products


def commit_stock(products, requested):
    """Take stock for every line and stage the products in the current unit of work."""
    repo = current_domain.repository_for(Product)
    for product_id, quantity in requested:
        products[str(product_id)].commit_stock(quantity)
    for product in products.values():
        repo.add(product)


def restore_stock(items):
    """Return the quantities of `items` (order lines) to their products.

    Lines whose product has since been deleted are skipped.
    """
    repo = current_domain.repository_for(Product)
    products = {}
    for item in items:
        key = str(item.product_id)
        if key not in products:
            try:
                products[key] = repo.get(key)
            except ObjectNotFoundError:
                logger.warning("Product gone, stock not restored", product_id=key, quantity=item.quantity)
                products[key] = None
        if products[key] is not None:
            products[key].restore_stock(item.quantity)

    for product in products.values():
        if product is not None:
            repo.add(product)
