"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    category_id = Identifier()
    price = Float(required=True)
    stock = Integer(required=True)
    added_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Product details, price or stock were edited by an admin."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductStatusToggled:
    """A product was switched between active and inactive."""

    __version__ = 1

    product_id = Identifier(required=True)
    is_active = Boolean(required=True)


@storefront.event(part_of="Product")
class ProductDeleted:
    """A product was removed from the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    deleted_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockCommitted:
    """Stock was taken by an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold = Integer(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """Stock was given back by a cancelled order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)
    new_sold = Integer(required=True)
