"""Product aggregate — the catalogue record that owns stock.

Stock is the only part of a product that the ordering flow mutates: orders
commit stock (``stock -= q``, ``sold += q``) and cancellations restore it.
Both happen inside the same unit of work as the order change, and the
aggregate's version guards against two orders decrementing the same product
concurrently.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductAdded,
    ProductDeleted,
    ProductStatusToggled,
    ProductUpdated,
    StockCommitted,
    StockRestored,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStock, ProductUnavailable

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


@storefront.aggregate
class Product:
    name = String(required=True, min_length=2, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    category_id = Identifier()
    brand = String(max_length=100)
    stock = Integer(default=0)
    sold = Integer(default=0)
    is_active = Boolean(default=True)
    featured = Boolean(default=False)
    is_deleted = Boolean(default=False)
    images = Text()  # JSON array of image URLs
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def sold_cannot_be_negative(self):
        if self.sold is not None and self.sold < 0:
            raise ValidationError({"sold": ["Sold count cannot be negative"]})

    @classmethod
    def add(
        cls,
        name,
        price,
        stock,
        description=None,
        original_price=None,
        category_id=None,
        brand=None,
        images=None,
        featured=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=price,
            original_price=original_price if original_price is not None else price,
            category_id=category_id,
            brand=brand,
            stock=stock,
            sold=0,
            is_active=True,
            featured=bool(featured),
            is_deleted=False,
            images=json.dumps(images or []),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                category_id=category_id,
                price=price,
                stock=stock,
                added_at=now,
            )
        )
        return product

    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    @property
    def primary_image(self):
        urls = self.image_urls
        return urls[0] if urls else ""

    def update(
        self,
        name=_UNSET,
        description=_UNSET,
        price=_UNSET,
        original_price=_UNSET,
        category_id=_UNSET,
        brand=_UNSET,
        stock=_UNSET,
        images=_UNSET,
        is_active=_UNSET,
        featured=_UNSET,
    ):
        """Apply a partial update. Only arguments that were passed are changed."""
        if name is not _UNSET:
            self.name = name
        if description is not _UNSET:
            self.description = description
        if price is not _UNSET:
            self.price = price
        if original_price is not _UNSET:
            self.original_price = original_price
        if category_id is not _UNSET:
            self.category_id = category_id
        if brand is not _UNSET:
            self.brand = brand
        if stock is not _UNSET:
            self.stock = stock
        if images is not _UNSET:
            self.images = json.dumps(images or [])
        if is_active is not _UNSET:
            self.is_active = is_active
        if featured is not _UNSET:
            self.featured = featured

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                stock=self.stock,
                updated_at=now,
            )
        )

    def toggle_status(self):
        self.is_active = not self.is_active
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductStatusToggled(
                product_id=str(self.id),
                is_active=self.is_active,
            )
        )

    def delete(self):
        """Soft delete: hide the product from the catalogue and stop its sale.

        Orders keep their own snapshot of the product, so the record stays.
        """
        if self.is_deleted:
            return

        now = datetime.now(UTC)
        self.is_deleted = True
        self.is_active = False
        self.updated_at = now
        self.raise_(ProductDeleted(product_id=str(self.id), deleted_at=now))

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def ensure_available(self, quantity):
        """Raise unless the product is on sale with at least `quantity` in stock."""
        if not self.is_active:
            raise ProductUnavailable(self.name)
        if self.stock < quantity:
            raise InsufficientStock(self.name, self.stock)

    def commit_stock(self, quantity):
        """Take `quantity` units for an order."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self.ensure_available(quantity)

        self.stock -= quantity
        self.sold = (self.sold or 0) + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockCommitted(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                new_sold=self.sold,
            )
        )

    def restore_stock(self, quantity):
        """Give back `quantity` units from a cancelled order."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock += quantity
        self.sold = max(0, (self.sold or 0) - quantity)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                new_sold=self.sold,
            )
        )
