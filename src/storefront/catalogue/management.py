"""Catalogue administration: add, update, toggle and delete products."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "name",
    "description",
    "price",
    "original_price",
    "category_id",
    "brand",
    "stock",
    "is_active",
    "featured",
)


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    category_id = Identifier()
    brand = String(max_length=100)
    stock = Integer(required=True, min_value=0)
    images = Text()  # JSON array of image URLs
    featured = Boolean(default=False)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=100)
    description = Text()
    price = Float(min_value=0.0)
    original_price = Float(min_value=0.0)
    category_id = Identifier()
    brand = String(max_length=100)
    stock = Integer(min_value=0)
    is_active = Boolean()
    images = Text()  # JSON array of image URLs
    featured = Boolean()


@storefront.command(part_of="Product")
class ToggleProductStatus:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        images = json.loads(command.images) if command.images else []
        product = Product.add(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
            category_id=command.category_id,
            brand=command.brand,
            stock=command.stock,
            images=images,
            featured=command.featured,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_listed(command.product_id)

        changes = {
            field: getattr(command, field) for field in _UPDATABLE_FIELDS if getattr(command, field) is not None
        }
        if command.images is not None:
            changes["images"] = json.loads(command.images)

        product.update(**changes)
        repo.add(product)

    @handle(ToggleProductStatus)
    def toggle_status(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_listed(command.product_id)
        product.toggle_status()
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_listed(command.product_id)
        product.delete()
        repo.add(product)
        logger.info("Product deleted", product_id=str(command.product_id))
