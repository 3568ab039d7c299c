"""Cart item commands — add, change quantity, remove, clear."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import InsufficientStock

MAX_ADD_QUANTITY = 10


@storefront.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_ADD_QUANTITY)
    selected_color = String(max_length=50)
    selected_size = String(max_length=50)


@storefront.command(part_of="Cart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0, max_value=99)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def _cart_of(customer_id) -> Cart:
    cart = current_domain.repository_for(Cart).find_for_customer(customer_id)
    if cart is None:
        raise ObjectNotFoundError({"cart": ["Cart not found"]})
    return cart


@storefront.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create_for_customer(command.customer_id)

        line = cart.find_line(command.product_id, command.selected_color, command.selected_size)
        product.ensure_available((line.quantity if line else 0) + command.quantity)

        item_id = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            price=product.price,
            selected_color=command.selected_color,
            selected_size=command.selected_size,
        )
        repo.add(cart)
        return item_id

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = _cart_of(command.customer_id)

        if command.quantity > 0:
            item = cart.find_item(command.item_id)
            try:
                product = current_domain.repository_for(Product).get(item.product_id)
            except ObjectNotFoundError:
                product = None
            if product is not None and product.stock < command.quantity:
                raise InsufficientStock(product.name, product.stock)

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = _cart_of(command.customer_id)
        cart.remove_item(command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = _cart_of(command.customer_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
