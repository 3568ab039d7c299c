"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    admin_order_router,
    auth_router,
    cart_router,
    customer_router,
    order_router,
    product_router,
    redeem_router,
)

routers = [
    product_router,
    customer_router,
    auth_router,
    cart_router,
    order_router,
    admin_order_router,
    redeem_router,
]

__all__ = ["routers", "register_error_handlers"]
