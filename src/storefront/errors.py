"""Business rule failures raised by storefront aggregates and handlers.

Field-level input problems use Protean's `ValidationError` and missing records
use Protean's `ObjectNotFoundError`. The classes here cover the remaining
kinds. Every error carries `messages` shaped like Protean's:
``{"field": ["message", ...]}``.
"""


class StorefrontError(Exception):
    def __init__(self, messages):
        super().__init__(messages)
        self.messages = messages


class ConflictError(StorefrontError):
    """The request is well-formed but conflicts with the current state."""


class ForbiddenError(StorefrontError):
    """The caller does not own the resource it is acting on."""


class AuthenticationError(StorefrontError):
    """Phone verification failed."""


class EmptyCart(ConflictError):
    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class ProductUnavailable(ConflictError):
    def __init__(self, product_name):
        super().__init__({"product": [f"Product {product_name or 'Unknown'} is no longer available"]})


class InsufficientStock(ConflictError):
    def __init__(self, product_name, available):
        super().__init__({"stock": [f"Insufficient stock for {product_name}. Available: {available}"]})
        self.available = available


class NotCancellable(ConflictError):
    def __init__(self, status):
        super().__init__({"status": [f"Order cannot be cancelled in {status} state"]})


class InvalidStatusTransition(ConflictError):
    def __init__(self, current, target):
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
