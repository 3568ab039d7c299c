"""Customer registration — command and handler."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.errors import ConflictError

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Customer")
class RegisterCustomer:
    """Create a customer account keyed by phone number."""

    name: String(required=True, max_length=50)
    phone: String(required=True, max_length=16)
    email: String(max_length=254)


def register_customer(name, phone, email=None):
    """Register a new customer, refusing a phone number already on file.

    Shared by the explicit registration command and by phone verification,
    which registers unknown phones on their first successful login.
    """
    repo = current_domain.repository_for(Customer)
    if repo.find_by_phone(phone) is not None:
        raise ConflictError({"phone": ["A customer with this phone number already exists"]})

    customer = Customer.register(name=name, phone=phone, email=email)
    repo.add(customer)

    logger.info("Customer registered", customer_id=str(customer.id))
    return customer


@storefront.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = register_customer(
            name=command.name,
            phone=command.phone,
            email=command.email,
        )
        return str(customer.id)
