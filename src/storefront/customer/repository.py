"""Lookups on Customer beyond get-by-id."""

from storefront.customer.customer import Customer
from storefront.domain import storefront


@storefront.repository(part_of=Customer)
class CustomerRepository:
    def find_by_phone(self, phone: str) -> Customer | None:
        """Return the customer registered with `phone`, or None."""
        results = self._dao.query.filter(phone=phone).all().items
        return results[0] if results else None
