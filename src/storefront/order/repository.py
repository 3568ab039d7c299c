"""Order queries for customers and administrators."""

from protean.utils.query import Q

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.pagination import paginate


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id, page=1, limit=10):
        """A customer's own orders, newest first."""
        query = self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at")
        return paginate(query, page, limit)

    def with_redeem_points(self, customer_id, page=1, limit=10):
        """A customer's orders that earned redeem points, newest first."""
        query = self._dao.query.filter(
            customer_id=str(customer_id),
            redeem_points_earned__gt=0,
        ).order_by("-created_at")
        return paginate(query, page, limit)

    def search(self, status=None, payment_status=None, payment_method=None, search=None, page=1, limit=10):
        """Admin listing. `search` matches order number or recipient name, ignoring case."""
        filters = {
            key: value
            for key, value in (
                ("status", status),
                ("payment_status", payment_status),
                ("payment_method", payment_method),
            )
            if value
        }

        query = self._dao.query.filter(**filters)
        if search:
            query = query.filter(Q(order_number__icontains=search) | Q(shipping_name__icontains=search))

        return paginate(query.order_by("-created_at"), page, limit)
