"""Read side of a customer's redeem points: balance and earning history."""

from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.order.order import Order
from storefront.redeem.point_value import current_point_value


def point_balance(customer_id):
    customer = current_domain.repository_for(Customer).get(customer_id)
    points = customer.redeem_points or 0
    return {
        "customer_id": str(customer.id),
        "total_points": points,
        "available_points": points,
        "point_value": current_point_value().point_value,
    }


def points_history(customer_id, page=1, limit=10):
    """Orders of the customer that earned points, newest first."""
    result = current_domain.repository_for(Order).with_redeem_points(customer_id, page, limit)
    return {
        "count": result["count"],
        "total": result["total"],
        "page": result["page"],
        "pages": result["pages"],
        "history": [
            {
                "order_id": str(order.id),
                "order_number": order.order_number,
                "order_status": order.status,
                "order_total": order.pricing.total_price,
                "points_earned": order.redeem_points_earned,
                "date": order.created_at,
            }
            for order in result["items"]
        ],
    }
