"""Catalogue queries for shoppers and administrators.

Deleted products never appear here. Shopper listings also hide inactive
products.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.query import Q

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.utils.pagination import paginate

MIN_SEARCH_LENGTH = 2

_SORT_ORDERS = {
    "price_asc": "price",
    "price_desc": "-price",
    "name_asc": "name",
    "name_desc": "-name",
    "newest": "-created_at",
    "oldest": "created_at",
}

IN_STOCK = "in_stock"
OUT_OF_STOCK = "out_of_stock"


@storefront.repository(part_of=Product)
class ProductRepository:
    def get_listed(self, product_id) -> Product:
        """Load a product unless it has been deleted."""
        product = self.get(product_id)
        if product.is_deleted:
            raise ObjectNotFoundError({"product_id": ["Product not found"]})
        return product

    def search(
        self,
        search=None,
        category_id=None,
        brand=None,
        min_price=None,
        max_price=None,
        stock_filter=None,
        sort_by=None,
        page=1,
        limit=10,
    ):
        """Shopper listing of active products.

        `search` matches name, description or brand, ignoring case.
        `stock_filter` is ``in_stock`` or ``out_of_stock``. `sort_by` is one of
        price_asc, price_desc, name_asc, name_desc, newest or oldest and
        defaults to newest first.
        """
        filters = {"is_active": True, "is_deleted": False}
        if category_id:
            filters["category_id"] = str(category_id)
        if brand:
            filters["brand"] = brand
        if min_price is not None:
            filters["price__gte"] = min_price
        if max_price is not None:
            filters["price__lte"] = max_price
        if stock_filter == IN_STOCK:
            filters["stock__gt"] = 0
        elif stock_filter == OUT_OF_STOCK:
            filters["stock"] = 0
        elif stock_filter:
            raise ValidationError({"filter": [f"Unknown stock filter '{stock_filter}'"]})

        query = self._dao.query.filter(**filters)
        if search:
            query = query.filter(
                Q(name__icontains=search) | Q(description__icontains=search) | Q(brand__icontains=search)
            )

        return paginate(query.order_by(_SORT_ORDERS.get(sort_by, "-created_at")), page, limit)

    def quick_search(self, term, limit=20) -> list[Product]:
        """Active products matching `term` by name, description or brand."""
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            raise ValidationError({"q": [f"Search query must be at least {MIN_SEARCH_LENGTH} characters"]})
        return self.search(search=term, sort_by="name_asc", page=1, limit=limit)["items"]

    def featured(self, limit=8) -> list[Product]:
        """Active featured products, newest first."""
        return (
            self._dao.query.filter(is_active=True, is_deleted=False, featured=True)
            .order_by("-created_at")
            .limit(limit)
            .all()
            .items
        )

    def newest(self, limit=10) -> list[Product]:
        """Most recently added active products."""
        return (
            self._dao.query.filter(is_active=True, is_deleted=False)
            .order_by("-created_at")
            .limit(limit)
            .all()
            .items
        )
