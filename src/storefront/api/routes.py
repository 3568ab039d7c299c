"""FastAPI routes for the Storefront — products, customers, login, carts, orders and redeem."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddProductRequest,
    AddToCartRequest,
    CountResponse,
    CreateRedeemRuleRequest,
    CustomerActionRequest,
    CustomerIdResponse,
    ItemIdResponse,
    OrderIdResponse,
    OtpSentResponse,
    PlaceOrderRequest,
    PointBalanceResponse,
    PointValueResponse,
    ProductIdResponse,
    RefundPaymentRequest,
    RegisterCustomerRequest,
    RuleIdResponse,
    SendOtpRequest,
    SetPointValueRequest,
    SetRedeemPointsRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    UpdateProductRequest,
    UpdateRedeemRuleRequest,
    VerifyOtpRequest,
)
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.catalogue.management import AddProduct, DeleteProduct, ToggleProductStatus, UpdateProduct
from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.customer.points import SetRedeemPoints
from storefront.customer.registration import RegisterCustomer
from storefront.order.cancellation import CancelOrder
from storefront.order.order import Order
from storefront.order.payment import RefundPayment, UpdatePaymentStatus, get_customer_order
from storefront.order.placement import PlaceOrder
from storefront.order.reorder import Reorder
from storefront.order.status import UpdateOrderStatus
from storefront.redeem.balance import point_balance, points_history
from storefront.redeem.management import CreateRedeemRule, DeleteRedeemRule, UpdateRedeemRule
from storefront.redeem.point_value import SetPointValue, current_point_value
from storefront.redeem.rule import RedeemRule
from storefront.verification.otp import SendOtp, verify_phone


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def _product_view(product):
    return {**product.to_dict(), "images": product.image_urls}


def _cart_view(cart, customer_id):
    if cart is None:
        return {"customer_id": customer_id, "items": [], "total_items": 0, "total_amount": 0.0}
    return cart.to_dict()


def _page_view(result, key, view):
    return {
        "count": result["count"],
        "total": result["total"],
        "page": result["page"],
        "pages": result["pages"],
        key: [view(item) for item in result["items"]],
    }


def _order_view(order):
    return order.to_dict()


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        original_price=body.original_price,
        category_id=body.category_id,
        brand=body.brand,
        stock=body.stock,
        images=json.dumps(body.images),
        featured=body.featured,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("")
async def list_products(
    search: str | None = None,
    category_id: str | None = None,
    brand: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    stock_filter: str | None = None,
    sort_by: str | None = None,
    page: int = 1,
    limit: int = 10,
):
    result = current_domain.repository_for(Product).search(
        search=search,
        category_id=category_id,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        stock_filter=stock_filter,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return _page_view(result, "products", _product_view)


@product_router.get("/featured")
async def featured_products(limit: int = 8):
    return {"products": [_product_view(p) for p in current_domain.repository_for(Product).featured(limit=limit)]}


@product_router.get("/new")
async def new_products(limit: int = 10):
    return {"products": [_product_view(p) for p in current_domain.repository_for(Product).newest(limit=limit)]}


@product_router.get("/search")
async def search_products(q: str = "", limit: int = 20):
    products = current_domain.repository_for(Product).quick_search(q, limit=limit)
    return {"count": len(products), "products": [_product_view(p) for p in products]}


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    return _product_view(current_domain.repository_for(Product).get_listed(product_id))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "images" in changes:
        changes["images"] = json.dumps(changes["images"])
    current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/toggle-status", response_model=StatusResponse)
async def toggle_product_status(product_id: str) -> StatusResponse:
    current_domain.process(ToggleProductStatus(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    command = RegisterCustomer(name=body.name, phone=body.phone, email=body.email)
    result = current_domain.process(command, asynchronous=False)
    return CustomerIdResponse(customer_id=result)


@customer_router.get("/{customer_id}")
async def get_customer(customer_id: str):
    return current_domain.repository_for(Customer).get(customer_id).to_dict()


@customer_router.get("/{customer_id}/redeem-points", response_model=PointBalanceResponse)
async def get_redeem_points(customer_id: str) -> PointBalanceResponse:
    return PointBalanceResponse(**point_balance(customer_id))


@customer_router.put("/{customer_id}/redeem-points", response_model=StatusResponse)
async def set_redeem_points(customer_id: str, body: SetRedeemPointsRequest) -> StatusResponse:
    current_domain.process(SetRedeemPoints(customer_id=customer_id, points=body.points), asynchronous=False)
    return StatusResponse()


@customer_router.get("/{customer_id}/redeem-points/history")
async def get_points_history(customer_id: str, page: int = 1, limit: int = 10):
    return points_history(customer_id, page=page, limit=limit)


# ---------------------------------------------------------------------------
# Phone Login Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth/otp", tags=["auth"])


@auth_router.post("/send", response_model=OtpSentResponse)
async def send_otp(body: SendOtpRequest) -> OtpSentResponse:
    current_domain.process(SendOtp(phone=body.phone), asynchronous=False)
    return OtpSentResponse(phone=body.phone)


@auth_router.post("/verify", response_model=CustomerIdResponse)
async def verify_otp(body: VerifyOtpRequest) -> CustomerIdResponse:
    return CustomerIdResponse(customer_id=verify_phone(body.phone, body.otp))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{customer_id}")
async def get_cart(customer_id: str):
    return _cart_view(current_domain.repository_for(Cart).find_for_customer(customer_id), customer_id)


@cart_router.get("/{customer_id}/count", response_model=CountResponse)
async def get_cart_count(customer_id: str) -> CountResponse:
    cart = current_domain.repository_for(Cart).find_for_customer(customer_id)
    return CountResponse(count=cart.total_items if cart else 0)


@cart_router.post("/{customer_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(customer_id: str, body: AddToCartRequest) -> ItemIdResponse:
    command = AddToCart(
        customer_id=customer_id,
        product_id=body.product_id,
        quantity=body.quantity,
        selected_color=body.selected_color,
        selected_size=body.selected_size,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@cart_router.put("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(customer_id: str, item_id: str, body: UpdateCartItemRequest) -> StatusResponse:
    command = UpdateCartItem(customer_id=customer_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(customer_id: str, item_id: str) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=customer_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}/items", response_model=StatusResponse)
async def clear_cart(customer_id: str) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router (customer)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        payment_method=body.payment_method,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        notes=body.notes,
        payment_reference=body.payment_reference,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("")
async def list_orders(customer_id: str, page: int = 1, limit: int = 10):
    result = current_domain.repository_for(Order).for_customer(customer_id, page=page, limit=limit)
    return _page_view(result, "orders", _order_view)


@order_router.get("/{order_id}")
async def get_order(order_id: str, customer_id: str):
    order = current_domain.repository_for(Order).get(order_id)
    order.ensure_owned_by(customer_id)
    return _order_view(order)


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CustomerActionRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, customer_id=body.customer_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/reorder", status_code=201, response_model=OrderIdResponse)
async def reorder(order_id: str, body: CustomerActionRequest) -> OrderIdResponse:
    result = current_domain.process(Reorder(order_id=order_id, customer_id=body.customer_id), asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("/{order_id}/payment")
async def get_payment_status(order_id: str, customer_id: str):
    order = get_customer_order(order_id, customer_id)
    return {
        "order_id": str(order.id),
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "paid_at": order.paid_at,
    }


@order_router.put("/{order_id}/payment", response_model=StatusResponse)
async def update_payment_status(order_id: str, body: UpdatePaymentStatusRequest) -> StatusResponse:
    command = UpdatePaymentStatus(
        order_id=order_id,
        customer_id=body.customer_id,
        payment_status=body.payment_status,
        payment_reference=body.payment_reference,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@admin_order_router.get("")
async def admin_list_orders(
    status: str | None = None,
    payment_status: str | None = None,
    payment_method: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
):
    result = current_domain.repository_for(Order).search(
        status=status,
        payment_status=payment_status,
        payment_method=payment_method,
        search=search,
        page=page,
        limit=limit,
    )
    return _page_view(result, "orders", _order_view)


@admin_order_router.get("/{order_id}")
async def admin_get_order(order_id: str):
    return _order_view(current_domain.repository_for(Order).get(order_id))


@admin_order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest):
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
        carrier=body.carrier,
        estimated_delivery=body.estimated_delivery,
    )
    changed = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return {"changed": bool(changed), "order": _order_view(order)}


@admin_order_router.post("/{order_id}/refund", response_model=StatusResponse)
async def refund_payment(order_id: str, body: RefundPaymentRequest) -> StatusResponse:
    current_domain.process(RefundPayment(order_id=order_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Redeem Router (admin)
# ---------------------------------------------------------------------------
redeem_router = APIRouter(prefix="/redeem", tags=["redeem"])


@redeem_router.get("/rules")
async def list_redeem_rules(is_active: bool | None = None, search: str | None = None, page: int = 1, limit: int = 10):
    result = current_domain.repository_for(RedeemRule).search(is_active=is_active, search=search, page=page, limit=limit)
    return _page_view(result, "rules", lambda rule: rule.to_dict())


@redeem_router.post("/rules", status_code=201, response_model=RuleIdResponse)
async def create_redeem_rule(body: CreateRedeemRuleRequest) -> RuleIdResponse:
    result = current_domain.process(CreateRedeemRule(**body.model_dump()), asynchronous=False)
    return RuleIdResponse(rule_id=result)


@redeem_router.put("/rules/{rule_id}", response_model=StatusResponse)
async def update_redeem_rule(rule_id: str, body: UpdateRedeemRuleRequest) -> StatusResponse:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    current_domain.process(UpdateRedeemRule(rule_id=rule_id, **changes), asynchronous=False)
    return StatusResponse()


@redeem_router.delete("/rules/{rule_id}", response_model=StatusResponse)
async def delete_redeem_rule(rule_id: str) -> StatusResponse:
    current_domain.process(DeleteRedeemRule(rule_id=rule_id), asynchronous=False)
    return StatusResponse()


@redeem_router.get("/point-value", response_model=PointValueResponse)
async def get_point_value() -> PointValueResponse:
    return PointValueResponse(point_value=current_point_value().point_value)


@redeem_router.put("/point-value", response_model=PointValueResponse)
async def set_point_value(body: SetPointValueRequest) -> PointValueResponse:
    result = current_domain.process(SetPointValue(point_value=body.point_value), asynchronous=False)
    return PointValueResponse(point_value=result)
