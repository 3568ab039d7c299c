"""Pydantic request/response schemas for the Storefront API.

These are external contracts — separate from internal Protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    name: str
    phone: str
    address: str
    city: str
    state: str
    country: str
    postal_code: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = None
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    brand: str | None = None
    stock: int = Field(ge=0)
    images: list[str] = []
    featured: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Alphonso Mango",
                    "description": "Ratnagiri mangoes, 1 dozen",
                    "price": 899.0,
                    "original_price": 999.0,
                    "brand": "FarmFresh",
                    "stock": 40,
                    "images": ["https://cdn.example.com/mango.jpg"],
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category_id: str | None = None
    brand: str | None = None
    stock: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    images: list[str] | None = None
    featured: bool | None = None


# ---------------------------------------------------------------------------
# Customers and phone login
# ---------------------------------------------------------------------------
class RegisterCustomerRequest(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    phone: str
    email: str | None = None


class SetRedeemPointsRequest(BaseModel):
    points: int = Field(ge=0)


class SendOtpRequest(BaseModel):
    phone: str


class VerifyOtpRequest(BaseModel):
    phone: str
    otp: str = Field(pattern=r"^\d{4}$")


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, le=10, default=1)
    selected_color: str = ""
    selected_size: str = ""


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=0, le=99)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer_id: str
    payment_method: Literal["cash", "online"]
    shipping_address: ShippingAddressSchema
    notes: str | None = Field(default=None, max_length=500)
    payment_reference: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "payment_method": "cash",
                    "shipping_address": {
                        "name": "Asha Rao",
                        "phone": "+919812345678",
                        "address": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "country": "India",
                        "postal_code": "560001",
                    },
                    "notes": "Leave at the door",
                }
            ]
        }
    }


class CustomerActionRequest(BaseModel):
    customer_id: str


class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = None
    carrier: str | None = None
    estimated_delivery: datetime | None = None


class UpdatePaymentStatusRequest(BaseModel):
    customer_id: str
    payment_status: str
    payment_reference: str | None = None


class RefundPaymentRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Redeem
# ---------------------------------------------------------------------------
class CreateRedeemRuleRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    min_order_value: float = Field(ge=0)
    redeem_points: int = Field(ge=1)
    is_active: bool = True


class UpdateRedeemRuleRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    min_order_value: float | None = Field(default=None, ge=0)
    redeem_points: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class SetPointValueRequest(BaseModel):
    point_value: float = Field(ge=0.01)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class CustomerIdResponse(BaseModel):
    customer_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class RuleIdResponse(BaseModel):
    rule_id: str


class OtpSentResponse(BaseModel):
    phone: str


class CountResponse(BaseModel):
    count: int


class PointValueResponse(BaseModel):
    point_value: float


class PointBalanceResponse(BaseModel):
    customer_id: str
    total_points: int
    available_points: int
    point_value: float


class StatusResponse(BaseModel):
    status: str = "ok"
