"""
Order Pydantic schemas for request/response validation.

Required identifiers are optional at the schema level so that a missing
field is reported by the service as a 400 with the usual error body
instead of FastAPI's 422.
"""
from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from order_sync.models.order import OrderStatus

Amount = Union[int, float]


class CheckoutRequest(BaseModel):
    """Schema for starting a checkout."""

    amount: Optional[Amount] = None
    order_id: Optional[str] = Field(None, alias="orderId")
    user_id: Optional[str] = Field(None, alias="userId")
    items: list[Any] = Field(default_factory=list)
    shipping_cost: Amount = Field(0, alias="shippingCost")
    shipping_details: Any = Field("", alias="shippingDetails")
    promo_code: str = Field("", alias="promoCode")
    payment_method: str = Field("card", alias="paymentMethod")
    subtotal: Amount = 0

    model_config = ConfigDict(populate_by_name=True)


class CheckoutResponse(BaseModel):
    """Schema for a successful checkout."""

    success: bool = True
    payment_url: str = Field(alias="paymentUrl")
    reference: Optional[str] = None
    order_id: str = Field(alias="orderId")
    raw: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class RepairRequest(BaseModel):
    """
    Schema for repairing an order whose creation did not persist.

    Every field except the identifiers is optional; only values that are
    supplied and non-empty are merged into an existing record.
    """

    order_id: Optional[str] = Field(None, alias="orderId")
    user_id: Optional[str] = Field(None, alias="userId")
    items: Optional[list[Any]] = None
    amount: Optional[Amount] = None
    shipping_cost: Optional[Amount] = Field(None, alias="shippingCost")
    shipping_details: Any = Field(None, alias="shippingDetails")
    promo_code: Optional[str] = Field(None, alias="promoCode")
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    status: OrderStatus = OrderStatus.PENDING

    model_config = ConfigDict(populate_by_name=True)


class RepairResponse(BaseModel):
    """Schema for repair operation response."""

    success: bool = True
    message: str
    action: Literal["created", "updated"]


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    id: str
    order_id: str = Field(alias="orderId")
    user_id: str = Field(alias="userId")
    items: list[Any] = Field(default_factory=list)
    items_count: int = Field(0, alias="itemsCount")
    total: float
    subtotal: float = 0
    shipping_cost: float = Field(0, alias="shippingCost")
    tax: float = 0
    discount: float = 0
    status: str
    payment_method: str = Field(alias="paymentMethod")
    gateway: str
    shipping_details: Any = Field(None, alias="shippingDetails")
    promo_code: str = Field("", alias="promoCode")
    payment: Optional[dict[str, Any]] = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    confirmed_at: Optional[datetime] = Field(None, alias="confirmedAt")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class UserOrdersResponse(BaseModel):
    """Orders owned by a single user."""

    success: bool = True
    count: int
    orders: list[OrderResponse]


class ErrorResponse(BaseModel):
    """Error body returned by the JSON endpoints."""

    success: bool = False
    error: str
    details: Any = None
