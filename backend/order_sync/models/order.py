"""
Order model - the locally held record reconciled against gateway notifications.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from order_sync.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in local runs)
JSONType = JSON().with_variant(JSONB(), "postgresql")

GATEWAY_NAME = "ngenius"


class OrderStatus(str, Enum):
    """Lifecycle status of an order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Order(Base):
    """Checkout order with its embedded payment sub-record."""

    __tablename__ = "orders"

    # Externally supplied order id, shared with the gateway as `reference`
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)

    # Line items (stored as JSON)
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)
    items_count: Mapped[int] = mapped_column(Integer, default=0)

    # Financial
    total: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False)
    subtotal: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    shipping_cost: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    tax: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    discount: Mapped[float] = mapped_column(Numeric(12, 2), default=0)

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        default=OrderStatus.PENDING.value,
        index=True,
    )
    payment_method: Mapped[str] = mapped_column(String(50), default="card")
    gateway: Mapped[str] = mapped_column(String(50), default=GATEWAY_NAME)

    # Delivery
    shipping_details: Mapped[Any] = mapped_column(JSONType, default="")
    promo_code: Mapped[str] = mapped_column(String(100), default="")

    # Payment sub-record: gateway, gatewayReference, state, captured, raw,
    # updatedAt, paidAt
    payment: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Bumped on every write; stale read-modify-write cycles fail on flush
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def order_id(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"<Order {self.id} {self.status}>"
