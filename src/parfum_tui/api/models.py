# dataclass models for what the backend hands us

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Literal, Optional, Tuple

Role = Literal["user", "admin"]
PaymentStatus = Literal["pending", "paid", "verified", "cancelled"]

PAYMENT_STATUSES: Tuple[str, ...] = ("pending", "paid", "verified", "cancelled")


def to_decimal(val) -> Decimal:
    try:
        value = Decimal(str(val))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    # NaN and Infinity read as zero
    return value if value.is_finite() else Decimal("0")


def to_int(val, default: int = 0) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def parse_datetime(val) -> Optional[datetime]:
    if not val:
        return None
    try:
        return datetime.fromisoformat(str(val))
    except ValueError:
        return None


@dataclass(frozen=True)
class User:
    id: int
    name: str
    email: str
    role: str  # "user" or "admin"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=to_int(data.get("id")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or "user",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}


@dataclass(frozen=True)
class PerfumeImage:
    id: int
    url: str
    is_primary: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerfumeImage":
        return cls(
            id=to_int(data.get("id")),
            url=data.get("url") or data.get("image_path") or "",
            is_primary=bool(data.get("is_primary")),
        )


@dataclass(frozen=True)
class Perfume:
    id: int
    name: str
    price: Decimal
    stock: int = 0
    brand: Optional[str] = None
    description: str = ""
    images: Tuple[PerfumeImage, ...] = ()
    created_at: Optional[str] = None

    @property
    def primary_image(self) -> Optional[PerfumeImage]:
        for img in self.images:
            if img.is_primary:
                return img
        return self.images[0] if self.images else None

    @property
    def created(self) -> Optional[datetime]:
        return parse_datetime(self.created_at)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Perfume":
        images = tuple(
            PerfumeImage.from_dict(img)
            for img in data.get("images") or []
            if isinstance(img, dict)
        )
        return cls(
            id=to_int(data.get("id")),
            name=data.get("name") or "",
            price=to_decimal(data.get("price")),
            stock=to_int(data.get("stock")),
            brand=data.get("brand") or None,
            description=data.get("description") or "",
            images=images,
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "description": self.description,
            "price": str(self.price),
            "stock": self.stock,
            "images": [
                {"id": i.id, "url": i.url, "is_primary": i.is_primary}
                for i in self.images
            ],
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class OrderItem:
    id: int
    perfume_id: int
    perfume_name: str
    quantity: int
    price: Decimal  # unit price the backend charged

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        perfume = data.get("perfume") or {}
        return cls(
            id=to_int(data.get("id")),
            perfume_id=to_int(data.get("perfume_id") or perfume.get("id")),
            perfume_name=perfume.get("name") or f"Perfume {data.get('perfume_id')}",
            quantity=to_int(data.get("quantity")),
            price=to_decimal(data.get("price")),
        )


@dataclass(frozen=True)
class Order:
    id: int
    total_amount: Decimal
    payment_status: str = "pending"
    user: Optional[User] = None
    items: Tuple[OrderItem, ...] = field(default_factory=tuple)
    payment_proof: Optional[str] = None
    payment_date: Optional[str] = None
    verified_at: Optional[str] = None
    verified_by: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        user = data.get("user")
        verifier = data.get("verified_by_user") or {}
        return cls(
            id=to_int(data.get("id")),
            total_amount=to_decimal(data.get("total_amount")),
            payment_status=data.get("payment_status") or "pending",
            user=User.from_dict(user) if isinstance(user, dict) else None,
            items=tuple(
                OrderItem.from_dict(i)
                for i in data.get("items") or []
                if isinstance(i, dict)
            ),
            payment_proof=data.get("payment_proof"),
            payment_date=data.get("payment_date"),
            verified_at=data.get("verified_at"),
            verified_by=verifier.get("name") if isinstance(verifier, dict) else None,
            created_at=data.get("created_at"),
        )
