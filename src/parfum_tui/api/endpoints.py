# src/parfum_tui/api/endpoints.py
from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from parfum_tui.api.client import ApiClient, ApiError
from parfum_tui.api.models import Order, Perfume, PerfumeImage, User


def unwrap_list(payload: Any) -> List[Dict[str, Any]]:
    """Accept both a bare array and a paginated {data: [...]} body."""
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict) and isinstance(payload.get("data"), list):
        rows = payload["data"]
    else:
        rows = []
    return [row for row in rows if isinstance(row, dict)]


def unwrap_item(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict):
        inner = payload.get("data")
        return inner if isinstance(inner, dict) else payload
    return {}


def _file_part(path: str) -> Tuple[str, bytes, str]:
    p = Path(path)
    mime = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
    return p.name, p.read_bytes(), mime


# ---------------------------
# Auth & Registration
# ---------------------------


async def login(api: ApiClient, email: str, password: str) -> Tuple[str, User]:
    """Return (token, user) on success. Bad credentials raise ApiError."""
    payload = await api.post("/api/login", json={"email": email, "password": password})
    data = unwrap_item(payload)
    token = data.get("token")
    user = data.get("user")
    if not token or not isinstance(user, dict):
        raise ApiError(200, payload, "login response carried no token")
    return token, User.from_dict(user)


async def register(
    api: ApiClient, name: str, email: str, password: str, password_confirmation: str
) -> Any:
    return await api.post(
        "/api/register",
        json={
            "name": name,
            "email": email,
            "password": password,
            "password_confirmation": password_confirmation,
        },
    )


# ---------------------------
# Catalog
# ---------------------------


async def list_perfumes(api: ApiClient) -> List[Perfume]:
    return [Perfume.from_dict(row) for row in unwrap_list(await api.get("/api/perfumes"))]


async def get_perfume(api: ApiClient, perfume_id: int) -> Perfume:
    return Perfume.from_dict(unwrap_item(await api.get(f"/api/perfumes/{perfume_id}")))


# ---------------------------
# Orders (customer)
# ---------------------------


async def create_order(api: ApiClient, items: Iterable[Tuple[int, int]]) -> Order:
    """
    Submit one order for [(perfume_id, quantity), ...]. The backend computes
    prices and the total; the returned order is authoritative.
    """
    body = {
        "items": [{"perfume_id": pid, "quantity": qty} for pid, qty in items],
    }
    return Order.from_dict(unwrap_item(await api.post("/api/orders", json=body)))


async def list_orders(api: ApiClient) -> List[Order]:
    return [Order.from_dict(row) for row in unwrap_list(await api.get("/api/orders"))]


async def get_order(api: ApiClient, order_id: int) -> Order:
    return Order.from_dict(unwrap_item(await api.get(f"/api/orders/{order_id}")))


async def upload_payment_proof(api: ApiClient, order_id: int, path: str) -> Any:
    """Attach a payment proof image; the backend moves the order to paid."""
    return await api.post(
        f"/api/orders/{order_id}/payment",
        files={"payment_proof": _file_part(path)},
    )


# ---------------------------
# Admin: perfumes & images
# ---------------------------


async def admin_create_perfume(api: ApiClient, fields: Dict[str, Any]) -> Perfume:
    return Perfume.from_dict(
        unwrap_item(await api.post("/api/admin/perfumes", json=fields))
    )


async def admin_update_perfume(
    api: ApiClient, perfume_id: int, fields: Dict[str, Any]
) -> Perfume:
    return Perfume.from_dict(
        unwrap_item(await api.put(f"/api/admin/perfumes/{perfume_id}", json=fields))
    )


async def admin_delete_perfume(api: ApiClient, perfume_id: int) -> None:
    await api.delete(f"/api/admin/perfumes/{perfume_id}")


async def admin_list_images(api: ApiClient, perfume_id: int) -> List[PerfumeImage]:
    payload = await api.get(f"/api/admin/perfumes/{perfume_id}/images")
    return [PerfumeImage.from_dict(row) for row in unwrap_list(payload)]


async def admin_upload_images(
    api: ApiClient, perfume_id: int, paths: Sequence[str]
) -> Any:
    """
    One file goes to /images as "image", several to /images/batch as
    "images[]". An empty selection is a no-op.
    """
    if not paths:
        return None
    if len(paths) == 1:
        return await api.post(
            f"/api/admin/perfumes/{perfume_id}/images",
            files={"image": _file_part(paths[0])},
        )
    return await api.post(
        f"/api/admin/perfumes/{perfume_id}/images/batch",
        files=[("images[]", _file_part(p)) for p in paths],
    )


async def admin_set_primary_image(api: ApiClient, perfume_id: int, image_id: int) -> None:
    await api.put(f"/api/admin/perfumes/{perfume_id}/images/{image_id}/primary", json={})


async def admin_delete_image(api: ApiClient, perfume_id: int, image_id: int) -> None:
    await api.delete(f"/api/admin/perfumes/{perfume_id}/images/{image_id}")


# ---------------------------
# Admin: users
# ---------------------------


async def admin_list_users(
    api: ApiClient, search: str = "", per_page: int = 50
) -> List[User]:
    payload = await api.get(
        "/api/admin/users", params={"search": search, "per_page": per_page}
    )
    return [User.from_dict(row) for row in unwrap_list(payload)]


async def admin_update_user(
    api: ApiClient, user_id: int, name: str, email: str, role: str
) -> None:
    await api.put(
        f"/api/admin/users/{user_id}",
        json={"name": name, "email": email, "role": role},
    )


async def admin_delete_user(api: ApiClient, user_id: int) -> None:
    await api.delete(f"/api/admin/users/{user_id}")


# ---------------------------
# Admin: orders & reporting
# ---------------------------


async def admin_list_orders(api: ApiClient, status: Optional[str] = None) -> List[Order]:
    params = {"status": status} if status and status != "all" else None
    payload = await api.get("/api/admin/orders", params=params)
    return [Order.from_dict(row) for row in unwrap_list(payload)]


async def admin_verify_order(api: ApiClient, order_id: int) -> None:
    await api.put(f"/api/admin/orders/{order_id}/verify", json={})


async def admin_reject_order(api: ApiClient, order_id: int) -> None:
    await api.put(f"/api/admin/orders/{order_id}/reject", json={})


async def admin_dashboard(api: ApiClient) -> Dict[str, Any]:
    payload = await api.get("/api/admin/dashboard")
    return payload if isinstance(payload, dict) else {}


async def admin_reports(api: ApiClient) -> Dict[str, Any]:
    payload = await api.get("/api/admin/reports")
    return payload if isinstance(payload, dict) else {}
