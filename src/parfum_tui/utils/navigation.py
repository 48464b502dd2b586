from typing import Dict, Literal

from parfum_tui.utils.state import SessionStore

GUEST_MODES: Dict[str, str] = {"catalog": "Browse Perfumes"}
USER_MODES: Dict[str, str] = {
    "catalog": "Browse Perfumes",
    "cart": "Cart",
    "orders": "My Orders",
}
ADMIN_MODES: Dict[str, str] = {
    "admin_dashboard": "Dashboard",
    "admin_perfumes": "Manage Perfumes",
    "admin_orders": "Payment Verification",
    "admin_users": "Manage Users",
    "admin_reports": "Reports",
}

ALL_MODES: Dict[str, str] = {**GUEST_MODES, **USER_MODES, **ADMIN_MODES}


def role_of(session: SessionStore) -> Literal["guest", "user", "admin"]:
    if not session.is_authenticated():
        return "guest"
    return "admin" if session.is_admin() else "user"


def menu_for(session: SessionStore) -> Dict[str, str]:
    return {"guest": GUEST_MODES, "user": USER_MODES, "admin": ADMIN_MODES}[
        role_of(session)
    ]


def landing_mode(session: SessionStore) -> str:
    """Where a fresh start, a login or a forced logout ends up."""
    return "admin_dashboard" if role_of(session) == "admin" else "catalog"


def can_enter(mode: str, session: SessionStore) -> bool:
    return mode in menu_for(session)
