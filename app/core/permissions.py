#app/core/permissions.py
from app.core.roles import Role

ROLE_PERMISSIONS = {
    Role.ADMIN: {"*"},
    Role.MANAGER: {
        "users:read",
        "branches:read",
    },
    Role.CASHIER: {
        "branches:read",
    },
}


def has_permission(role: Role, permission: str) -> bool:
    """Vérifie si un rôle a une permission (ex: "users:read")"""
    perms = ROLE_PERMISSIONS.get(role, set())
    return "*" in perms or permission in perms
