# app/core/route_permissions.py
"""
Table statique des routes frontend et des rôles autorisés à les afficher.

La table est chargée au démarrage et n'est jamais modifiée. Une route absente
de la table n'a pas de restriction déclarée : la politique appliquée dans ce
cas (refus ou autorisation) est toujours explicite, voir ``can_access``.
"""
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, FrozenSet, Optional, Union

from app.core.config import settings
from app.core.roles import Role


class RoutePolicy(str, Enum):
    DENY = "deny"
    ALLOW = "allow"


# Chemins des routes frontend
DASHBOARD = "/"
POS = "/pos"
PRODUCTS = "/inventory/products"
ADD_PRODUCT = "/inventory/products/add"
USERS = "/users"
ACTIVITY_LOGS = "/admin/logs"
SYSTEM_SETTINGS = "/admin/system"

_ALL_ROLES = frozenset(Role)

ROUTE_PERMISSIONS: Mapping[str, FrozenSet[Role]] = MappingProxyType({
    DASHBOARD: _ALL_ROLES,
    POS: _ALL_ROLES,
    PRODUCTS: frozenset({Role.ADMIN, Role.MANAGER}),
    ADD_PRODUCT: frozenset({Role.ADMIN, Role.MANAGER}),
    USERS: frozenset({Role.ADMIN}),
    ACTIVITY_LOGS: frozenset({Role.ADMIN}),
    SYSTEM_SETTINGS: frozenset({Role.ADMIN}),
})


def normalize_route(route: str) -> str:
    route = route.strip()
    if len(route) > 1:
        route = route.rstrip("/") or "/"
    return route


def allowed_roles(route: str) -> Optional[FrozenSet[Role]]:
    """Rôles autorisés pour une route, None si la route n'est pas déclarée"""
    return ROUTE_PERMISSIONS.get(normalize_route(route))


def can_access(
    role: Union[Role, str],
    route: str,
    default_policy: Optional[Union[RoutePolicy, str]] = None,
) -> bool:
    """
    Indique si un rôle peut afficher une route.

    Args:
        role: Rôle de l'utilisateur
        route: Chemin de la route frontend
        default_policy: Politique pour une route absente de la table,
            ``settings.ROUTE_DEFAULT_POLICY`` si non fournie
    """
    roles = allowed_roles(route)
    if roles is None:
        policy = RoutePolicy(default_policy or settings.ROUTE_DEFAULT_POLICY)
        return policy is RoutePolicy.ALLOW

    try:
        role = Role(role)
    except ValueError:
        return False
    return role in roles


def routes_for_role(role: Union[Role, str]) -> List[str]:
    """Routes déclarées qu'un rôle peut afficher"""
    role = Role(role)
    return sorted(route for route, roles in ROUTE_PERMISSIONS.items() if role in roles)
