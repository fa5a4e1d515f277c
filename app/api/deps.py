# app/api/deps.py

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.permissions import has_permission
from app.core.roles import Role
from app.core.security import TokenClaims, TokenVerifier, get_token_verifier
from app.db.session import get_db
from app.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


# ======================================================
# AUTHENTIFICATION
# ======================================================

def get_token_claims(
    token: Optional[str] = Depends(oauth2_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims:
    """Claims du bearer token, 401 si absent ou invalide"""
    if not token:
        raise UnauthorizedError("Authentification requise")
    return verifier.verify(token)


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    """Récupère l'utilisateur courant depuis le token JWT"""
    user = db.get(User, claims.user_id)
    if not user or not user.is_active:
        raise UnauthorizedError()
    return user


def get_optional_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Utilisateur courant si un token est fourni, None pour un appel anonyme"""
    if not token:
        return None
    return get_current_user(verifier.verify(token), db)


# ======================================================
# ROLES & PERMISSIONS
# ======================================================

def require_role(allowed_roles: List[Role]):
    """Vérifie le rôle de l'utilisateur"""
    allowed = {Role(r).value for r in allowed_roles}

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(f"Rôle requis : {', '.join(sorted(allowed))}")
        return current_user

    return role_checker


def require_permission(permission: str):
    """Vérifie les permissions de l'utilisateur"""

    def permission_checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(Role(current_user.role), permission):
            raise ForbiddenError(f"Permission requise : {permission}")
        return current_user

    return permission_checker


__all__ = [
    "get_db",
    "get_token_claims",
    "get_current_user",
    "get_optional_current_user",
    "require_role",
    "require_permission",
    "oauth2_scheme",
]
