# app/api/v1/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_current_user, get_token_claims
from app.core.exceptions import ForbiddenError
from app.core.roles import Role
from app.core.route_permissions import routes_for_role
from app.core.security import TokenClaims, TokenIssuer, get_token_issuer
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import (
    PasswordChange,
    TokenResponse,
    UserLogin,
    UserPublic,
    UserRegister,
)
from app.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


# =========================
# ENDPOINTS D'AUTHENTIFICATION
# =========================
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserPublic)
def register(
    data: UserRegister,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_current_user),
):
    """
    Inscription d'un utilisateur.

    Un appel anonyme crée uniquement un caissier sans branche ; attribuer un
    autre rôle ou une branche exige un token administrateur.
    """
    elevated = data.role != Role.CASHIER or data.branch_id is not None
    if elevated and (current_user is None or current_user.role != Role.ADMIN.value):
        raise ForbiddenError("Seul un administrateur peut attribuer un rôle ou une branche")

    user = auth_service.register(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        branch_id=data.branch_id,
        phone=data.phone,
    )
    return user.to_public_dict()


@router.post("/login", response_model=TokenResponse)
def login(
    data: UserLogin,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Connexion utilisateur"""
    return auth_service.login(db, data.email, data.password, issuer)


@router.post("/logout")
def logout(claims: TokenClaims = Depends(get_token_claims)):
    """Déconnexion : le client abandonne son token"""
    logger.info(f"Déconnexion: user={claims.user_id}")
    return auth_service.logout()


@router.get("/me", response_model=UserPublic)
def me(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
):
    """Profil de l'utilisateur connecté"""
    return auth_service.get_me(db, claims.user_id)


@router.get("/verify")
def verify(claims: TokenClaims = Depends(get_token_claims)):
    return {
        "valid": True,
        "user": {"id": claims.user_id, "role": claims.role.value},
    }


@router.post("/change-password")
def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    auth_service.change_password(db, current_user, data.current_password, data.new_password)
    return {"message": "Mot de passe modifié"}


@router.get("/routes")
def allowed_routes(claims: TokenClaims = Depends(get_token_claims)):
    """Routes frontend accessibles au rôle courant"""
    return {"role": claims.role.value, "routes": routes_for_role(claims.role)}
