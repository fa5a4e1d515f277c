# app/api/v1/users.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.api.deps import get_current_user, require_permission, require_role
from app.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.core.permissions import has_permission
from app.core.roles import Role
from app.core.security import hash_password
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import UserDetail, UserListResponse, UserRegister, UserUpdate
from app.services import auth_service
from app.services.auth_service import (
    EMAIL_TAKEN,
    USER_NOT_FOUND,
    commit_or_raise,
    ensure_branch_exists,
    find_user_by_email,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user


# =========================
# LIST USERS PAGINATED
# =========================
@router.get("/", response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:read")),
    role: Optional[Role] = None,
    branch_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role.value)
    if branch_id is not None:
        query = query.filter(User.branch_id == branch_id)

    total = query.count()
    users = query.order_by(User.name, User.id).offset((page - 1) * limit).limit(limit).all()
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "users": [u.to_dict() for u in users],
    }


# =========================
# CREATE USER
# =========================
@router.post("/", response_model=UserDetail, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role([Role.ADMIN])),
):
    user = auth_service.register(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
        branch_id=user_data.branch_id,
        phone=user_data.phone,
    )
    logger.info(f"Utilisateur créé: id={user.id} role={user.role} par={current_user.id}")
    return user.to_dict()


# =========================
# GET USER DETAILS
# =========================
@router.get("/{user_id}", response_model=UserDetail)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Admin, manager ou l'utilisateur lui-même"""
    if current_user.id != user_id and not has_permission(Role(current_user.role), "users:read"):
        raise ForbiddenError("Accès refusé")
    return _get_user_or_404(db, user_id).to_dict()


# =========================
# UPDATE USER
# =========================
@router.put("/{user_id}", response_model=UserDetail)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:manage")),
):
    user = _get_user_or_404(db, user_id)
    changes = user_data.model_dump(exclude_unset=True)

    if changes.get("email"):
        email = changes["email"].strip().lower()
        other = find_user_by_email(db, email)
        if other and other.id != user.id:
            raise ConflictError(EMAIL_TAKEN)
        changes["email"] = email

    if "branch_id" in changes:
        ensure_branch_exists(db, changes["branch_id"])

    for field, value in changes.items():
        if field == "password":
            if value:
                user.password_hash = hash_password(value)
        elif field == "role":
            if value is not None:
                user.role = Role(value).value
        elif value is not None or field in ("branch_id", "phone"):
            setattr(user, field, value)

    commit_or_raise(db)
    db.refresh(user)

    logger.info(
        f"Utilisateur mis à jour: id={user.id} champs={sorted(changes)} par={current_user.id}"
    )
    return user.to_dict()


# =========================
# DELETE USER
# =========================
@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role([Role.ADMIN])),
):
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise BadRequestError("Impossible de supprimer votre propre compte")

    db.delete(user)
    commit_or_raise(db)

    logger.warning(f"Utilisateur supprimé: id={user_id} email={user.email} par={current_user.id}")
    return {"message": "Utilisateur supprimé"}
