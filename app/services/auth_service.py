# app/services/auth_service.py
"""
Logique d'authentification : inscription, connexion, déconnexion, profil.

Les tokens sont sans état : aucune session n'est stockée côté serveur, la
déconnexion consiste à abandonner le token côté client.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    BadRequestError,
    ConflictError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
)
from app.core.roles import Role
from app.core.security import TokenIssuer, hash_password, verify_password
from app.models.branch import Branch
from app.models.user import User

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email déjà utilisé"
USER_NOT_FOUND = "Utilisateur introuvable"
BRANCH_NOT_FOUND = "Branche introuvable"


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def ensure_branch_exists(db: Session, branch_id: Optional[int]) -> None:
    if branch_id is None:
        return
    if db.get(Branch, branch_id) is None:
        raise NotFoundError(BRANCH_NOT_FOUND)


def commit_or_raise(db: Session, conflict_message: str = EMAIL_TAKEN) -> None:
    """Commit de la session, les erreurs SQL sont traduites en erreurs applicatives"""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Violation de contrainte: {e.orig}")
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Erreur SQLAlchemy")
        raise InternalError() from e


def register(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Role = Role.CASHIER,
    branch_id: Optional[int] = None,
    phone: Optional[str] = None,
) -> User:
    """Crée un utilisateur, Conflict si l'email existe déjà"""
    email = email.strip().lower()
    if find_user_by_email(db, email):
        raise ConflictError(EMAIL_TAKEN)

    ensure_branch_exists(db, branch_id)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=Role(role).value,
        branch_id=branch_id,
        phone=phone,
        is_active=True,
    )
    db.add(user)
    commit_or_raise(db)
    db.refresh(user)

    logger.info(f"Utilisateur créé: id={user.id} role={user.role} branch={user.branch_id}")
    return user


def login(db: Session, email: str, password: str, issuer: TokenIssuer) -> Dict[str, Any]:
    """
    Vérifie les identifiants et émet un token d'accès.

    Même erreur pour un email inconnu, un mot de passe faux ou un compte
    désactivé.
    """
    logger.info(f"Tentative de login pour: {email}")

    user = find_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Échec de login pour: {email}")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login refusé, compte désactivé: {email}")
        raise InvalidCredentialsError()

    user.last_login = datetime.now(timezone.utc)
    commit_or_raise(db)

    token = issuer.issue(user.id, Role(user.role))

    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": issuer.expires_in,
        "user": user.to_public_dict(),
    }


def logout() -> Dict[str, str]:
    return {"message": "Déconnexion réussie"}


def get_me(db: Session, current_user_id: int) -> Dict[str, Any]:
    user = db.get(User, current_user_id)
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user.to_public_dict()


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise BadRequestError("Mot de passe actuel incorrect")

    user.password_hash = hash_password(new_password)
    commit_or_raise(db)
    logger.info(f"Mot de passe modifié: user={user.id}")
