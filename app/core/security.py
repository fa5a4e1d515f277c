# app/core/security.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.core.roles import Role

# Gestion du mot de passe
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash d'un mot de passe"""
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Vérifie qu'un mot de passe correspond à son hash"""
    if not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Hash illisible en base
        return False


# =========================
# JWT
# =========================
@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: Role


class TokenIssuer:
    """Émet les tokens d'accès signés {sub, role, iat, exp}"""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 60 * 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expires_minutes)

    @property
    def expires_in(self) -> int:
        return int(self.expires_delta.total_seconds())

    def issue(self, user_id: int, role: Role, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "role": Role(role).value,
            "iat": now,
            "exp": now + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)


class TokenVerifier:
    """Vérifie la signature et l'expiration d'un token d'accès"""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            user_id = int(payload.get("sub"))
            role = Role(payload.get("role"))
        except (JWTError, TypeError, ValueError):
            raise UnauthorizedError()

        return TokenClaims(user_id=user_id, role=role)


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(
        settings.SECRET_KEY,
        settings.ALGORITHM,
        settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_token_verifier() -> TokenVerifier:
    return TokenVerifier(settings.SECRET_KEY, settings.ALGORITHM)
