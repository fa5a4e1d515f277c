# app/schemas/user.py
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from typing import Optional, List

from app.core.roles import Role

# Limite de bcrypt
MAX_PASSWORD_BYTES = 72


def check_password(v: str) -> str:
    if not v:
        raise ValueError("Mot de passe requis")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError("Mot de passe trop long (72 octets maximum)")
    return v


# =========================
# Inscription / création
# =========================
class UserRegister(BaseModel):
    """Schéma d'inscription d'un utilisateur"""

    name: str = Field(..., min_length=1, max_length=150, examples=["Ann"])
    email: EmailStr = Field(..., examples=["ann@x.com"])
    password: str = Field(..., examples=["pw123"])
    role: Role = Field(default=Role.CASHIER)
    branch_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("branch_id", "branchId"),
    )
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)


# =========================
# Mise à jour (admin)
# =========================
class UserUpdate(BaseModel):
    """Mise à jour partielle d'un utilisateur"""

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=30)
    role: Optional[Role] = None
    branch_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("branch_id", "branchId"),
    )
    is_active: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_password(v)


# =========================
# Authentification
# =========================
class UserLogin(BaseModel):
    email: EmailStr
    password: str


class PasswordChange(BaseModel):
    current_password: str = Field(
        ...,
        validation_alias=AliasChoices("current_password", "currentPassword"),
    )
    new_password: str = Field(
        ...,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password(v)


# =========================
# Réponses
# =========================
class UserPublic(BaseModel):
    """Projection publique d'un utilisateur"""

    id: int
    name: Optional[str] = None
    email: EmailStr
    role: Role
    branch_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class UserDetail(UserPublic):
    phone: Optional[str] = None
    is_active: bool = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserPublic


class UserListResponse(BaseModel):
    total: int
    page: int
    limit: int
    users: List[UserDetail]


__all__ = [
    "UserRegister",
    "UserUpdate",
    "UserLogin",
    "PasswordChange",
    "UserPublic",
    "UserDetail",
    "TokenResponse",
    "UserListResponse",
]
