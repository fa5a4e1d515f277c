# app/models/user.py
from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Index
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from app.core.roles import Role
from app.db.base import Base


class User(Base):
    """Compte utilisateur de la caisse (admin, manager ou caissier)"""
    __tablename__ = "users"

    # =====================================
    # IDENTIFIANT
    # =====================================
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)

    # =====================================
    # RÔLE ET RATTACHEMENT
    # =====================================
    role = Column(String(20), nullable=False, default=Role.CASHIER.value, comment="admin, manager, cashier")
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True)

    # =====================================
    # STATUT
    # =====================================
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relations
    branch = relationship("Branch", back_populates="users")

    __table_args__ = (
        Index("idx_users_branch_role", "branch_id", "role"),
    )

    @validates("email")
    def normalize_email(self, key, value: str) -> str:
        return value.strip().lower() if value else value

    @validates("role")
    def validate_role(self, key, value) -> str:
        return Role(value).value

    def to_public_dict(self) -> Dict[str, Any]:
        """Projection publique, jamais le hash du mot de passe"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "branch_id": self.branch_id,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_public_dict()
        data.update({
            "phone": self.phone,
            "is_active": self.is_active,
            "last_login": self.last_login.isoformat() if self.last_login else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        })
        return data
