# app/models/__init__.py
"""
Modèles SQLAlchemy - importés ici pour être enregistrés dans Base.metadata
"""
from .branch import Branch
from .user import User

__all__ = [
    "Branch",
    "User",
]
