# app/init_db.py
import logging

from app.core.config import settings
from app.core.roles import Role
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import Branch, User
from app.services import auth_service

logger = logging.getLogger(__name__)


def create_tables() -> None:
    logger.info("Création des tables dans la base de données...")
    Base.metadata.create_all(bind=engine)
    logger.info("Toutes les tables ont été créées avec succès !")


def seed(db) -> User:
    """Branche par défaut et premier administrateur, sans doublon"""
    branch = db.query(Branch).filter(Branch.name == settings.DEFAULT_BRANCH_NAME).first()
    if not branch:
        branch = Branch(name=settings.DEFAULT_BRANCH_NAME, is_active=True)
        db.add(branch)
        db.commit()
        db.refresh(branch)
        logger.info(f"Branche créée: {branch.name}")

    admin = auth_service.find_user_by_email(db, settings.FIRST_ADMIN_EMAIL)
    if admin:
        logger.info(f"Administrateur déjà présent: {admin.email}")
        return admin

    return auth_service.register(
        db,
        name=settings.FIRST_ADMIN_NAME,
        email=settings.FIRST_ADMIN_EMAIL,
        password=settings.FIRST_ADMIN_PASSWORD,
        role=Role.ADMIN,
        branch_id=branch.id,
    )


def init_db() -> None:
    create_tables()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
