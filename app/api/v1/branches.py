# app/api/v1/branches.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.core.exceptions import ConflictError, NotFoundError
from app.db.session import get_db
from app.models.branch import Branch
from app.models.user import User
from app.schemas.branch import BranchCreate, BranchOut
from app.services.auth_service import BRANCH_NOT_FOUND, commit_or_raise

router = APIRouter(prefix="/branches", tags=["Branches"])

BRANCH_TAKEN = "Une branche porte déjà ce nom"


@router.get("/", response_model=List[BranchOut])
def list_branches(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("branches:read")),
):
    return db.query(Branch).order_by(Branch.name).all()


@router.get("/{branch_id}", response_model=BranchOut)
def get_branch(
    branch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("branches:read")),
):
    branch = db.get(Branch, branch_id)
    if not branch:
        raise NotFoundError(BRANCH_NOT_FOUND)
    return branch


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=BranchOut)
def create_branch(
    data: BranchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("branches:manage")),
):
    if db.query(Branch).filter(Branch.name == data.name).first():
        raise ConflictError(BRANCH_TAKEN)

    branch = Branch(name=data.name, address=data.address, phone=data.phone, is_active=True)
    db.add(branch)
    commit_or_raise(db, BRANCH_TAKEN)
    db.refresh(branch)
    return branch
