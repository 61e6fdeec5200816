"""
User administration
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models.user import User, UserRole
from app.auth.utils import require_admin
from app.api.schemas import UserResponse, RoleUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return db.query(User).order_by(User.id).all()


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_role(
    user_id: int,
    request: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Promote or demote a user"""
    user = db.query(User).filter_by(id=user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == admin.id and request.role != UserRole.ADMIN:
        raise HTTPException(status_code=400, detail="Admins cannot demote themselves")

    user.role = request.role
    db.commit()
    db.refresh(user)
    return user
