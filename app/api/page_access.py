"""
Page access settings - which roles may open which UI page
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.user import User
from app.models.page_access import PageAccessSetting, VALID_PAGE_ROLES
from app.auth.utils import get_optional_user, require_admin
from app.api.schemas import (
    PageAccessBase, PageAccessUpdate, PageAccessResponse, PageAccessCheck
)

router = APIRouter(prefix="/page-access", tags=["Page Access"])


def validate_roles(roles: Optional[list[str]]) -> None:
    if roles is None:
        return
    invalid = [r for r in roles if r not in VALID_PAGE_ROLES]
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid roles: {', '.join(invalid)}. Valid roles are: {', '.join(VALID_PAGE_ROLES)}",
        )


def get_setting_or_404(setting_id: int, db: Session) -> PageAccessSetting:
    setting = db.query(PageAccessSetting).filter_by(id=setting_id).first()
    if not setting:
        raise HTTPException(status_code=404, detail="Page access setting not found")
    return setting


@router.get("", response_model=List[PageAccessResponse])
def list_settings(db: Session = Depends(get_db)):
    return db.query(PageAccessSetting).order_by(PageAccessSetting.page_route).all()


@router.get("/check", response_model=PageAccessCheck)
def check_access(
    route: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Whether the caller may open a page. Unconfigured pages need a signed-in user."""
    setting = db.query(PageAccessSetting).filter_by(page_route=route).first()
    role = user.role.value if user else None
    if setting is None:
        allowed = user is not None
    else:
        allowed = setting.allows(role)
    return PageAccessCheck(page_route=route, allowed=allowed)


@router.post("", response_model=PageAccessResponse, status_code=201)
def create_setting(
    request: PageAccessBase,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    validate_roles(request.allowed_roles)
    if db.query(PageAccessSetting.id).filter_by(page_route=request.page_route).first():
        raise HTTPException(status_code=409, detail="Page access setting for this route already exists")

    setting = PageAccessSetting(**request.model_dump())
    db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


@router.patch("/{setting_id}", response_model=PageAccessResponse)
def update_setting(
    setting_id: int,
    request: PageAccessUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    validate_roles(request.allowed_roles)
    setting = get_setting_or_404(setting_id, db)
    changes = request.model_dump(exclude_unset=True)

    new_route = changes.get("page_route")
    if new_route and new_route != setting.page_route:
        if db.query(PageAccessSetting.id).filter_by(page_route=new_route).first():
            raise HTTPException(status_code=409, detail="Page access setting for this route already exists")

    for field, value in changes.items():
        setattr(setting, field, value)
    db.commit()
    db.refresh(setting)
    return setting


@router.delete("/{setting_id}")
def delete_setting(
    setting_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    setting = get_setting_or_404(setting_id, db)
    db.delete(setting)
    db.commit()
    return {"message": "Page access setting deleted successfully"}
