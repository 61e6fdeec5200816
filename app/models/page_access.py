"""
Per-page access rules for the auction UI
"""
from typing import Optional
from sqlalchemy import String, Boolean, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base

VALID_PAGE_ROLES = ("admin", "manager", "user", "public")


class PageAccessSetting(Base):
    __tablename__ = "page_access_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    page_route: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    page_name: Mapped[str] = mapped_column(String(255))
    public_access: Mapped[bool] = mapped_column(Boolean, default=False)
    allowed_roles: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def allows(self, role: Optional[str]) -> bool:
        """Whether a caller with this role (None = anonymous) may open the page"""
        if self.public_access:
            return True
        roles = self.allowed_roles or []
        if "public" in roles:
            return True
        if role is None:
            return False
        # Admins can always reach every page
        return role == "admin" or role in roles

    def __repr__(self):
        return f"<PageAccess {self.page_route}>"
