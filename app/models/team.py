from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional
from datetime import datetime
from app.database import Base


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Remaining auction budget
    purse: Mapped[int] = mapped_column(Integer, default=10000)

    owner: Mapped[str] = mapped_column(String(255))
    mentor: Mapped[str] = mapped_column(String(255))
    icon_player: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    players: Mapped[list["Player"]] = relationship(
        "Player", back_populates="current_team", order_by="Player.id"
    )

    @property
    def squad_size(self) -> int:
        return len(self.players)

    @property
    def total_spent(self) -> int:
        return sum(p.bid_value or 0 for p in self.players)

    def __repr__(self):
        return f"<Team {self.name} - purse {self.purse:,}>"
