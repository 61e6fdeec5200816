from typing import Optional
from sqlalchemy import String, Integer, Text, ForeignKey, Enum, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from app.database import Base


class PlayerType(str, enum.Enum):
    BATSMAN = "Batsman"
    BOWLER = "Bowler"
    ALL_ROUNDER = "All-Rounder"
    WICKET_KEEPER = "Wicket-Keeper"


class PlayerCategory(str, enum.Enum):
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"


class PlayerStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_PROGRESS = "In-Progress"
    SOLD = "SOLD"
    UNSOLD = "UNSOLD"


# Statuses from which a player can still be sold
OPEN_STATUSES = (PlayerStatus.AVAILABLE, PlayerStatus.IN_PROGRESS)

# Largest amount an INTEGER column holds
MAX_AMOUNT = 2**63 - 1


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    type: Mapped[PlayerType] = mapped_column(Enum(PlayerType), index=True)
    category: Mapped[PlayerCategory] = mapped_column(Enum(PlayerCategory), index=True)
    role: Mapped[Optional[str]] = mapped_column(String(25), nullable=True)  # e.g. "Captain", "Opener"

    # Auction
    base_value: Mapped[int] = mapped_column(Integer)
    current_bid: Mapped[int] = mapped_column(Integer, default=0)
    bid_value: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # Final sale price
    status: Mapped[PlayerStatus] = mapped_column(
        Enum(PlayerStatus), default=PlayerStatus.AVAILABLE, index=True
    )

    # Team relationship
    current_team_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True
    )
    current_team: Mapped[Optional["Team"]] = relationship("Team", back_populates="players")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_sold(self) -> bool:
        return self.status == PlayerStatus.SOLD

    def __repr__(self):
        return f"<Player {self.name} ({self.type.value}, {self.category.value}) - {self.status.value}>"
