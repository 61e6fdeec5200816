"""
Auction audit log
"""
from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from app.database import Base


class AuctionEventType(str, enum.Enum):
    BID = "BID"
    SOLD = "SOLD"
    UNSOLD = "UNSOLD"


class AuctionEvent(Base):
    """
    One bid/sale action during the live auction.
    Rows are append-only: nothing in the application updates or deletes them.
    """
    __tablename__ = "auction_events"
    __table_args__ = (
        Index("idx_auction_player_time", "player_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), index=True)
    player: Mapped["Player"] = relationship("Player")

    # Null for UNSOLD events
    team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True, index=True)
    team: Mapped[Optional["Team"]] = relationship("Team")

    bid_amount: Mapped[int] = mapped_column(Integer, default=0)
    event_type: Mapped[AuctionEventType] = mapped_column(Enum(AuctionEventType), default=AuctionEventType.BID)
    bidder_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuctionEvent {self.event_type.value}: player {self.player_id} - {self.bid_amount:,}>"
