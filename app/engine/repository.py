"""
Persistence collaborator for the auction engine.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.player import Player, PlayerStatus
from app.models.team import Team
from app.models.auction import AuctionEvent, AuctionEventType
from app.engine.errors import AuctionError, PersistenceFailure

logger = logging.getLogger(__name__)


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block, or nothing.
    Auction errors roll back and propagate unchanged; storage errors
    roll back and surface as PersistenceFailure.
    """
    try:
        yield session
        session.commit()
    except AuctionError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Transaction failed")
        raise PersistenceFailure(f"Storage error: {e.__class__.__name__}") from e


class AuctionRepository:
    """
    Reads and guarded writes used by AuctionEngine.

    The guarded writes are single UPDATE statements whose WHERE clause carries
    the precondition, so the row count tells whether another writer got there
    first. They return False instead of raising; the engine decides the error.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_player(self, player_id: int) -> Optional[Player]:
        return self.session.get(Player, player_id)

    def get_team(self, team_id: int) -> Optional[Team]:
        return self.session.get(Team, team_id)

    def save_in_transaction(self):
        return transaction(self.session)

    def transition_player(
        self,
        player_id: int,
        from_statuses: tuple[PlayerStatus, ...],
        **values,
    ) -> bool:
        """Update a player only if its status is still one of from_statuses"""
        stmt = (
            update(Player)
            .where(Player.id == player_id, Player.status.in_(from_statuses))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def raise_current_bid(self, player_id: int, amount: int) -> bool:
        """Move the running bid up, only while the player is live"""
        stmt = (
            update(Player)
            .where(
                Player.id == player_id,
                Player.status == PlayerStatus.IN_PROGRESS,
                Player.current_bid < amount,
            )
            .values(current_bid=amount)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def debit_purse(self, team_id: int, amount: int) -> bool:
        """Take amount from the team purse, only if it stays non-negative"""
        stmt = (
            update(Team)
            .where(Team.id == team_id, Team.purse >= amount)
            .values(purse=Team.purse - amount)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def append_auction_event(
        self,
        player_id: int,
        event_type: AuctionEventType,
        amount: int = 0,
        team_id: Optional[int] = None,
        bidder_name: Optional[str] = None,
    ) -> AuctionEvent:
        event = AuctionEvent(
            player_id=player_id,
            team_id=team_id,
            bid_amount=amount,
            event_type=event_type,
            bidder_name=bidder_name,
        )
        self.session.add(event)
        return event

    def player_events(self, player_id: int) -> list[AuctionEvent]:
        return (
            self.session.query(AuctionEvent)
            .filter_by(player_id=player_id)
            .order_by(AuctionEvent.created_at, AuctionEvent.id)
            .all()
        )

    def recent_actions(self, limit: int = 50) -> list[Player]:
        return (
            self.session.query(Player)
            .filter(Player.status.in_([PlayerStatus.SOLD, PlayerStatus.UNSOLD]))
            .order_by(Player.updated_at.desc(), Player.id.desc())
            .limit(limit)
            .all()
        )
