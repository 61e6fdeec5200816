"""
Auction Engine - resolves live-auction sales against team purses
"""
import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session

from app.models.player import Player, PlayerStatus, OPEN_STATUSES
from app.models.team import Team
from app.models.auction import AuctionEvent, AuctionEventType
from app.engine.repository import AuctionRepository
from app.engine.errors import NotFound, InvalidBid, InsufficientFunds, AlreadySold

logger = logging.getLogger(__name__)


@dataclass
class BidResolution:
    """Records after a successful sale"""
    player: Player
    team: Team


class AuctionEngine:
    """
    Drives one auction session: opening a player, recording bids, and
    closing the round as sold or unsold.

    The running highest bid is never kept on the engine. Callers pass the
    agreed amount into resolve_bid explicitly.
    """

    def __init__(self, session: Session):
        self.session = session
        self.repo = AuctionRepository(session)

    def _require_player(self, player_id: int) -> Player:
        player = self.repo.get_player(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        return player

    def _require_team(self, team_id: int) -> Team:
        team = self.repo.get_team(team_id)
        if team is None:
            raise NotFound(f"Team {team_id} not found")
        return team

    def resolve_bid(self, player_id: int, team_id: int, amount: int) -> BidResolution:
        """
        Sell a player to a team for amount.

        All of it happens in one transaction: the player becomes SOLD and is
        linked to the team, the purse is debited, and a SOLD event is logged.
        Any failure leaves every record as it was.
        """
        with self.repo.save_in_transaction():
            player = self._require_player(player_id)
            team = self._require_team(team_id)

            if player.status not in OPEN_STATUSES:
                raise AlreadySold(f"Player {player.name} is {player.status.value}")
            if amount < player.base_value:
                raise InvalidBid(
                    f"Bid {amount:,} is below base value {player.base_value:,} for {player.name}"
                )
            if amount > team.purse:
                raise InsufficientFunds(
                    f"{team.name} has {team.purse:,} left, cannot pay {amount:,}"
                )

            # Guarded writes catch a concurrent resolution that read the same state
            claimed = self.repo.transition_player(
                player.id,
                OPEN_STATUSES,
                status=PlayerStatus.SOLD,
                bid_value=amount,
                current_bid=amount,
                current_team_id=team.id,
            )
            if not claimed:
                raise AlreadySold(f"Player {player.name} was already resolved")
            if not self.repo.debit_purse(team.id, amount):
                raise InsufficientFunds(f"{team.name} cannot pay {amount:,}")

            self.repo.append_auction_event(
                player.id,
                AuctionEventType.SOLD,
                amount=amount,
                team_id=team.id,
                bidder_name=team.name,
            )

        # Commit expired both objects; they reload with the new state
        logger.info("Sold player %s to team %s for %s", player_id, team_id, amount)
        return BidResolution(player=player, team=team)

    def mark_unsold(self, player_id: int) -> Player:
        """Close a round with no sale. Team purses are untouched."""
        with self.repo.save_in_transaction():
            player = self._require_player(player_id)
            if player.status not in OPEN_STATUSES:
                raise AlreadySold(f"Player {player.name} is {player.status.value}")

            released = self.repo.transition_player(
                player.id,
                OPEN_STATUSES,
                status=PlayerStatus.UNSOLD,
                current_bid=0,
            )
            if not released:
                raise AlreadySold(f"Player {player.name} was already resolved")

            self.repo.append_auction_event(player.id, AuctionEventType.UNSOLD)

        logger.info("Player %s went unsold", player_id)
        return player

    def start_bidding(self, player_id: int) -> Player:
        """Put a player on the block. Unsold players can come back for another round."""
        with self.repo.save_in_transaction():
            player = self._require_player(player_id)
            if player.status == PlayerStatus.IN_PROGRESS:
                return player
            if player.status == PlayerStatus.SOLD:
                raise AlreadySold(f"Player {player.name} is already sold")

            opened = self.repo.transition_player(
                player.id,
                (PlayerStatus.AVAILABLE, PlayerStatus.UNSOLD),
                status=PlayerStatus.IN_PROGRESS,
                current_bid=0,
            )
            if not opened:
                raise AlreadySold(f"Player {player.name} changed status, reload and retry")

        logger.info("Bidding opened for player %s", player_id)
        return player

    def place_bid(self, player_id: int, team_id: int, amount: int) -> AuctionEvent:
        """Record one bid while a player is on the block"""
        with self.repo.save_in_transaction():
            player = self._require_player(player_id)
            team = self._require_team(team_id)

            if player.status in (PlayerStatus.SOLD, PlayerStatus.UNSOLD):
                raise AlreadySold(f"Player {player.name} is {player.status.value}")
            if player.status != PlayerStatus.IN_PROGRESS:
                raise InvalidBid(f"Bidding has not started for {player.name}")
            if amount < player.base_value:
                raise InvalidBid(
                    f"Bid {amount:,} is below base value {player.base_value:,}"
                )
            if amount <= player.current_bid:
                raise InvalidBid(
                    f"Bid {amount:,} must beat current bid {player.current_bid:,}"
                )
            if amount > team.purse:
                raise InsufficientFunds(
                    f"{team.name} has {team.purse:,} left, cannot bid {amount:,}"
                )

            if not self.repo.raise_current_bid(player.id, amount):
                raise InvalidBid(f"Bid {amount:,} was overtaken, reload and retry")

            event = self.repo.append_auction_event(
                player.id,
                AuctionEventType.BID,
                amount=amount,
                team_id=team.id,
                bidder_name=team.name,
            )

        return event

    def recent_actions(self, limit: int = 50) -> list[Player]:
        """Players whose round has closed, most recent first"""
        return self.repo.recent_actions(limit)

    def player_events(self, player_id: int) -> list[AuctionEvent]:
        self._require_player(player_id)
        return self.repo.player_events(player_id)
