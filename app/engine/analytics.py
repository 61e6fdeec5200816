"""
Auction analytics - totals and per-team spending
"""
from dataclasses import dataclass, field
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.player import Player, PlayerStatus
from app.models.team import Team


@dataclass
class PlayerSpend:
    player_id: int
    player_name: str
    amount: int
    percentage: float  # Share of the team's total spend


@dataclass
class TeamSpending:
    team_id: int
    team_name: str
    total_spent: int
    players: list[PlayerSpend] = field(default_factory=list)


@dataclass
class AuctionSummary:
    total_players: int
    total_teams: int
    sold_players: int
    total_auction_value: int
    team_spending: list[TeamSpending]


def build_auction_summary(session: Session) -> AuctionSummary:
    """Aggregate sold players into totals and a per-team breakdown"""
    total_players = session.query(func.count(Player.id)).scalar() or 0
    total_teams = session.query(func.count(Team.id)).scalar() or 0

    sold = (
        session.query(Player, Team.name)
        .outerjoin(Team, Player.current_team_id == Team.id)
        .filter(Player.status == PlayerStatus.SOLD)
        .order_by(Player.current_team_id, Player.bid_value.desc())
        .all()
    )

    breakdowns: dict[int, TeamSpending] = {}
    total_value = 0
    for player, team_name in sold:
        amount = player.bid_value or 0
        total_value += amount
        if player.current_team_id is None:
            continue
        spending = breakdowns.setdefault(
            player.current_team_id,
            TeamSpending(
                team_id=player.current_team_id,
                team_name=team_name or "Unknown Team",
                total_spent=0,
            ),
        )
        spending.total_spent += amount
        spending.players.append(PlayerSpend(player.id, player.name, amount, 0.0))

    for spending in breakdowns.values():
        for entry in spending.players:
            if spending.total_spent > 0:
                entry.percentage = round(entry.amount / spending.total_spent * 100, 1)

    team_spending = sorted(breakdowns.values(), key=lambda t: -t.total_spent)

    return AuctionSummary(
        total_players=total_players,
        total_teams=total_teams,
        sold_players=len(sold),
        total_auction_value=total_value,
        team_spending=team_spending,
    )
