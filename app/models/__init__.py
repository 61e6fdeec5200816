from app.models.user import User, UserRole
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus
from app.models.team import Team
from app.models.auction import AuctionEvent, AuctionEventType
from app.models.page_access import PageAccessSetting
from app.models.cricket import (
    CricketMatch, InningsScore, BallByBall, MatchStatus, TossDecision, BallType, WicketType
)

__all__ = [
    "User",
    "UserRole",
    "Player",
    "PlayerType",
    "PlayerCategory",
    "PlayerStatus",
    "Team",
    "AuctionEvent",
    "AuctionEventType",
    "PageAccessSetting",
    "CricketMatch",
    "InningsScore",
    "BallByBall",
    "MatchStatus",
    "TossDecision",
    "BallType",
    "WicketType",
]
