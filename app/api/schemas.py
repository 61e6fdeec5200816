"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime, date

from app.models.player import PlayerType, PlayerCategory, PlayerStatus, MAX_AMOUNT
from app.models.auction import AuctionEventType
from app.models.user import UserRole
from app.models.cricket import MatchStatus, TossDecision, BallType, WicketType


def reject_null(value):
    """Optional in a PATCH body means omitted, never null"""
    if value is None:
        raise ValueError("may not be null")
    return value


# Team Schemas
class TeamBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    owner: str = Field(min_length=1, max_length=255)
    mentor: str = Field(min_length=1, max_length=255)
    icon_player: Optional[str] = None


class TeamCreate(TeamBase):
    purse: Optional[int] = Field(default=None, ge=0, le=MAX_AMOUNT)


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    owner: Optional[str] = Field(default=None, min_length=1, max_length=255)
    mentor: Optional[str] = Field(default=None, min_length=1, max_length=255)
    icon_player: Optional[str] = None
    purse: Optional[int] = Field(default=None, ge=0, le=MAX_AMOUNT)

    @field_validator("name", "owner", "mentor", "purse")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class TeamResponse(TeamBase):
    id: int
    purse: int
    image: Optional[str] = None

    class Config:
        from_attributes = True


# Player Schemas
class PlayerBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    type: PlayerType
    category: PlayerCategory
    role: Optional[str] = Field(default=None, max_length=25)
    image: Optional[str] = None
    base_value: int = Field(ge=0, le=MAX_AMOUNT)


class PlayerCreate(PlayerBase):
    pass


class PlayerUpdate(BaseModel):
    """Identity fields only; status and ownership change through the auction"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[PlayerType] = None
    category: Optional[PlayerCategory] = None
    role: Optional[str] = Field(default=None, max_length=25)
    image: Optional[str] = None
    base_value: Optional[int] = Field(default=None, ge=0, le=MAX_AMOUNT)

    @field_validator("name", "type", "category", "base_value")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class PlayerResponse(PlayerBase):
    id: int
    current_bid: int
    bid_value: Optional[int] = None
    current_team_id: Optional[int] = None
    status: PlayerStatus

    class Config:
        from_attributes = True


class PlayerBrief(BaseModel):
    """Player inside a team listing; bid fields are hidden from non-staff callers"""
    id: int
    name: str
    image: Optional[str] = None
    type: PlayerType
    category: PlayerCategory
    status: PlayerStatus
    current_bid: Optional[int] = None
    base_value: Optional[int] = None
    bid_value: Optional[int] = None

    class Config:
        from_attributes = True


class TeamWithPlayers(TeamResponse):
    players: list[PlayerBrief] = []


class RecentAction(BaseModel):
    """Closed auction round; the sale price is deliberately left out"""
    id: int
    name: str
    image: Optional[str] = None
    type: PlayerType
    category: PlayerCategory
    status: PlayerStatus
    base_value: int
    current_team_id: Optional[int] = None
    current_team_name: Optional[str] = None
    updated_at: datetime


# Auction Schemas
class ResolveBidRequest(BaseModel):
    player_id: int
    team_id: int
    amount: int = Field(ge=0, le=MAX_AMOUNT)


class ResolveBidResponse(BaseModel):
    player: PlayerResponse
    team: TeamResponse


class BidRequest(BaseModel):
    team_id: int
    amount: int = Field(ge=0, le=MAX_AMOUNT)


class AuctionEventResponse(BaseModel):
    id: int
    player_id: int
    team_id: Optional[int] = None
    bid_amount: int
    event_type: AuctionEventType
    bidder_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Bulk upload
class RowErrorResponse(BaseModel):
    row: int
    message: str


class BulkUploadResponse(BaseModel):
    created: int
    players: list[PlayerResponse]
    errors: list[RowErrorResponse]


# Analytics
class PlayerSpendResponse(BaseModel):
    player_id: int
    player_name: str
    amount: int
    percentage: float


class TeamSpendingResponse(BaseModel):
    team_id: int
    team_name: str
    total_spent: int
    players: list[PlayerSpendResponse]


class AnalyticsResponse(BaseModel):
    total_players: int
    total_teams: int
    sold_players: int
    total_auction_value: int
    team_spending: list[TeamSpendingResponse]


# Users / page access
class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    avatar_url: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    role: UserRole


class PageAccessBase(BaseModel):
    page_route: str = Field(min_length=1, max_length=255)
    page_name: str = Field(min_length=1, max_length=255)
    public_access: bool = False
    allowed_roles: Optional[list[str]] = None
    description: Optional[str] = None


class PageAccessUpdate(BaseModel):
    page_route: Optional[str] = Field(default=None, min_length=1, max_length=255)
    page_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    public_access: Optional[bool] = None
    allowed_roles: Optional[list[str]] = None
    description: Optional[str] = None

    @field_validator("page_route", "page_name", "public_access")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class PageAccessResponse(PageAccessBase):
    id: int

    class Config:
        from_attributes = True


class PageAccessCheck(BaseModel):
    page_route: str
    allowed: bool


# Cricket scoring
class TeamRef(BaseModel):
    id: int
    name: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class MatchCreate(BaseModel):
    match_name: str = Field(min_length=1, max_length=255)
    team1_id: int
    team2_id: int
    match_date: date
    venue: Optional[str] = Field(default=None, max_length=255)
    overs: int = Field(default=20, ge=1, le=50)


class MatchAction(BaseModel):
    """One step in the match lifecycle, picked by action"""
    action: Literal["start_match", "end_innings", "end_match", "abandon"]
    toss_winner_id: Optional[int] = None
    toss_decision: Optional[TossDecision] = None
    winner_id: Optional[int] = None
    result_summary: Optional[str] = Field(default=None, max_length=500)


class InningsResponse(BaseModel):
    id: int
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    total_runs: int
    wickets: int
    legal_balls: int
    overs_bowled: float
    run_rate: float
    extras: int
    wides: int
    no_balls: int
    byes: int
    leg_byes: int
    is_completed: bool

    class Config:
        from_attributes = True


class MatchResponse(BaseModel):
    id: int
    match_name: str
    team1: TeamRef
    team2: TeamRef
    toss_winner_id: Optional[int] = None
    toss_decision: Optional[TossDecision] = None
    venue: Optional[str] = None
    match_date: date
    overs: int
    status: MatchStatus
    current_innings: int
    batting_team_id: Optional[int] = None
    winner_id: Optional[int] = None
    result_summary: Optional[str] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True


class MatchDetail(MatchResponse):
    innings: list[InningsResponse] = []


class BallRequest(BaseModel):
    runs: int = Field(default=0, ge=0, le=7)
    ball_type: BallType = BallType.NORMAL
    is_wicket: bool = False
    wicket_type: Optional[WicketType] = None
    batsman_id: Optional[int] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    dismissed_batsman_id: Optional[int] = None
    commentary: Optional[str] = Field(default=None, max_length=500)


class BallResponse(BaseModel):
    id: int
    innings_id: int
    over_number: int
    ball_number: int
    batsman_id: Optional[int] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    dismissed_batsman_id: Optional[int] = None
    runs_scored: int
    ball_type: BallType
    is_boundary: bool
    is_six: bool
    is_wicket: bool
    wicket_type: Optional[WicketType] = None
    commentary: Optional[str] = None

    class Config:
        from_attributes = True


class BallResultResponse(BaseModel):
    ball: BallResponse
    innings: InningsResponse
    match: MatchResponse


class ScoreResponse(BaseModel):
    match: MatchResponse
    innings: list[InningsResponse]
    recent_balls: list[BallResponse]


class UndoResponse(BaseModel):
    message: str
    innings: InningsResponse
