"""
Auction API endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.models.user import User
from app.engine.auction_engine import AuctionEngine
from app.engine.errors import (
    AuctionError, NotFound, InvalidBid, InsufficientFunds, AlreadySold, MatchStateError,
    PersistenceFailure,
)
from app.auth.utils import require_admin_or_manager
from app.api.schemas import (
    ResolveBidRequest, ResolveBidResponse, BidRequest, PlayerResponse,
    TeamResponse, AuctionEventResponse, RecentAction
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auction", tags=["Auction"])

ERROR_STATUS = {
    NotFound: 404,
    InvalidBid: 400,
    InsufficientFunds: 400,
    AlreadySold: 409,
    MatchStateError: 400,
    PersistenceFailure: 500,
}


def to_http_error(error: AuctionError) -> HTTPException:
    """Map an auction or scoring error onto the status code the client sees"""
    status_code = ERROR_STATUS.get(type(error), 400)
    if status_code == 500:
        return HTTPException(status_code=500, detail="Changes could not be saved, try again")
    return HTTPException(status_code=status_code, detail=error.message)


@router.post("/resolve", response_model=ResolveBidResponse)
def resolve_bid(
    request: ResolveBidRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Sell the player to the team at the agreed amount"""
    engine = AuctionEngine(db)
    try:
        result = engine.resolve_bid(request.player_id, request.team_id, request.amount)
    except AuctionError as e:
        logger.info("Resolution rejected for player %s: %s", request.player_id, e.message)
        raise to_http_error(e)

    return ResolveBidResponse(
        player=PlayerResponse.model_validate(result.player),
        team=TeamResponse.model_validate(result.team),
    )


@router.post("/{player_id}/unsold", response_model=PlayerResponse)
def mark_unsold(
    player_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """No team met the reserve - close the round without a sale"""
    engine = AuctionEngine(db)
    try:
        player = engine.mark_unsold(player_id)
    except AuctionError as e:
        raise to_http_error(e)
    return PlayerResponse.model_validate(player)


@router.post("/{player_id}/start", response_model=PlayerResponse)
def start_bidding(
    player_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Put a player on the block"""
    engine = AuctionEngine(db)
    try:
        player = engine.start_bidding(player_id)
    except AuctionError as e:
        raise to_http_error(e)
    return PlayerResponse.model_validate(player)


@router.post("/{player_id}/bid", response_model=AuctionEventResponse)
def place_bid(
    player_id: int,
    request: BidRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Record a team's bid on the player currently on the block"""
    engine = AuctionEngine(db)
    try:
        event = engine.place_bid(player_id, request.team_id, request.amount)
    except AuctionError as e:
        raise to_http_error(e)
    return AuctionEventResponse.model_validate(event)


@router.get("/recent-actions", response_model=List[RecentAction])
def recent_actions(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Players whose round has closed, newest first"""
    engine = AuctionEngine(db)
    return [
        RecentAction(
            id=p.id,
            name=p.name,
            image=p.image,
            type=p.type,
            category=p.category,
            status=p.status,
            base_value=p.base_value,
            current_team_id=p.current_team_id,
            current_team_name=p.current_team.name if p.current_team else None,
            updated_at=p.updated_at,
        )
        for p in engine.recent_actions(limit)
    ]


@router.get("/{player_id}/events", response_model=List[AuctionEventResponse])
def player_events(player_id: int, db: Session = Depends(get_db)):
    """Bid and sale history for one player"""
    engine = AuctionEngine(db)
    try:
        events = engine.player_events(player_id)
    except AuctionError as e:
        raise to_http_error(e)
    return [AuctionEventResponse.model_validate(e) for e in events]
