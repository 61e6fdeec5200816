"""
Cricket match API endpoints - fixtures, live scoring and undo
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.user import User
from app.models.cricket import MatchStatus
from app.engine.scoring import ScoringEngine
from app.engine.errors import AuctionError
from app.auth.utils import require_admin_or_manager
from app.api.auction import to_http_error
from app.api.schemas import (
    MatchCreate, MatchAction, MatchResponse, MatchDetail, InningsResponse,
    BallRequest, BallResponse, BallResultResponse, ScoreResponse, UndoResponse
)

router = APIRouter(prefix="/cricket", tags=["Cricket Scoring"])


@router.get("", response_model=List[MatchDetail])
def list_matches(
    status: Optional[MatchStatus] = None,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Matches, newest match date first"""
    return ScoringEngine(db).list_matches(status, limit)


@router.post("", response_model=MatchResponse, status_code=201)
def create_match(
    request: MatchCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    try:
        match = ScoringEngine(db).create_match(
            match_name=request.match_name,
            team1_id=request.team1_id,
            team2_id=request.team2_id,
            match_date=request.match_date,
            venue=request.venue,
            overs=request.overs,
            created_by=user.id,
        )
    except AuctionError as e:
        raise to_http_error(e)
    return match


@router.get("/{match_id}", response_model=MatchDetail)
def get_match(match_id: int, db: Session = Depends(get_db)):
    try:
        return ScoringEngine(db).get_match(match_id)
    except AuctionError as e:
        raise to_http_error(e)


@router.patch("/{match_id}", response_model=MatchDetail)
def update_match(
    match_id: int,
    request: MatchAction,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Start the match after the toss, end an innings, finish or abandon"""
    engine = ScoringEngine(db)
    try:
        if request.action == "start_match":
            match = engine.start_match(match_id, request.toss_winner_id, request.toss_decision)
        elif request.action == "end_innings":
            match = engine.end_innings(match_id)
        elif request.action == "end_match":
            match = engine.end_match(match_id, request.winner_id, request.result_summary)
        else:
            match = engine.abandon(match_id, request.result_summary)
    except AuctionError as e:
        raise to_http_error(e)
    return match


@router.delete("/{match_id}")
def delete_match(
    match_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    try:
        ScoringEngine(db).delete_match(match_id)
    except AuctionError as e:
        raise to_http_error(e)
    return {"message": "Match deleted successfully", "id": match_id}


@router.get("/{match_id}/score", response_model=ScoreResponse)
def get_score(
    match_id: int,
    innings: Optional[int] = Query(None, ge=1, le=2),
    db: Session = Depends(get_db),
):
    """Scoreboard, plus the last two overs of deliveries while the match is live"""
    try:
        board = ScoringEngine(db).scoreboard(match_id, innings)
    except AuctionError as e:
        raise to_http_error(e)
    return ScoreResponse(
        match=MatchResponse.model_validate(board.match),
        innings=[InningsResponse.model_validate(i) for i in board.innings],
        recent_balls=[BallResponse.model_validate(b) for b in board.recent_balls],
    )


@router.post("/{match_id}/score", response_model=BallResultResponse)
def record_ball(
    match_id: int,
    request: BallRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Record one delivery"""
    try:
        ball = ScoringEngine(db).record_ball(match_id, **request.model_dump())
    except AuctionError as e:
        raise to_http_error(e)
    return BallResultResponse(
        ball=BallResponse.model_validate(ball),
        innings=InningsResponse.model_validate(ball.innings),
        match=MatchResponse.model_validate(ball.innings.match),
    )


@router.delete("/{match_id}/score", response_model=UndoResponse)
def undo_last_ball(
    match_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    try:
        innings = ScoringEngine(db).undo_last_ball(match_id)
    except AuctionError as e:
        raise to_http_error(e)
    return UndoResponse(
        message="Last ball undone successfully",
        innings=InningsResponse.model_validate(innings),
    )
