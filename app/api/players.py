"""
Player API endpoints - CRUD, bulk import and pictures
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.user import User
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus
from app.models.auction import AuctionEvent
from app.models.cricket import BallByBall
from app.importers.player_importer import PlayerImporter, ImportFormatError
from app.storage import save_image, ImageUploadError
from app.auth.utils import require_admin, require_admin_or_manager
from app.api.schemas import (
    PlayerCreate, PlayerUpdate, PlayerResponse, BulkUploadResponse, RowErrorResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["Players"])


def get_player_or_404(player_id: int, db: Session) -> Player:
    player = db.query(Player).filter_by(id=player_id).first()
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.get("", response_model=List[PlayerResponse])
def list_players(
    status: Optional[PlayerStatus] = None,
    type: Optional[PlayerType] = None,
    category: Optional[PlayerCategory] = None,
    team_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """List players, optionally filtered"""
    query = db.query(Player)
    if status is not None:
        query = query.filter(Player.status == status)
    if type is not None:
        query = query.filter(Player.type == type)
    if category is not None:
        query = query.filter(Player.category == category)
    if team_id is not None:
        query = query.filter(Player.current_team_id == team_id)
    return query.order_by(Player.id).all()


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, db: Session = Depends(get_db)):
    return get_player_or_404(player_id, db)


@router.post("", response_model=PlayerResponse, status_code=201)
def create_player(
    request: PlayerCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Register a single player for the auction"""
    player = Player(
        **request.model_dump(),
        current_bid=0,
        status=PlayerStatus.AVAILABLE,
    )
    db.add(player)
    db.commit()
    db.refresh(player)
    return player


@router.patch("/{player_id}", response_model=PlayerResponse)
def update_player(
    player_id: int,
    request: PlayerUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Edit a player's identity fields"""
    player = get_player_or_404(player_id, db)
    changes = request.model_dump(exclude_unset=True)

    new_base = changes.get("base_value")
    if new_base is not None and player.status == PlayerStatus.SOLD and new_base > (player.bid_value or 0):
        raise HTTPException(
            status_code=400,
            detail="Base value cannot exceed the price a sold player went for",
        )

    for field, value in changes.items():
        setattr(player, field, value)
    db.commit()
    db.refresh(player)
    return player


@router.delete("/{player_id}")
def delete_player(
    player_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Remove a player who has not been through the auction"""
    player = get_player_or_404(player_id, db)

    has_history = (
        db.query(AuctionEvent.id).filter_by(player_id=player_id).first() is not None
        or db.query(BallByBall.id).filter(or_(
            BallByBall.batsman_id == player_id,
            BallByBall.bowler_id == player_id,
            BallByBall.fielder_id == player_id,
            BallByBall.dismissed_batsman_id == player_id,
        )).first() is not None
    )
    if has_history:
        raise HTTPException(
            status_code=409,
            detail="Player has auction or match history and cannot be deleted",
        )

    db.delete(player)
    db.commit()
    return {"message": "Player deleted successfully", "id": player_id}


@router.post("/bulk-upload", response_model=BulkUploadResponse, status_code=201)
async def bulk_upload(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Import players from a CSV or Excel sheet"""
    content = await file.read()
    try:
        result = PlayerImporter.import_file(db, file.filename, content)
    except ImportFormatError as e:
        logger.info("Rejected upload %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))

    return BulkUploadResponse(
        created=len(result.players),
        players=[PlayerResponse.model_validate(p) for p in result.players],
        errors=[RowErrorResponse(row=e.row, message=e.message) for e in result.errors],
    )


@router.post("/{player_id}/image", response_model=PlayerResponse)
async def upload_player_image(
    player_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Attach a picture to a player"""
    player = get_player_or_404(player_id, db)
    content = await file.read()
    try:
        player.image = save_image(content, file.content_type, "players")
    except ImageUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(player)
    return player
