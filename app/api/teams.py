"""
Team API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.models.team import Team
from app.models.player import Player, PlayerStatus
from app.models.auction import AuctionEvent
from app.models.cricket import CricketMatch
from app.storage import save_image, ImageUploadError
from app.auth.utils import get_optional_user, require_admin, require_admin_or_manager
from app.api.schemas import (
    TeamCreate, TeamUpdate, TeamResponse, TeamWithPlayers, PlayerBrief
)

router = APIRouter(prefix="/teams", tags=["Teams"])


def get_team_or_404(team_id: int, db: Session) -> Team:
    team = db.query(Team).filter_by(id=team_id).first()
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def has_auction_history(team_id: int, db: Session) -> bool:
    """Whether the team has bought a player or bid in any round"""
    owns_players = (
        db.query(Player.id)
        .filter_by(current_team_id=team_id, status=PlayerStatus.SOLD)
        .first()
    )
    has_events = db.query(AuctionEvent.id).filter_by(team_id=team_id).first()
    return owns_players is not None or has_events is not None


def team_with_players(team: Team, show_bids: bool = True) -> TeamWithPlayers:
    players = []
    for p in team.players:
        brief = PlayerBrief.model_validate(p)
        if not show_bids:
            brief.current_bid = None
            brief.base_value = None
            brief.bid_value = None
        players.append(brief)
    return TeamWithPlayers(
        id=team.id,
        name=team.name,
        owner=team.owner,
        mentor=team.mentor,
        icon_player=team.icon_player,
        purse=team.purse,
        image=team.image,
        players=players,
    )


@router.get("", response_model=List[TeamResponse])
def list_teams(db: Session = Depends(get_db)):
    return db.query(Team).order_by(Team.id).all()


@router.get("/players", response_model=List[TeamWithPlayers])
def list_teams_with_players(
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """All teams with their squads. Prices are only shown to admins and managers."""
    show_bids = user is not None and user.can_manage_auction
    teams = (
        db.query(Team)
        .options(selectinload(Team.players))
        .order_by(Team.id)
        .all()
    )
    return [team_with_players(t, show_bids) for t in teams]


@router.get("/{team_id}", response_model=TeamWithPlayers)
def get_team(
    team_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Team details with its squad. Prices are only shown to admins and managers."""
    show_bids = user is not None and user.can_manage_auction
    return team_with_players(get_team_or_404(team_id, db), show_bids)


@router.post("", response_model=TeamResponse, status_code=201)
def create_team(
    request: TeamCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    if db.query(Team.id).filter_by(name=request.name).first():
        raise HTTPException(status_code=409, detail="A team with this name already exists")

    team = Team(
        name=request.name,
        owner=request.owner,
        mentor=request.mentor,
        icon_player=request.icon_player,
        purse=request.purse if request.purse is not None else settings.DEFAULT_TEAM_PURSE,
    )
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


@router.patch("/{team_id}", response_model=TeamResponse)
def update_team(
    team_id: int,
    request: TeamUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    team = get_team_or_404(team_id, db)
    changes = request.model_dump(exclude_unset=True)

    if "purse" in changes and changes["purse"] != team.purse and has_auction_history(team_id, db):
        raise HTTPException(
            status_code=409,
            detail="Purse can only be changed before the team has been in the auction",
        )

    new_name = changes.get("name")
    if new_name and new_name != team.name:
        if db.query(Team.id).filter_by(name=new_name).first():
            raise HTTPException(status_code=409, detail="A team with this name already exists")

    for field, value in changes.items():
        setattr(team, field, value)
    db.commit()
    db.refresh(team)
    return team


@router.delete("/{team_id}")
def delete_team(
    team_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    """Delete a team that has not bought anyone"""
    team = get_team_or_404(team_id, db)

    if has_auction_history(team_id, db):
        raise HTTPException(
            status_code=409,
            detail="Team has auction history and cannot be deleted",
        )

    plays_matches = (
        db.query(CricketMatch.id)
        .filter(or_(CricketMatch.team1_id == team_id, CricketMatch.team2_id == team_id))
        .first()
    )
    if plays_matches:
        raise HTTPException(status_code=409, detail="Team has matches and cannot be deleted")

    db.delete(team)
    db.commit()
    return {"message": "Team deleted successfully", "id": team_id}


@router.post("/{team_id}/image", response_model=TeamResponse)
async def upload_team_image(
    team_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin_or_manager),
):
    """Attach a logo to a team"""
    team = get_team_or_404(team_id, db)
    content = await file.read()
    try:
        team.image = save_image(content, file.content_type, "teams")
    except ImageUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(team)
    return team
