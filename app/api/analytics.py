"""
Analytics API endpoints
"""
from dataclasses import asdict
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.engine.analytics import build_auction_summary
from app.api.schemas import AnalyticsResponse

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("", response_model=AnalyticsResponse)
def get_analytics(db: Session = Depends(get_db)):
    """Auction totals and how each team spent its purse"""
    return AnalyticsResponse(**asdict(build_auction_summary(db)))
