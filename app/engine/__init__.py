from app.engine.auction_engine import AuctionEngine, BidResolution
from app.engine.analytics import build_auction_summary

__all__ = ["AuctionEngine", "BidResolution", "build_auction_summary"]
