"""
Live match scoring: fixtures between auction teams, their innings and the ball log
"""
from typing import Optional, List
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, Date, Boolean, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, date
import enum
from app.database import Base

BALLS_PER_OVER = 6
MAX_WICKETS = 10


class MatchStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    INNINGS_BREAK = "innings_break"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class TossDecision(str, enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class BallType(str, enum.Enum):
    NORMAL = "normal"
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"
    WICKET = "wicket"


class WicketType(str, enum.Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"
    RETIRED = "retired"


# Deliveries that count towards the over
LEGAL_BALL_TYPES = (BallType.NORMAL, BallType.BYE, BallType.LEG_BYE, BallType.WICKET)

# Deliveries whose runs come off the bat
BAT_RUN_TYPES = (BallType.NORMAL, BallType.NO_BALL, BallType.WICKET)


def calculate_overs(legal_balls: int) -> float:
    """Overs in cricket notation: 14 legal balls is 2.2"""
    return float(f"{legal_balls // BALLS_PER_OVER}.{legal_balls % BALLS_PER_OVER}")


class CricketMatch(Base):
    __tablename__ = "cricket_matches"
    __table_args__ = (
        Index("idx_cricket_match_teams", "team1_id", "team2_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    match_name: Mapped[str] = mapped_column(String(255))

    # Teams
    team1_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team2_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team1: Mapped["Team"] = relationship("Team", foreign_keys=[team1_id])
    team2: Mapped["Team"] = relationship("Team", foreign_keys=[team2_id])

    # Toss
    toss_winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    toss_decision: Mapped[Optional[TossDecision]] = mapped_column(Enum(TossDecision), nullable=True)

    # Match info
    venue: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    match_date: Mapped[date] = mapped_column(Date, index=True)
    overs: Mapped[int] = mapped_column(Integer, default=20)

    # Progress
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.UPCOMING, index=True)
    current_innings: Mapped[int] = mapped_column(Integer, default=1)
    batting_team_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    batting_team: Mapped[Optional["Team"]] = relationship("Team", foreign_keys=[batting_team_id])

    # Result
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    winner: Mapped[Optional["Team"]] = relationship("Team", foreign_keys=[winner_id])
    result_summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    innings: Mapped[List["InningsScore"]] = relationship(
        "InningsScore",
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="InningsScore.innings_number",
    )

    @property
    def is_finished(self) -> bool:
        return self.status in (MatchStatus.COMPLETED, MatchStatus.ABANDONED)

    def other_team_id(self, team_id: int) -> int:
        return self.team2_id if team_id == self.team1_id else self.team1_id

    def __repr__(self):
        return f"<CricketMatch {self.match_name} ({self.status.value})>"


class InningsScore(Base):
    """Running totals for one innings; always recomputed from its balls"""
    __tablename__ = "innings_scores"
    __table_args__ = (
        UniqueConstraint("match_id", "innings_number", name="unique_match_innings"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("cricket_matches.id"), index=True)
    match: Mapped["CricketMatch"] = relationship("CricketMatch", back_populates="innings")
    innings_number: Mapped[int] = mapped_column(Integer)  # 1 or 2

    batting_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), index=True)
    bowling_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    batting_team: Mapped["Team"] = relationship("Team", foreign_keys=[batting_team_id])
    bowling_team: Mapped["Team"] = relationship("Team", foreign_keys=[bowling_team_id])

    # Score
    total_runs: Mapped[int] = mapped_column(Integer, default=0)
    wickets: Mapped[int] = mapped_column(Integer, default=0)
    legal_balls: Mapped[int] = mapped_column(Integer, default=0)

    # Extras
    extras: Mapped[int] = mapped_column(Integer, default=0)
    wides: Mapped[int] = mapped_column(Integer, default=0)
    no_balls: Mapped[int] = mapped_column(Integer, default=0)
    byes: Mapped[int] = mapped_column(Integer, default=0)
    leg_byes: Mapped[int] = mapped_column(Integer, default=0)

    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    balls: Mapped[List["BallByBall"]] = relationship(
        "BallByBall",
        back_populates="innings",
        cascade="all, delete-orphan",
        order_by="BallByBall.id",
    )

    @property
    def overs_bowled(self) -> float:
        return calculate_overs(self.legal_balls or 0)

    @property
    def run_rate(self) -> float:
        if not self.legal_balls:
            return 0.0
        return round(self.total_runs / self.legal_balls * BALLS_PER_OVER, 2)

    def __repr__(self):
        return f"<Innings {self.innings_number}: {self.total_runs}/{self.wickets} ({self.overs_bowled})>"


class BallByBall(Base):
    __tablename__ = "ball_by_ball"
    __table_args__ = (
        Index("idx_ball_sequence", "innings_id", "over_number", "ball_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    innings_id: Mapped[int] = mapped_column(ForeignKey("innings_scores.id"), index=True)
    innings: Mapped["InningsScore"] = relationship("InningsScore", back_populates="balls")

    over_number: Mapped[int] = mapped_column(Integer)  # 0-based
    ball_number: Mapped[int] = mapped_column(Integer)  # 1-6, extras repeat the previous number

    # Players involved
    batsman_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True, index=True)
    bowler_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True, index=True)
    fielder_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    dismissed_batsman_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # Outcome
    runs_scored: Mapped[int] = mapped_column(Integer, default=0)
    ball_type: Mapped[BallType] = mapped_column(Enum(BallType), default=BallType.NORMAL)
    is_boundary: Mapped[bool] = mapped_column(Boolean, default=False)
    is_six: Mapped[bool] = mapped_column(Boolean, default=False)

    # Wicket
    is_wicket: Mapped[bool] = mapped_column(Boolean, default=False)
    wicket_type: Mapped[Optional[WicketType]] = mapped_column(Enum(WicketType), nullable=True)

    commentary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def is_legal(self) -> bool:
        return self.ball_type in LEGAL_BALL_TYPES

    @property
    def penalty(self) -> int:
        """One-run penalty for wides and no-balls"""
        return 0 if self.is_legal else 1

    @property
    def extra_runs(self) -> int:
        if self.ball_type == BallType.WIDE:
            return self.penalty + self.runs_scored
        if self.ball_type == BallType.NO_BALL:
            return self.penalty
        if self.ball_type in (BallType.BYE, BallType.LEG_BYE):
            return self.runs_scored
        return 0

    @property
    def total_runs(self) -> int:
        return self.runs_scored + self.penalty

    def __repr__(self):
        return f"<Ball {self.over_number}.{self.ball_number}: {self.total_runs} ({self.ball_type.value})>"
