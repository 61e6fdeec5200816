"""
Scoring Engine - runs a live match between two auction teams, ball by ball
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.models.team import Team
from app.models.player import Player
from app.models.cricket import (
    CricketMatch, InningsScore, BallByBall, MatchStatus, TossDecision, BallType, WicketType,
    LEGAL_BALL_TYPES, BAT_RUN_TYPES, BALLS_PER_OVER, MAX_WICKETS,
)
from app.engine.repository import transaction
from app.engine.errors import NotFound, MatchStateError

logger = logging.getLogger(__name__)

# Two overs of context for the scorer's screen
RECENT_BALLS = 12


@dataclass
class Scoreboard:
    match: CricketMatch
    innings: list[InningsScore]
    recent_balls: list[BallByBall] = field(default_factory=list)


def tally(innings: InningsScore) -> None:
    """Recompute the innings totals from its ball log"""
    balls = innings.balls
    innings.total_runs = sum(b.total_runs for b in balls)
    innings.wickets = sum(1 for b in balls if b.is_wicket)
    innings.legal_balls = sum(1 for b in balls if b.is_legal)
    innings.extras = sum(b.extra_runs for b in balls)
    innings.wides = sum(b.extra_runs for b in balls if b.ball_type == BallType.WIDE)
    innings.no_balls = sum(1 for b in balls if b.ball_type == BallType.NO_BALL)
    innings.byes = sum(b.runs_scored for b in balls if b.ball_type == BallType.BYE)
    innings.leg_byes = sum(b.runs_scored for b in balls if b.ball_type == BallType.LEG_BYE)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


class ScoringEngine:
    """
    Match lifecycle: upcoming -> live -> innings_break -> live -> completed.
    A match can be abandoned at any point before it completes.

    Innings totals are never incremented in place. Every recorded or undone
    ball re-tallies the innings from its ball log.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_match(self, match_id: int) -> CricketMatch:
        match = self.session.get(CricketMatch, match_id)
        if match is None:
            raise NotFound(f"Match {match_id} not found")
        return match

    def _require_team(self, team_id: int) -> Team:
        team = self.session.get(Team, team_id)
        if team is None:
            raise NotFound(f"Team {team_id} not found")
        return team

    @staticmethod
    def _current_innings(match: CricketMatch) -> Optional[InningsScore]:
        for innings in match.innings:
            if innings.innings_number == match.current_innings:
                return innings
        return None

    @staticmethod
    def _open_innings(match: CricketMatch, number: int, batting_team_id: int) -> InningsScore:
        innings = InningsScore(
            innings_number=number,
            batting_team_id=batting_team_id,
            bowling_team_id=match.other_team_id(batting_team_id),
        )
        tally(innings)
        innings.is_completed = False
        match.innings.append(innings)
        match.current_innings = number
        match.batting_team_id = batting_team_id
        return innings

    def _close_first_innings(self, match: CricketMatch, innings: InningsScore) -> None:
        innings.is_completed = True
        self._open_innings(match, 2, match.other_team_id(innings.batting_team_id))
        match.status = MatchStatus.INNINGS_BREAK

    @staticmethod
    def _decide_result(match: CricketMatch) -> tuple[Optional[int], str]:
        first, second = match.innings[0], match.innings[1]
        if second.total_runs > first.total_runs:
            winner = second.batting_team
            margin = _plural(MAX_WICKETS - second.wickets, "wicket")
        elif first.total_runs > second.total_runs:
            winner = first.batting_team
            margin = _plural(first.total_runs - second.total_runs, "run")
        else:
            return None, "Match tied"
        return winner.id, f"{winner.name} won by {margin}"

    def _finish(self, match: CricketMatch) -> None:
        for innings in match.innings:
            innings.is_completed = True
        match.winner_id, match.result_summary = self._decide_result(match)
        match.status = MatchStatus.COMPLETED
        logger.info("Match %s completed: %s", match.id, match.result_summary)

    def _check_innings_end(self, match: CricketMatch, innings: InningsScore) -> None:
        """Close the innings when it is all out, out of overs, or the chase is done"""
        chased = innings.innings_number == 2 and innings.total_runs > match.innings[0].total_runs
        all_out = innings.wickets >= MAX_WICKETS
        overs_done = innings.legal_balls >= match.overs * BALLS_PER_OVER
        if not (chased or all_out or overs_done):
            return
        if innings.innings_number == 1:
            self._close_first_innings(match, innings)
        else:
            self._finish(match)

    def list_matches(self, status: Optional[MatchStatus] = None, limit: int = 20) -> list[CricketMatch]:
        query = self.session.query(CricketMatch)
        if status is not None:
            query = query.filter(CricketMatch.status == status)
        return (
            query.order_by(CricketMatch.match_date.desc(), CricketMatch.created_at.desc())
            .limit(limit)
            .all()
        )

    def create_match(
        self,
        match_name: str,
        team1_id: int,
        team2_id: int,
        match_date: date,
        venue: Optional[str] = None,
        overs: int = 20,
        created_by: Optional[int] = None,
    ) -> CricketMatch:
        """Schedule a match between two teams"""
        with transaction(self.session):
            self._require_team(team1_id)
            self._require_team(team2_id)
            if team1_id == team2_id:
                raise MatchStateError("Team 1 and Team 2 cannot be the same")

            match = CricketMatch(
                match_name=match_name,
                team1_id=team1_id,
                team2_id=team2_id,
                match_date=match_date,
                venue=venue,
                overs=overs,
                status=MatchStatus.UPCOMING,
                current_innings=1,
                created_by=created_by,
            )
            self.session.add(match)
        return match

    def delete_match(self, match_id: int) -> None:
        with transaction(self.session):
            self.session.delete(self.get_match(match_id))

    def start_match(self, match_id: int, toss_winner_id: Optional[int], toss_decision: Optional[TossDecision]) -> CricketMatch:
        """Record the toss and open the first innings"""
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.status != MatchStatus.UPCOMING:
                raise MatchStateError(f"Match is already {match.status.value}")
            if toss_winner_id is None or toss_decision is None:
                raise MatchStateError("Toss winner and decision required to start match")
            if toss_winner_id not in (match.team1_id, match.team2_id):
                raise MatchStateError("Toss winner must be one of the two teams")

            match.toss_winner_id = toss_winner_id
            match.toss_decision = toss_decision
            batting_team_id = (
                toss_winner_id if toss_decision == TossDecision.BAT
                else match.other_team_id(toss_winner_id)
            )
            self._open_innings(match, 1, batting_team_id)
            match.status = MatchStatus.LIVE

        logger.info("Match %s started, team %s batting first", match_id, batting_team_id)
        return match

    def end_innings(self, match_id: int) -> CricketMatch:
        """Close the current innings early; after the second one the match is decided"""
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.status not in (MatchStatus.LIVE, MatchStatus.INNINGS_BREAK):
                raise MatchStateError(f"Match is {match.status.value}, not live")
            innings = self._current_innings(match)
            if innings.innings_number == 1:
                self._close_first_innings(match, innings)
            else:
                self._finish(match)
        return match

    def end_match(self, match_id: int, winner_id: Optional[int] = None, result_summary: Optional[str] = None) -> CricketMatch:
        """
        Complete the match. Without an explicit winner or summary, a match
        with both innings on the board is decided on runs.
        """
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.is_finished:
                raise MatchStateError(f"Match is already {match.status.value}")
            if winner_id is not None and winner_id not in (match.team1_id, match.team2_id):
                raise MatchStateError("Winner must be one of the two teams")

            if winner_id is None and result_summary is None and len(match.innings) == 2:
                self._finish(match)
            else:
                for innings in match.innings:
                    innings.is_completed = True
                match.winner_id = winner_id
                match.result_summary = result_summary
                match.status = MatchStatus.COMPLETED
        return match

    def abandon(self, match_id: int, result_summary: Optional[str] = None) -> CricketMatch:
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.is_finished:
                raise MatchStateError(f"Match is already {match.status.value}")
            match.status = MatchStatus.ABANDONED
            match.result_summary = result_summary or "Match abandoned"
        return match

    def record_ball(
        self,
        match_id: int,
        runs: int = 0,
        ball_type: BallType = BallType.NORMAL,
        is_wicket: bool = False,
        wicket_type: Optional[WicketType] = None,
        batsman_id: Optional[int] = None,
        bowler_id: Optional[int] = None,
        fielder_id: Optional[int] = None,
        dismissed_batsman_id: Optional[int] = None,
        commentary: Optional[str] = None,
    ) -> BallByBall:
        """
        Add one delivery to the current innings.

        Wides and no-balls carry a one-run penalty and do not advance the
        over. Runs off a wide, bye or leg bye are extras; runs off a no-ball
        go to the batsman.
        """
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.status not in (MatchStatus.LIVE, MatchStatus.INNINGS_BREAK):
                raise MatchStateError(f"Match is {match.status.value}, not live")
            innings = self._current_innings(match)
            if innings is None or innings.is_completed:
                raise MatchStateError("No active innings found")

            for player_id in (batsman_id, bowler_id, fielder_id, dismissed_batsman_id):
                if player_id is not None and self.session.get(Player, player_id) is None:
                    raise NotFound(f"Player {player_id} not found")

            if ball_type == BallType.WICKET:
                is_wicket = True
            elif is_wicket and ball_type == BallType.NORMAL:
                ball_type = BallType.WICKET
            if wicket_type is not None and not is_wicket:
                raise MatchStateError("Wicket type given for a ball without a wicket")

            legal_before = innings.legal_balls or 0
            legal = ball_type in LEGAL_BALL_TYPES
            ball = BallByBall(
                over_number=legal_before // BALLS_PER_OVER,
                ball_number=legal_before % BALLS_PER_OVER + (1 if legal else 0),
                batsman_id=batsman_id,
                bowler_id=bowler_id,
                fielder_id=fielder_id,
                dismissed_batsman_id=(dismissed_batsman_id or batsman_id) if is_wicket else None,
                runs_scored=runs,
                ball_type=ball_type,
                is_boundary=runs == 4 and ball_type in BAT_RUN_TYPES,
                is_six=runs == 6 and ball_type in BAT_RUN_TYPES,
                is_wicket=is_wicket,
                wicket_type=wicket_type if is_wicket else None,
                commentary=commentary,
            )
            innings.balls.append(ball)
            tally(innings)

            match.status = MatchStatus.LIVE
            self._check_innings_end(match, innings)

        return ball

    def undo_last_ball(self, match_id: int) -> InningsScore:
        """
        Remove the most recent delivery and re-tally.
        During the innings break this reopens the first innings.
        """
        with transaction(self.session):
            match = self.get_match(match_id)
            if match.status in (MatchStatus.UPCOMING, MatchStatus.ABANDONED):
                raise MatchStateError(f"Match is {match.status.value}")
            innings = self._current_innings(match)
            if innings is None:
                raise MatchStateError("No innings found")

            if not innings.balls and innings.innings_number == 2:
                match.innings.remove(innings)
                innings = match.innings[0]
                match.current_innings = 1
                match.batting_team_id = innings.batting_team_id
            if not innings.balls:
                raise MatchStateError("No balls to undo")

            innings.balls.remove(innings.balls[-1])
            tally(innings)
            innings.is_completed = False
            match.status = MatchStatus.LIVE
            match.winner_id = None
            match.result_summary = None

        return innings

    def scoreboard(self, match_id: int, innings_number: Optional[int] = None) -> Scoreboard:
        match = self.get_match(match_id)
        innings = [
            i for i in match.innings
            if innings_number is None or i.innings_number == innings_number
        ]
        recent = []
        if match.status == MatchStatus.LIVE:
            current = self._current_innings(match)
            if current is not None and not current.is_completed:
                recent = list(reversed(current.balls[-RECENT_BALLS:]))
        return Scoreboard(match=match, innings=innings, recent_balls=recent)
