"""
Tests for live match scoring.
"""
import pytest
from datetime import date

from app.models.cricket import (
    CricketMatch, InningsScore, BallByBall, MatchStatus, TossDecision, BallType, WicketType,
    calculate_overs,
)
from app.engine.scoring import ScoringEngine
from app.engine.errors import NotFound, MatchStateError


def live_match(session, teams, overs=2, toss_decision=TossDecision.BAT):
    """Match where the Royal Strikers won the toss"""
    engine = ScoringEngine(session)
    match = engine.create_match("Opening Night", teams[0].id, teams[1].id, date(2026, 11, 1), overs=overs)
    engine.start_match(match.id, teams[0].id, toss_decision)
    return engine, match


def score(engine, match, *runs):
    for r in runs:
        engine.record_ball(match.id, runs=r)


@pytest.mark.parametrize("legal_balls,overs", [
    (0, 0.0), (5, 0.5), (6, 1.0), (14, 2.2), (120, 20.0),
])
def test_calculate_overs(legal_balls, overs):
    assert calculate_overs(legal_balls) == overs


class TestMatchSetup:

    def test_create_match(self, test_db, teams):
        match = ScoringEngine(test_db).create_match(
            "Opening Night", teams[0].id, teams[1].id, date(2026, 11, 1), venue="Nehru Stadium"
        )
        assert match.status == MatchStatus.UPCOMING
        assert match.overs == 20
        assert match.current_innings == 1
        assert match.innings == []

    def test_same_team_twice(self, test_db, teams):
        with pytest.raises(MatchStateError):
            ScoringEngine(test_db).create_match("Solo", teams[0].id, teams[0].id, date(2026, 11, 1))

    def test_unknown_team(self, test_db, teams):
        with pytest.raises(NotFound):
            ScoringEngine(test_db).create_match("Ghost", teams[0].id, 999, date(2026, 11, 1))

    def test_toss_winner_bowls_first(self, test_db, teams):
        engine, match = live_match(test_db, teams, toss_decision=TossDecision.BOWL)

        assert match.status == MatchStatus.LIVE
        assert match.batting_team_id == teams[1].id
        [innings] = match.innings
        assert innings.innings_number == 1
        assert innings.batting_team_id == teams[1].id
        assert innings.bowling_team_id == teams[0].id
        assert innings.total_runs == 0 and innings.overs_bowled == 0.0

    def test_cannot_start_twice(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        with pytest.raises(MatchStateError):
            engine.start_match(match.id, teams[0].id, TossDecision.BAT)

    def test_toss_winner_must_be_playing(self, test_db, teams):
        engine = ScoringEngine(test_db)
        match = engine.create_match("Opening Night", teams[0].id, teams[1].id, date(2026, 11, 1))
        with pytest.raises(MatchStateError):
            engine.start_match(match.id, 999, TossDecision.BAT)
        with pytest.raises(MatchStateError):
            engine.start_match(match.id, teams[0].id, None)
        assert engine.get_match(match.id).status == MatchStatus.UPCOMING

    def test_no_scoring_before_start(self, test_db, teams):
        engine = ScoringEngine(test_db)
        match = engine.create_match("Opening Night", teams[0].id, teams[1].id, date(2026, 11, 1))
        with pytest.raises(MatchStateError):
            engine.record_ball(match.id, runs=1)


class TestRecordBall:

    def test_extras_accounting(self, test_db, teams):
        engine, match = live_match(test_db, teams)

        four = engine.record_ball(match.id, runs=4)
        wide = engine.record_ball(match.id, runs=1, ball_type=BallType.WIDE)
        no_ball = engine.record_ball(match.id, runs=2, ball_type=BallType.NO_BALL)
        bye = engine.record_ball(match.id, runs=1, ball_type=BallType.BYE)
        leg_bye = engine.record_ball(match.id, runs=2, ball_type=BallType.LEG_BYE)

        innings = engine.get_match(match.id).innings[0]
        assert innings.total_runs == 4 + 2 + 3 + 1 + 2
        assert innings.extras == 2 + 1 + 1 + 2
        assert (innings.wides, innings.no_balls, innings.byes, innings.leg_byes) == (2, 1, 1, 2)
        assert innings.legal_balls == 3
        assert innings.overs_bowled == 0.3

        # Wides and no-balls are re-bowled
        assert [(b.over_number, b.ball_number) for b in (four, wide, no_ball, bye, leg_bye)] == [
            (0, 1), (0, 1), (0, 1), (0, 2), (0, 3),
        ]
        assert four.is_boundary and not bye.is_boundary

    def test_over_rolls_after_six_legal_balls(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        score(engine, match, 0, 0, 0, 0, 0, 0)
        seventh = engine.record_ball(match.id, runs=6)

        assert (seventh.over_number, seventh.ball_number) == (1, 1)
        assert seventh.is_six
        assert engine.get_match(match.id).innings[0].overs_bowled == 1.1

    def test_wicket(self, test_db, teams, players):
        engine, match = live_match(test_db, teams)
        ball = engine.record_ball(
            match.id, is_wicket=True, wicket_type=WicketType.CAUGHT,
            batsman_id=players[0].id, bowler_id=players[1].id, fielder_id=players[2].id,
        )

        assert ball.ball_type == BallType.WICKET
        assert ball.dismissed_batsman_id == players[0].id
        innings = engine.get_match(match.id).innings[0]
        assert innings.wickets == 1
        assert innings.legal_balls == 1

    def test_stumped_off_a_wide_is_not_a_legal_ball(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        engine.record_ball(match.id, ball_type=BallType.WIDE, is_wicket=True, wicket_type=WicketType.STUMPED)

        innings = engine.get_match(match.id).innings[0]
        assert (innings.total_runs, innings.wickets, innings.legal_balls) == (1, 1, 0)

    def test_wicket_type_needs_a_wicket(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        with pytest.raises(MatchStateError):
            engine.record_ball(match.id, runs=1, wicket_type=WicketType.BOWLED)
        assert test_db.query(BallByBall).count() == 0

    def test_unknown_player(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        with pytest.raises(NotFound):
            engine.record_ball(match.id, runs=1, batsman_id=999)


class TestInningsFlow:

    def test_first_innings_ends_when_overs_run_out(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)

        match = engine.get_match(match.id)
        first, second = match.innings
        assert first.is_completed and first.total_runs == 6
        assert match.status == MatchStatus.INNINGS_BREAK
        assert match.current_innings == 2
        assert second.batting_team_id == teams[1].id
        assert match.batting_team_id == teams[1].id

        engine.record_ball(match.id, runs=0)
        assert engine.get_match(match.id).status == MatchStatus.LIVE

    def test_all_out(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=5)
        for _ in range(10):
            engine.record_ball(match.id, is_wicket=True, wicket_type=WicketType.BOWLED)

        match = engine.get_match(match.id)
        assert match.innings[0].is_completed
        assert match.innings[0].wickets == 10
        assert match.current_innings == 2

    def test_chase_completes_the_match(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)
        score(engine, match, 6, 1)

        match = engine.get_match(match.id)
        assert match.status == MatchStatus.COMPLETED
        assert match.winner_id == teams[1].id
        assert match.result_summary == "Thunder Kings won by 10 wickets"
        assert all(i.is_completed for i in match.innings)

        with pytest.raises(MatchStateError):
            engine.record_ball(match.id, runs=1)

    def test_target_defended(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)
        score(engine, match, 0, 0, 0, 0, 0, 0)

        match = engine.get_match(match.id)
        assert match.winner_id == teams[0].id
        assert match.result_summary == "Royal Strikers won by 6 runs"

    def test_tie(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)
        score(engine, match, 1, 1, 1, 1, 1, 1)

        match = engine.get_match(match.id)
        assert match.status == MatchStatus.COMPLETED
        assert match.winner_id is None
        assert match.result_summary == "Match tied"

    def test_end_innings_early(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        score(engine, match, 4)
        engine.end_innings(match.id)
        score(engine, match, 1)
        match = engine.end_innings(match.id)

        assert match.status == MatchStatus.COMPLETED
        assert match.result_summary == "Royal Strikers won by 3 runs"

    def test_end_match_with_declared_result(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        with pytest.raises(MatchStateError):
            engine.end_match(match.id, winner_id=999)

        match = engine.end_match(match.id, winner_id=teams[1].id, result_summary="Awarded on forfeit")
        assert match.status == MatchStatus.COMPLETED
        assert match.winner_id == teams[1].id
        with pytest.raises(MatchStateError):
            engine.abandon(match.id)

    def test_abandon(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        match = engine.abandon(match.id)

        assert match.status == MatchStatus.ABANDONED
        assert match.result_summary == "Match abandoned"
        with pytest.raises(MatchStateError):
            engine.record_ball(match.id, runs=1)


class TestUndo:

    def test_undo_last_ball(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        score(engine, match, 4)
        engine.record_ball(match.id, runs=2, ball_type=BallType.WIDE)

        innings = engine.undo_last_ball(match.id)
        assert (innings.total_runs, innings.extras, innings.wides) == (4, 0, 0)
        assert test_db.query(BallByBall).count() == 1

    def test_nothing_to_undo(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        with pytest.raises(MatchStateError):
            engine.undo_last_ball(match.id)

    def test_undo_reopens_a_finished_match(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)
        score(engine, match, 6, 1)

        innings = engine.undo_last_ball(match.id)
        match = engine.get_match(match.id)
        assert match.status == MatchStatus.LIVE
        assert match.winner_id is None and match.result_summary is None
        assert innings.innings_number == 2
        assert innings.total_runs == 6 and not innings.is_completed

    def test_undo_during_innings_break_reopens_first_innings(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)

        innings = engine.undo_last_ball(match.id)
        match = engine.get_match(match.id)
        assert innings.innings_number == 1
        assert innings.total_runs == 5 and innings.legal_balls == 5
        assert match.current_innings == 1
        assert match.batting_team_id == teams[0].id
        assert match.status == MatchStatus.LIVE
        assert test_db.query(InningsScore).count() == 1


class TestScoreboard:

    def test_recent_balls_newest_first(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=5)
        score(engine, match, *range(7), *range(7))

        board = engine.scoreboard(match.id)
        assert len(board.recent_balls) == 12
        assert [b.runs_scored for b in board.recent_balls[:3]] == [6, 5, 4]

    def test_filter_by_innings(self, test_db, teams):
        engine, match = live_match(test_db, teams, overs=1)
        score(engine, match, 1, 1, 1, 1, 1, 1)

        board = engine.scoreboard(match.id, innings_number=1)
        assert [i.innings_number for i in board.innings] == [1]
        # Nothing is live during the break
        assert board.recent_balls == []

    def test_delete_match_removes_its_innings_and_balls(self, test_db, teams):
        engine, match = live_match(test_db, teams)
        score(engine, match, 1, 2)

        engine.delete_match(match.id)
        assert test_db.query(CricketMatch).count() == 0
        assert test_db.query(InningsScore).count() == 0
        assert test_db.query(BallByBall).count() == 0
