"""
Tests for bid resolution and the live-auction flow.
"""
import pytest
from unittest.mock import patch
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.database import Base
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus
from app.models.team import Team
from app.models.auction import AuctionEvent, AuctionEventType
from app.engine.auction_engine import AuctionEngine
from app.engine.errors import (
    NotFound, InvalidBid, InsufficientFunds, AlreadySold, PersistenceFailure
)


def snapshot(session, player_id, team_id):
    """Current persisted state, read past the identity map"""
    session.expire_all()
    player = session.get(Player, player_id)
    team = session.get(Team, team_id)
    events = session.query(AuctionEvent).filter_by(player_id=player_id).count()
    return (player.status, player.bid_value, player.current_team_id, player.current_bid, team.purse, events)


class TestResolveBid:
    """Selling a player to a team"""

    def test_sale_scenario(self, test_db, teams, players):
        """base 200, purse 1000, bid 300 -> sold, purse 700"""
        player, team = players[0], teams[0]
        engine = AuctionEngine(test_db)

        result = engine.resolve_bid(player.id, team.id, 300)

        assert result.player.status == PlayerStatus.SOLD
        assert result.player.bid_value == 300
        assert result.player.current_team_id == team.id
        assert result.team.purse == 700

        event = test_db.query(AuctionEvent).filter_by(player_id=player.id).one()
        assert event.event_type == AuctionEventType.SOLD
        assert event.team_id == team.id
        assert event.bid_amount == 300
        assert event.bidder_name == team.name

    def test_second_resolution_fails_and_changes_nothing(self, test_db, teams, players):
        player, team = players[0], teams[0]
        engine = AuctionEngine(test_db)
        engine.resolve_bid(player.id, team.id, 300)
        before = snapshot(test_db, player.id, team.id)

        with pytest.raises(AlreadySold):
            engine.resolve_bid(player.id, team.id, 300)

        after = snapshot(test_db, player.id, team.id)
        assert after == before
        assert after[4] == 700

    def test_already_sold_even_for_another_team(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.resolve_bid(players[2].id, teams[0].id, 100)

        with pytest.raises(AlreadySold):
            engine.resolve_bid(players[2].id, teams[1].id, 200)

        test_db.expire_all()
        assert teams[1].purse == 250

    def test_below_base_value_is_invalid(self, test_db, teams, players):
        """bid 150 against base 200 -> InvalidBid, nothing written"""
        player, team = players[0], teams[0]
        engine = AuctionEngine(test_db)
        before = snapshot(test_db, player.id, team.id)

        with pytest.raises(InvalidBid):
            engine.resolve_bid(player.id, team.id, 150)

        assert snapshot(test_db, player.id, team.id) == before

    @pytest.mark.parametrize("amount", [0, 1, 199])
    def test_any_amount_below_base_is_invalid(self, test_db, teams, players, amount):
        with pytest.raises(InvalidBid):
            AuctionEngine(test_db).resolve_bid(players[0].id, teams[0].id, amount)

    def test_amount_over_purse_is_insufficient(self, test_db, teams, players):
        player, team = players[1], teams[1]  # base 300, purse 250
        engine = AuctionEngine(test_db)
        before = snapshot(test_db, player.id, team.id)

        with pytest.raises(InsufficientFunds):
            engine.resolve_bid(player.id, team.id, 300)

        assert snapshot(test_db, player.id, team.id) == before

    def test_exact_purse_drains_to_zero(self, test_db, teams, players):
        result = AuctionEngine(test_db).resolve_bid(players[2].id, teams[1].id, 250)
        assert result.team.purse == 0

    def test_purse_tracks_every_sale(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        team = teams[0]
        spent = 0
        for player, amount in zip(players, [200, 450, 100]):
            purse_before = team.purse
            engine.resolve_bid(player.id, team.id, amount)
            spent += amount
            assert team.purse == purse_before - amount
            assert team.purse >= 0
        assert team.purse == 1000 - spent

    def test_unknown_player(self, test_db, teams, players):
        with pytest.raises(NotFound):
            AuctionEngine(test_db).resolve_bid(999, teams[0].id, 300)

    def test_unknown_team(self, test_db, teams, players):
        with pytest.raises(NotFound):
            AuctionEngine(test_db).resolve_bid(players[0].id, 999, 300)
        test_db.expire_all()
        assert players[0].status == PlayerStatus.AVAILABLE

    def test_unsold_player_cannot_be_resolved_directly(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.mark_unsold(players[0].id)
        with pytest.raises(AlreadySold):
            engine.resolve_bid(players[0].id, teams[0].id, 300)


class TestAtomicity:
    """A failure after the first write must undo it"""

    def test_storage_error_rolls_back_player_update(self, test_db, teams, players):
        player, team = players[0], teams[0]
        engine = AuctionEngine(test_db)
        before = snapshot(test_db, player.id, team.id)

        error = OperationalError("UPDATE teams", {}, Exception("disk I/O error"))
        with patch.object(engine.repo, "debit_purse", side_effect=error):
            with pytest.raises(PersistenceFailure):
                engine.resolve_bid(player.id, team.id, 300)

        assert snapshot(test_db, player.id, team.id) == before

    def test_lost_purse_race_rolls_back_player_update(self, test_db, teams, players):
        player, team = players[0], teams[0]
        engine = AuctionEngine(test_db)

        with patch.object(engine.repo, "debit_purse", return_value=False):
            with pytest.raises(InsufficientFunds):
                engine.resolve_bid(player.id, team.id, 300)

        state = snapshot(test_db, player.id, team.id)
        assert state[0] == PlayerStatus.AVAILABLE
        assert state[1] is None
        assert state[2] is None
        assert state[4] == 1000


class TestDoubleSubmission:
    """Two sessions racing to sell the same player"""

    def test_stale_reader_loses_with_already_sold(self, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'auction.db'}")
        Base.metadata.create_all(engine)

        with Session(engine) as setup:
            team = Team(name="Royal Strikers", owner="Arjun", mentor="Suresh", purse=1000)
            player = Player(name="Vikram Iyer", type=PlayerType.BATSMAN,
                            category=PlayerCategory.L3, base_value=200,
                            status=PlayerStatus.AVAILABLE)
            setup.add_all([team, player])
            setup.commit()
            team_id, player_id = team.id, player.id

        first = Session(engine)
        second = Session(engine)
        try:
            # Second operator loaded the player before the first sale landed
            stale = second.get(Player, player_id)
            assert stale.status == PlayerStatus.AVAILABLE

            AuctionEngine(first).resolve_bid(player_id, team_id, 300)

            with pytest.raises(AlreadySold):
                AuctionEngine(second).resolve_bid(player_id, team_id, 400)
        finally:
            first.close()
            second.close()

        with Session(engine) as check:
            player = check.get(Player, player_id)
            team = check.get(Team, team_id)
            assert player.bid_value == 300
            assert team.purse == 700
            assert check.query(AuctionEvent).count() == 1
        engine.dispose()


class TestMarkUnsold:

    def test_marks_unsold_without_touching_purse(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        player = engine.mark_unsold(players[0].id)

        assert player.status == PlayerStatus.UNSOLD
        assert player.bid_value is None
        assert player.current_team_id is None
        test_db.expire_all()
        assert [t.purse for t in teams] == [1000, 250]

        event = test_db.query(AuctionEvent).filter_by(player_id=player.id).one()
        assert event.event_type == AuctionEventType.UNSOLD
        assert event.team_id is None

    def test_sold_player_cannot_go_unsold(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.resolve_bid(players[0].id, teams[0].id, 300)
        with pytest.raises(AlreadySold):
            engine.mark_unsold(players[0].id)

    def test_unsold_twice(self, test_db, players):
        engine = AuctionEngine(test_db)
        engine.mark_unsold(players[0].id)
        with pytest.raises(AlreadySold):
            engine.mark_unsold(players[0].id)

    def test_unknown_player(self, test_db):
        with pytest.raises(NotFound):
            AuctionEngine(test_db).mark_unsold(42)


class TestLiveBidding:
    """Opening a round and recording bids before the sale"""

    def test_start_bidding(self, test_db, players):
        player = AuctionEngine(test_db).start_bidding(players[0].id)
        assert player.status == PlayerStatus.IN_PROGRESS
        assert player.current_bid == 0

    def test_start_is_idempotent_while_live(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.start_bidding(players[0].id)
        engine.place_bid(players[0].id, teams[0].id, 250)
        player = engine.start_bidding(players[0].id)
        assert player.current_bid == 250

    def test_unsold_player_returns_for_another_round(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.mark_unsold(players[0].id)
        engine.start_bidding(players[0].id)
        result = engine.resolve_bid(players[0].id, teams[0].id, 200)
        assert result.player.status == PlayerStatus.SOLD

    def test_sold_player_cannot_restart(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.resolve_bid(players[0].id, teams[0].id, 300)
        with pytest.raises(AlreadySold):
            engine.start_bidding(players[0].id)

    def test_bids_raise_current_bid(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        player_id = players[0].id
        engine.start_bidding(player_id)

        engine.place_bid(player_id, teams[0].id, 200)
        engine.place_bid(player_id, teams[1].id, 250)
        engine.place_bid(player_id, teams[0].id, 400)

        test_db.expire_all()
        assert players[0].current_bid == 400
        history = engine.player_events(player_id)
        assert [(e.team_id, e.bid_amount) for e in history] == [
            (teams[0].id, 200), (teams[1].id, 250), (teams[0].id, 400),
        ]
        assert all(e.event_type == AuctionEventType.BID for e in history)

        result = engine.resolve_bid(player_id, teams[0].id, 400)
        assert result.team.purse == 600
        assert result.player.current_bid == 400

    def test_bid_before_start_is_invalid(self, test_db, teams, players):
        with pytest.raises(InvalidBid):
            AuctionEngine(test_db).place_bid(players[0].id, teams[0].id, 300)

    def test_bid_below_base_is_invalid(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.start_bidding(players[0].id)
        with pytest.raises(InvalidBid):
            engine.place_bid(players[0].id, teams[0].id, 150)

    def test_bid_must_beat_current(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.start_bidding(players[0].id)
        engine.place_bid(players[0].id, teams[0].id, 220)
        with pytest.raises(InvalidBid):
            engine.place_bid(players[0].id, teams[1].id, 220)

    def test_bid_over_purse(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.start_bidding(players[0].id)
        with pytest.raises(InsufficientFunds):
            engine.place_bid(players[0].id, teams[1].id, 300)
        assert engine.player_events(players[0].id) == []

    def test_bid_on_closed_round(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.resolve_bid(players[0].id, teams[0].id, 300)
        with pytest.raises(AlreadySold):
            engine.place_bid(players[0].id, teams[0].id, 500)

    def test_recent_actions_only_lists_closed_rounds(self, test_db, teams, players):
        engine = AuctionEngine(test_db)
        engine.resolve_bid(players[0].id, teams[0].id, 300)
        engine.mark_unsold(players[1].id)
        engine.start_bidding(players[2].id)

        ids = {p.id for p in engine.recent_actions()}
        assert ids == {players[0].id, players[1].id}

    def test_events_for_unknown_player(self, test_db):
        with pytest.raises(NotFound):
            AuctionEngine(test_db).player_events(404)
