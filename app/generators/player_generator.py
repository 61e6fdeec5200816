import random
from faker import Faker
from app.models.player import Player, PlayerType, PlayerCategory, PlayerStatus
from app.database import get_session

fake = Faker('en_IN')


class PlayerGenerator:
    """Generates fictional local-league players for a practice auction"""

    # Type distribution
    TYPE_WEIGHTS = {
        PlayerType.BATSMAN: 35,
        PlayerType.BOWLER: 35,
        PlayerType.ALL_ROUNDER: 20,
        PlayerType.WICKET_KEEPER: 10,
    }

    # Category distribution - few L1 stars, many L4 newcomers
    CATEGORY_WEIGHTS = {
        PlayerCategory.L1: 10,
        PlayerCategory.L2: 20,
        PlayerCategory.L3: 30,
        PlayerCategory.L4: 40,
    }

    # Base value ranges by category, rounded to 50
    BASE_VALUE_RANGES = {
        PlayerCategory.L1: (400, 600),
        PlayerCategory.L2: (250, 400),
        PlayerCategory.L3: (150, 250),
        PlayerCategory.L4: (100, 150),
    }

    ROLES = ["Opener", "Middle Order", "Finisher", "Pace", "Spin", None, None]

    @staticmethod
    def _weighted_choice(weights: dict):
        items = list(weights.keys())
        return random.choices(items, weights=list(weights.values()), k=1)[0]

    @classmethod
    def _base_value(cls, category: PlayerCategory) -> int:
        low, high = cls.BASE_VALUE_RANGES[category]
        return random.randint(low // 50, high // 50) * 50

    @classmethod
    def generate_player(cls, category: PlayerCategory = None) -> Player:
        """Generate one available player"""
        category = category or cls._weighted_choice(cls.CATEGORY_WEIGHTS)
        return Player(
            name=fake.name_male(),
            type=cls._weighted_choice(cls.TYPE_WEIGHTS),
            category=category,
            role=random.choice(cls.ROLES),
            base_value=cls._base_value(category),
            current_bid=0,
            status=PlayerStatus.AVAILABLE,
        )

    @classmethod
    def generate_player_pool(cls, count: int = 120) -> list[Player]:
        """
        Generate a pool of players for the auction.
        Every category is represented at least once so each level has a round.
        """
        players = [cls.generate_player(category) for category in PlayerCategory]
        while len(players) < count:
            players.append(cls.generate_player())
        return players[:count]

    @classmethod
    def save_players_to_db(cls, players: list[Player]) -> None:
        """Save generated players to database"""
        session = get_session()
        try:
            for player in players:
                session.add(player)
            session.commit()
        finally:
            session.close()
